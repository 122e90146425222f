"""Install Elm packages through lamdera and tooling through npm/bun."""

import json
from pathlib import Path

from create_lamdera_app.core.features import PackageManager
from create_lamdera_app.helpers.command_runner import run_command
from create_lamdera_app.helpers.helpers_logging import print_skipped, print_step

# Installed into every project; `lamdera install` takes one package at a time
DEFAULT_LAMDERA_PACKAGES: tuple[str, ...] = ("elm/http", "elm/time", "elm/json")


def install_lamdera_packages(project_root: Path, timeout: float | None = None) -> None:
    """Install the default Elm packages, answering lamdera's confirmation."""
    print_step("\nInstalling default packages...")
    for package in DEFAULT_LAMDERA_PACKAGES:
        run_command(
            ["lamdera", "install", package],
            cwd=project_root,
            timeout=timeout,
            input_text="y\n",
        )


def has_package_dependencies(project_root: Path) -> bool:
    """True when package.json declares anything to install."""
    package_json = project_root / "package.json"
    if not package_json.is_file():
        return False
    try:
        data: object = json.loads(package_json.read_text(encoding="utf-8"))
    except json.JSONDecodeError:
        return False
    if not isinstance(data, dict):
        return False
    return any(data.get(section) for section in ("dependencies", "devDependencies"))


def install_packages(
    project_root: Path,
    package_manager: PackageManager,
    timeout: float | None,
) -> bool:
    """Run ``npm install`` / ``bun install`` when package.json needs it.

    Returns:
        True if the install ran, False if there was nothing to install

    Raises:
        CommandTimeoutError: If the install exceeded ``timeout``
        CommandError: If the install failed
    """
    if not has_package_dependencies(project_root):
        print_skipped("No npm packages to install")
        return False

    print_step(f"\nInstalling packages with {package_manager.value}...")
    run_command(package_manager.install_command, cwd=project_root, timeout=timeout)
    return True
