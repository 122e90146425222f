"""Optional user defaults for create-lamdera-app.

Defaults live in a YAML file so people who always want, say, Tailwind and
bun do not have to pass the same flags every time:

    # ~/.config/create-lamdera-app/config.yaml
    tailwind: yes
    test: no
    package_manager: bun
    install_timeout: 600

Command-line flags always win over these values; prompts use them as their
default answer. An unreadable file is reported and ignored.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

import yaml

from create_lamdera_app.core.features import PackageManager, Visibility
from create_lamdera_app.helpers.command_runner import DEFAULT_INSTALL_TIMEOUT
from create_lamdera_app.helpers.helpers_logging import print_warning

CONFIG_ENV_VAR = "CREATE_LAMDERA_APP_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/create-lamdera-app/config.yaml")

# Config keys holding yes/no answers, mapped to UserDefaults attributes
_BOOLEAN_KEYS: dict[str, str] = {
    "cursor": "cursor",
    "tailwind": "tailwind",
    "test": "test",
    "i18n": "i18n",
    "auth": "auth",
    "github": "github",
    "skip_install": "skip_install",
}


@dataclass
class UserDefaults:
    """Default answers used when a flag is not given on the command line."""

    cursor: bool = False
    tailwind: bool = False
    test: bool = False
    i18n: bool = False
    auth: bool = False
    github: bool = False
    skip_install: bool = False
    visibility: Visibility = Visibility.PRIVATE
    package_manager: PackageManager = PackageManager.NPM
    install_timeout: float = DEFAULT_INSTALL_TIMEOUT
    source: Path | None = field(default=None, compare=False)


def get_config_path() -> Path:
    """Return the config file location (env override first)."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


def _coerce_bool(value: object) -> bool | None:
    """Accept YAML booleans and yes/no style strings."""
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        normalized = value.strip().lower()
        if normalized in ("yes", "y", "true", "on", "1"):
            return True
        if normalized in ("no", "n", "false", "off", "0"):
            return False
    return None


def load_user_defaults(path: Path | None = None) -> UserDefaults:
    """Load user defaults from YAML.

    Args:
        path: Explicit config path; defaults to ``get_config_path()``

    Returns:
        UserDefaults with any valid keys from the file applied. Missing or
        invalid files give built-in defaults.
    """
    config_path = path or get_config_path()
    defaults = UserDefaults()

    if not config_path.is_file():
        return defaults

    try:
        raw_data: object = yaml.safe_load(config_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        print_warning(f"Ignoring unreadable config {config_path}: {exc}")
        return defaults

    if raw_data is None:
        return defaults
    if not isinstance(raw_data, dict):
        print_warning(f"Ignoring config {config_path}: expected a mapping at top level")
        return defaults

    defaults.source = config_path
    for key, value in raw_data.items():
        key_name = str(key)
        if key_name in _BOOLEAN_KEYS:
            parsed = _coerce_bool(value)
            if parsed is None:
                print_warning(f"Config {key_name}: expected yes/no, got {value!r}")
                continue
            setattr(defaults, _BOOLEAN_KEYS[key_name], parsed)
        elif key_name == "package_manager":
            try:
                defaults.package_manager = PackageManager.parse(str(value))
            except ValueError as exc:
                print_warning(f"Config package_manager: {exc}")
        elif key_name == "visibility":
            try:
                defaults.visibility = Visibility.parse(str(value))
            except ValueError as exc:
                print_warning(f"Config visibility: {exc}")
        elif key_name == "install_timeout":
            if isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0:
                defaults.install_timeout = float(value)
            else:
                print_warning(f"Config install_timeout: expected a positive number, got {value!r}")
        else:
            print_warning(f"Config {config_path}: unknown key '{key_name}'")

    return defaults
