"""Add features to the Lamdera project in the current directory (``--init``)."""

from pathlib import Path

from create_lamdera_app.cli.prompts import ProjectOptions
from create_lamdera_app.core.patching import PatchContext
from create_lamdera_app.core.resolver import build_write_plan
from create_lamdera_app.core.write_plan import ApplyResult, apply_write_plan
from create_lamdera_app.helpers.helpers_logging import print_header, print_success
from create_lamdera_app.scaffolding.create import step_descriptions
from create_lamdera_app.scaffolding.packages import install_lamdera_packages, install_packages


class NotALamderaProjectError(Exception):
    """``--init`` was run outside a Lamdera project."""


def initialize_existing_project(
    options: ProjectOptions,
    cwd: Path,
    templates_root: Path | None = None,
) -> ApplyResult:
    """Apply the selected features to ``cwd`` without replacing existing files.

    Raises:
        NotALamderaProjectError: If ``cwd`` has no elm.json
        CommandError: If an install command fails
    """
    if not (cwd / "elm.json").is_file():
        raise NotALamderaProjectError(
            f"No elm.json found in {cwd}. Run --init from the root of a Lamdera project."
        )

    print_header(f"\nInitializing {cwd.name} ({options.features.describe()})")
    plan = build_write_plan(options.features, include_base=False)
    result = apply_write_plan(
        plan,
        cwd,
        PatchContext(features=options.features, project_name=cwd.name),
        overwrite_existing=False,
        templates_root=templates_root,
        step_descriptions=step_descriptions(),
    )

    if not options.skip_install:
        install_lamdera_packages(cwd, timeout=options.install_timeout)
        install_packages(cwd, options.features.package_manager, timeout=options.install_timeout)

    print_success("Project setup complete!")
    return result
