"""Create a new Lamdera project directory."""

from pathlib import Path

from create_lamdera_app.cli.prompts import ProjectOptions
from create_lamdera_app.core.patching import PatchContext
from create_lamdera_app.core.resolver import (
    SETUP_STEPS,
    WritePlan,
    build_write_plan,
    load_boilerplate_plan,
)
from create_lamdera_app.core.write_plan import ApplyResult, apply_write_plan, get_templates_root
from create_lamdera_app.helpers.helpers_logging import print_header, print_info, print_success
from create_lamdera_app.scaffolding.github import create_github_repository
from create_lamdera_app.scaffolding.packages import install_lamdera_packages, install_packages
from create_lamdera_app.validators.flag_validator import validate_target_directory


class ProjectDirectoryError(Exception):
    """The target directory cannot be used for a new project."""


def step_descriptions() -> dict[str, str]:
    """Progress headers keyed by plan step name."""
    descriptions = {step.name: step.description for step in SETUP_STEPS}
    descriptions["boilerplate"] = "Copying boilerplate with all features"
    return descriptions


def plan_for(options: ProjectOptions, templates_root: Path) -> WritePlan:
    if options.boilerplate:
        return load_boilerplate_plan(templates_root)
    return build_write_plan(options.features, include_base=True)


def _print_next_steps(options: ProjectOptions) -> None:
    runner = options.features.package_manager.runner
    print_success("Project setup complete!")
    print_info("\nTo start the development server:")
    print_info(f"  cd {options.name}")
    if options.features.use_tailwind:
        print_info(f"  {options.features.package_manager.value} start")
    else:
        print_info("  ./lamdera-dev-watch.sh")
    if options.features.use_program_test:
        print_info("\nTo run the tests:")
        print_info(f"  {runner} elm-test-rs --compiler lamdera")


def create_new_project(
    options: ProjectOptions,
    cwd: Path,
    templates_root: Path | None = None,
) -> ApplyResult:
    """Generate ``cwd / options.name`` and run the follow-up steps.

    Args:
        options: Resolved options (``options.name`` must be set)
        cwd: Directory the project is created in
        templates_root: Template directory (defaults to the packaged one)

    Returns:
        ApplyResult for the written project files

    Raises:
        ProjectDirectoryError: If the project directory already exists
        CommandError: If an install or git/gh command fails
    """
    if not options.name:
        raise ProjectDirectoryError("Project name is required")

    project_root = cwd / options.name
    check = validate_target_directory(project_root)
    if not check.valid:
        raise ProjectDirectoryError(check.message or f"Cannot use {project_root}")

    root = templates_root or get_templates_root()
    plan = plan_for(options, root)

    print_header(f"\nCreating {options.name} ({options.features.describe()})")
    project_root.mkdir(parents=True)

    result = apply_write_plan(
        plan,
        project_root,
        PatchContext(features=options.features, project_name=options.name),
        templates_root=root,
        step_descriptions=step_descriptions(),
    )

    if not options.skip_install:
        install_lamdera_packages(project_root, timeout=options.install_timeout)
        install_packages(
            project_root,
            options.features.package_manager,
            timeout=options.install_timeout,
        )

    if options.github:
        create_github_repository(project_root, options.name, options.features.visibility)

    _print_next_steps(options)
    return result
