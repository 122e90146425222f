#!/usr/bin/env python3
"""create-lamdera-app - Main Entry Point.

Usage:
    create-lamdera-app [--name NAME | --init] [feature flags]

All flag validation happens before anything is written. Cancelling (Ctrl+C)
is not an error: the run stops immediately and exits 0.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import click

from create_lamdera_app.cli.arguments import parse_args
from create_lamdera_app.cli.prompts import ProjectOptions, is_interactive, resolve_options
from create_lamdera_app.core.patching import PatchError
from create_lamdera_app.core.resolver import ManifestError
from create_lamdera_app.core.write_plan import TemplateNotFoundError
from create_lamdera_app.helpers.command_runner import (
    CommandError,
    PrerequisiteError,
    require_tool,
)
from create_lamdera_app.helpers.config_loader import load_user_defaults
from create_lamdera_app.helpers.helpers_logging import print_error, print_warning
from create_lamdera_app.scaffolding.create import ProjectDirectoryError, create_new_project
from create_lamdera_app.scaffolding.init_existing import (
    NotALamderaProjectError,
    initialize_existing_project,
)
from create_lamdera_app.scaffolding.packages import has_package_dependencies
from create_lamdera_app.validators.flag_validator import (
    ValidationResult,
    validate_create_app_flags,
    validate_project_name,
    validate_target_directory,
)

LAMDERA_INSTALL_HINT = "https://dashboard.lamdera.app/docs/download"

# Failures that end the run with exit code 1
_FATAL_ERRORS = (
    CommandError,
    PrerequisiteError,
    PatchError,
    ManifestError,
    TemplateNotFoundError,
    ProjectDirectoryError,
    NotALamderaProjectError,
)


def _report(result: ValidationResult) -> None:
    print_error(result.message or "Invalid arguments")
    if result.suggestion:
        print(result.suggestion, file=sys.stderr)


def _validate_environment(args: argparse.Namespace, cwd: Path, interactive: bool) -> ValidationResult:
    """Checks that depend on the working directory or terminal."""
    if args.init:
        if not (cwd / "elm.json").is_file():
            return ValidationResult(
                valid=False,
                level='error',
                message="No elm.json found. Run --init from the root of a Lamdera project.",
            )
        return ValidationResult(valid=True, level='ok')

    if args.name is None:
        if interactive:
            return ValidationResult(valid=True, level='ok')
        missing = validate_project_name(None)
        missing.message = "--name is required in non-interactive mode"
        return missing

    return validate_target_directory(cwd / args.name)


def needs_package_manager(options: ProjectOptions, cwd: Path) -> bool:
    """True when an npm/bun install will actually run.

    Only Tailwind and program-test add devDependencies; with --init the
    project's own package.json may already declare some.
    """
    if options.skip_install:
        return False
    if options.boilerplate:
        return True
    if options.features.use_tailwind or options.features.use_program_test:
        return True
    return options.init and has_package_dependencies(cwd)


def check_prerequisites(options: ProjectOptions, cwd: Path) -> None:
    """Raise PrerequisiteError for any missing external tool."""
    require_tool("lamdera", LAMDERA_INSTALL_HINT)
    if needs_package_manager(options, cwd):
        require_tool(options.features.package_manager.value)


def run(options: ProjectOptions, cwd: Path) -> None:
    check_prerequisites(options, cwd)
    if options.init:
        initialize_existing_project(options, cwd)
    else:
        create_new_project(options, cwd)


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    validation = validate_create_app_flags(args)
    if validation.level == 'error':
        _report(validation)
        return 1
    if validation.level == 'warning':
        print_warning(validation.message or "")

    cwd = Path.cwd()
    interactive = is_interactive()
    environment = _validate_environment(args, cwd, interactive)
    if not environment.valid:
        _report(environment)
        return 1

    try:
        options = resolve_options(args, load_user_defaults(), interactive)
        if not options.init and options.name:
            # Interactive names are only known after prompting
            target = validate_target_directory(cwd / options.name)
            if not target.valid:
                _report(target)
                return 1
        run(options, cwd)
    except (click.Abort, KeyboardInterrupt):
        print()
        print_warning("Process interrupted by user")
        return 0
    except _FATAL_ERRORS as exc:
        print_error(str(exc))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
