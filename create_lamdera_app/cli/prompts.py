"""Resolve every unset flag to a concrete value.

Flags given on the command line always win. In interactive mode (stdin is a
terminal) the remaining options are asked with click prompts, using the user
config as the default answer; otherwise the config or built-in defaults are
taken as they are.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import dataclass, replace

import click

from create_lamdera_app.core.features import FeatureSet, PackageManager, Visibility
from create_lamdera_app.core.resolver import BOILERPLATE_FEATURES
from create_lamdera_app.helpers.config_loader import UserDefaults
from create_lamdera_app.helpers.helpers_logging import print_header
from create_lamdera_app.validators.flag_validator import validate_project_name

# (argparse dest, FeatureSet field, prompt text)
FEATURE_QUESTIONS: tuple[tuple[str, str, str], ...] = (
    ('cursor', 'use_cursor_editor', "Use Cursor editor configuration?"),
    ('tailwind', 'use_tailwind', "Set up Tailwind CSS?"),
    ('test', 'use_program_test', "Set up lamdera/program-test for end-to-end tests?"),
    ('i18n', 'use_i18n', "Add internationalization and dark/light theme?"),
    ('auth', 'use_auth', "Add Google One Tap authentication?"),
)


@dataclass(frozen=True)
class ProjectOptions:
    """Everything the scaffolding needs, with no unresolved values left."""

    name: str | None
    init: bool
    features: FeatureSet
    github: bool
    skip_install: bool
    boilerplate: bool
    install_timeout: float


def is_interactive() -> bool:
    return sys.stdin.isatty()


def _ask_project_name() -> str:
    def check(value: str) -> str:
        result = validate_project_name(value.strip())
        if not result.valid:
            raise click.BadParameter(result.message or "Invalid project name")
        return value.strip()

    return click.prompt("Project name", value_proc=check)


def _resolve_flag(value: bool | None, default: bool, question: str, interactive: bool) -> bool:
    if value is not None:
        return value
    if interactive:
        return click.confirm(question, default=default)
    return default


def _resolve_package_manager(
    value: str | None,
    defaults: UserDefaults,
    interactive: bool,
) -> PackageManager:
    if value is not None:
        return PackageManager.parse(value)
    if interactive:
        answer = click.prompt(
            "Package manager",
            type=click.Choice([pm.value for pm in PackageManager]),
            default=defaults.package_manager.value,
        )
        return PackageManager.parse(answer)
    return defaults.package_manager


def _resolve_visibility(
    args: argparse.Namespace,
    defaults: UserDefaults,
    interactive: bool,
) -> Visibility:
    if getattr(args, 'public', False):
        return Visibility.PUBLIC
    if getattr(args, 'private', False):
        return Visibility.PRIVATE
    if interactive:
        answer = click.prompt(
            "Repository visibility",
            type=click.Choice([v.value for v in Visibility]),
            default=defaults.visibility.value,
        )
        return Visibility.parse(answer)
    return defaults.visibility


def resolve_options(
    args: argparse.Namespace,
    defaults: UserDefaults,
    interactive: bool,
) -> ProjectOptions:
    """Build ProjectOptions from validated arguments.

    Args:
        args: Parsed and validated command line arguments
        defaults: User defaults from the config file
        interactive: Whether unset options may be asked for

    Returns:
        Fully resolved ProjectOptions

    Raises:
        click.Abort: If the user cancels a prompt (Ctrl+C / Ctrl+D)
    """
    init = bool(args.init)
    boilerplate = bool(args.boilerplate)

    if interactive:
        print_header("🚀 Create Lamdera App")

    name = args.name
    if not init and name is None and interactive:
        name = _ask_project_name()

    if boilerplate:
        features = BOILERPLATE_FEATURES
    else:
        answers = {
            field_name: _resolve_flag(
                getattr(args, dest), getattr(defaults, dest), question, interactive,
            )
            for dest, field_name, question in FEATURE_QUESTIONS
        }
        features = FeatureSet(**answers)

    package_manager = _resolve_package_manager(args.package_manager, defaults, interactive)

    github = False
    visibility = defaults.visibility
    if not init:
        github = _resolve_flag(
            args.github, defaults.github, "Create a GitHub repository?", interactive,
        )
        if github:
            visibility = _resolve_visibility(args, defaults, interactive)

    skip_install = defaults.skip_install if args.skip_install is None else args.skip_install
    timeout = defaults.install_timeout if args.install_timeout is None else args.install_timeout

    return ProjectOptions(
        name=name,
        init=init,
        features=replace(features, package_manager=package_manager, visibility=visibility),
        github=github,
        skip_install=skip_install,
        boilerplate=boilerplate,
        install_timeout=float(timeout),
    )
