"""Argument parsing for create-lamdera-app."""

import argparse
import sys
from typing import NoReturn

from create_lamdera_app import __version__
from create_lamdera_app.helpers.helpers_logging import print_error, print_info

_YES = frozenset({'yes', 'y', 'true'})
_NO = frozenset({'no', 'n', 'false'})

DESCRIPTION = """\
Create Lamdera App - scaffold a new Lamdera project with optional features

Usage:
  create-lamdera-app                          Interactive mode
  create-lamdera-app --name my-app [options]  Non-interactive mode
  create-lamdera-app --init [options]         Add features to the current project

--name is required in non-interactive mode (when stdin is not a terminal).
"""

EPILOG = """\
Examples:
  # Tailwind and the program-test harness, no GitHub repository
  create-lamdera-app --name my-app --tailwind yes --test yes --no-github

  # Everything, using bun
  create-lamdera-app --name my-app --boilerplate --bun

  # Add i18n to an existing project
  cd my-app && create-lamdera-app --init --i18n yes

Defaults for unset flags can be kept in ~/.config/create-lamdera-app/config.yaml
(or the file named by $CREATE_LAMDERA_APP_CONFIG).
"""


class CreateAppArgumentParser(argparse.ArgumentParser):
    """Argument parser that reports errors in the CLI style and exits 1."""

    def error(self, message: str) -> NoReturn:
        print_error(message)
        print_info(f"Run '{self.prog} --help' for usage.")
        sys.exit(1)


def yes_no(value: str) -> bool:
    """Parse a yes/no flag value.

    Example:
        >>> yes_no('Y')
        True
    """
    normalized = value.strip().lower()
    if normalized in _YES:
        return True
    if normalized in _NO:
        return False
    raise argparse.ArgumentTypeError(f"expected yes or no, got '{value}'")


def _add_toggle(
    parser: argparse.ArgumentParser,
    flag: str,
    help_text: str,
) -> None:
    """Add ``--<flag> <yes|no>`` and ``--no-<flag>``, both writing ``dest=flag``."""
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        f'--{flag}',
        dest=flag,
        type=yes_no,
        metavar='<yes|no>',
        default=None,
        help=help_text,
    )
    group.add_argument(
        f'--no-{flag}',
        dest=flag,
        action='store_const',
        const=False,
        help=f"Same as --{flag} no",
    )


def build_parser() -> CreateAppArgumentParser:
    parser = CreateAppArgumentParser(
        prog='create-lamdera-app',
        description=DESCRIPTION,
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--name',
        metavar='<string>',
        help="Project name: letters, numbers, - and _ (required in non-interactive mode)",
    )
    parser.add_argument(
        '--init',
        action='store_true',
        help="Add features to the Lamdera project in the current directory",
    )

    _add_toggle(parser, 'cursor', "Add Cursor editor configuration")
    _add_toggle(parser, 'tailwind', "Set up Tailwind CSS")
    _add_toggle(parser, 'test', "Set up lamdera/program-test and elm-test-rs")
    _add_toggle(parser, 'i18n', "Add localization and dark/light theme support")
    _add_toggle(parser, 'auth', "Add Google One Tap authentication")
    _add_toggle(parser, 'github', "Create a GitHub repository with the gh CLI")

    parser.add_argument('--public', action='store_true', help="Make the GitHub repository public")
    parser.add_argument('--private', action='store_true', help="Make the GitHub repository private")

    parser.add_argument(
        '--package-manager', '--pm',
        dest='package_manager',
        choices=['npm', 'bun'],
        default=None,
        help="JavaScript package manager for tooling (default: npm)",
    )
    parser.add_argument(
        '--bun',
        dest='package_manager',
        action='store_const',
        const='bun',
        help="Same as --package-manager bun",
    )
    parser.add_argument(
        '--skip-install',
        action='store_true',
        default=None,
        help="Skip lamdera and npm/bun package installation",
    )
    parser.add_argument(
        '--boilerplate',
        action='store_true',
        help="Copy the pre-built project with every feature enabled",
    )
    parser.add_argument(
        '--install-timeout',
        type=int,
        metavar='<seconds>',
        default=None,
        help="Give up on package installation after this many seconds (default: 300)",
    )
    parser.add_argument(
        '--version',
        action='version',
        version=f'%(prog)s {__version__}',
    )
    return parser


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse ``argv`` (defaults to ``sys.argv[1:]``)."""
    return build_parser().parse_args(argv)
