"""
Flag combination validation for create-lamdera-app.

Every check here runs before any directory is created, so an invalid
invocation leaves the filesystem untouched.

Example:
    >>> from argparse import Namespace
    >>> args = Namespace(init=True, name='my-app', boilerplate=False)
    >>> result = validate_create_app_flags(args)
    >>> result.message
    'Cannot use --name with --init'
"""

import argparse
import re
from dataclasses import dataclass
from pathlib import Path
from typing import ClassVar

PROJECT_NAME_PATTERN = re.compile(r'^[A-Za-z0-9_-]+$')


@dataclass
class ValidationResult:
    """Result of flag validation.

    Attributes:
        valid: Whether the flag combination is valid
        level: Severity level ('error', 'warning', 'ok')
        message: Human-readable message explaining the issue
        suggestion: Optional suggestion for correct usage
    """
    valid: bool
    level: str  # 'error' | 'warning' | 'ok'
    message: str | None = None
    suggestion: str | None = None


def validate_project_name(name: str | None) -> ValidationResult:
    """Check a project name against ``^[A-Za-z0-9_-]+$``.

    Example:
        >>> validate_project_name('my-app_2').valid
        True
        >>> validate_project_name('my app').valid
        False
    """
    if not name:
        return ValidationResult(
            valid=False,
            level='error',
            message="Project name is required",
            suggestion="💡 Example:\n   create-lamdera-app --name my-app",
        )
    if not PROJECT_NAME_PATTERN.match(name):
        return ValidationResult(
            valid=False,
            level='error',
            message=(
                f"Invalid project name '{name}'. "
                + "Use only letters, numbers, hyphens and underscores (no spaces)"
            ),
            suggestion="💡 Example:\n   create-lamdera-app --name my-lamdera-app",
        )
    return ValidationResult(valid=True, level='ok')


def validate_target_directory(path: Path) -> ValidationResult:
    """A new project must not reuse an existing directory."""
    if path.exists():
        return ValidationResult(
            valid=False,
            level='error',
            message=f"Directory {path.name} already exists",
            suggestion=(
                "💡 Choose another --name, or run inside the existing project:\n"
                + f"   cd {path.name} && create-lamdera-app --init"
            ),
        )
    return ValidationResult(valid=True, level='ok')


class CreateAppFlagValidator:
    """Validates flag combinations for create-lamdera-app."""

    # Feature toggles (argparse dest names); None means "not given"
    FEATURE_FLAGS: ClassVar[tuple[str, ...]] = ('cursor', 'tailwind', 'test', 'i18n', 'auth')

    def validate(self, args: argparse.Namespace) -> ValidationResult:
        """Validate flag combinations.

        Args:
            args: Parsed command line arguments

        Returns:
            ValidationResult with validation status and messages
        """
        init = bool(getattr(args, 'init', False))
        boilerplate = bool(getattr(args, 'boilerplate', False))

        if init and getattr(args, 'name', None):
            return ValidationResult(
                valid=False,
                level='error',
                message="Cannot use --name with --init",
                suggestion=(
                    "💡 --init works on the current directory:\n"
                    + "   cd my-app && create-lamdera-app --init"
                ),
            )

        if init and boilerplate:
            return ValidationResult(
                valid=False,
                level='error',
                message="Cannot use --boilerplate with --init",
                suggestion=(
                    "💡 The boilerplate is only available for new projects:\n"
                    + "   create-lamdera-app --name my-app --boilerplate"
                ),
            )

        if getattr(args, 'public', False) and getattr(args, 'private', False):
            return ValidationResult(
                valid=False,
                level='error',
                message="Cannot use both --public and --private",
            )

        name = getattr(args, 'name', None)
        if name is not None:
            name_result = validate_project_name(name)
            if not name_result.valid:
                return name_result

        timeout = getattr(args, 'install_timeout', None)
        if timeout is not None and timeout <= 0:
            return ValidationResult(
                valid=False,
                level='error',
                message="--install-timeout must be a positive number of seconds",
            )

        if boilerplate:
            explicit = self._explicit_feature_flags(args)
            if explicit:
                flag_list = ', '.join(explicit)
                return ValidationResult(
                    valid=True,
                    level='warning',
                    message=f"{flag_list} ignored with --boilerplate (all features are included)",
                )

        return ValidationResult(valid=True, level='ok')

    def _explicit_feature_flags(self, args: argparse.Namespace) -> list[str]:
        return [
            f'--{flag}'
            for flag in self.FEATURE_FLAGS
            if getattr(args, flag, None) is not None
        ]


def validate_create_app_flags(args: argparse.Namespace) -> ValidationResult:
    """Convenience function to validate create-lamdera-app flags.

    Args:
        args: Parsed command line arguments

    Returns:
        ValidationResult with validation status
    """
    validator = CreateAppFlagValidator()
    return validator.validate(args)
