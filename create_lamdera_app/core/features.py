"""Feature toggles that decide what a generated Lamdera project contains.

A ``FeatureSet`` is built once per invocation (from flags, config defaults or
prompts) and is read-only afterwards. The five boolean toggles are
independent: every one of the 32 combinations is a legal input.
"""

from __future__ import annotations

import itertools
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, replace
from enum import Enum

# Independent boolean toggles, in the order setup steps consume them
FEATURE_FLAGS: tuple[str, ...] = (
    "use_cursor_editor",
    "use_tailwind",
    "use_program_test",
    "use_i18n",
    "use_auth",
)


class PackageManager(Enum):
    """JavaScript package manager used for tooling dependencies."""

    NPM = "npm"
    BUN = "bun"

    @property
    def runner(self) -> str:
        """Binary that executes package bins (``npx`` / ``bunx``)."""
        return "npx" if self is PackageManager.NPM else "bunx"

    @property
    def install_command(self) -> list[str]:
        return [self.value, "install"]

    @classmethod
    def parse(cls, value: str) -> PackageManager:
        """Parse a user-supplied package manager name.

        Raises:
            ValueError: If the name is not a supported package manager
        """
        normalized = value.strip().lower()
        for member in cls:
            if member.value == normalized:
                return member
        choices = ", ".join(member.value for member in cls)
        raise ValueError(f"Invalid package manager '{value}' (expected one of: {choices})")


class Visibility(Enum):
    """GitHub repository visibility."""

    PUBLIC = "public"
    PRIVATE = "private"

    @property
    def gh_flag(self) -> str:
        return f"--{self.value}"

    @classmethod
    def parse(cls, value: str) -> Visibility:
        normalized = value.strip().lower()
        # Short answers from the original interactive prompt
        aliases = {"pub": "public", "priv": "private"}
        normalized = aliases.get(normalized, normalized)
        for member in cls:
            if member.value == normalized:
                return member
        raise ValueError(f"Invalid visibility '{value}' (expected public or private)")


@dataclass(frozen=True)
class FeatureSet:
    """Immutable record of the features selected for one project."""

    use_cursor_editor: bool = False
    use_tailwind: bool = False
    use_program_test: bool = False
    use_i18n: bool = False
    use_auth: bool = False
    package_manager: PackageManager = PackageManager.NPM
    visibility: Visibility = Visibility.PRIVATE

    def enabled(self) -> tuple[str, ...]:
        """Names of the enabled boolean toggles, in FEATURE_FLAGS order."""
        return tuple(flag for flag in FEATURE_FLAGS if getattr(self, flag))

    def restricted_to(self, allowed: Iterable[str]) -> FeatureSet:
        """Return a copy where only toggles named in ``allowed`` may stay enabled."""
        allowed_set = set(allowed)
        unknown = allowed_set.difference(FEATURE_FLAGS)
        if unknown:
            raise ValueError(f"Unknown feature flags: {sorted(unknown)}")
        changes = {
            flag: getattr(self, flag) and flag in allowed_set
            for flag in FEATURE_FLAGS
        }
        return replace(self, **changes)

    def describe(self) -> str:
        """Short human-readable summary, e.g. ``tailwind, test (npm)``."""
        labels = [flag.removeprefix("use_").replace("_", "-") for flag in self.enabled()]
        summary = ", ".join(labels) if labels else "no optional features"
        return f"{summary} ({self.package_manager.value})"

    @classmethod
    def all_combinations(cls) -> Iterator[FeatureSet]:
        """Yield every combination of the boolean toggles (2**5 = 32)."""
        for values in itertools.product((False, True), repeat=len(FEATURE_FLAGS)):
            yield cls(**dict(zip(FEATURE_FLAGS, values)))

