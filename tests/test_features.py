"""Tests for FeatureSet and the package manager / visibility enums."""

from __future__ import annotations

import dataclasses

import pytest

from create_lamdera_app.core.features import (
    FEATURE_FLAGS,
    FeatureSet,
    PackageManager,
    Visibility,
)


class TestFeatureSet:
    """FeatureSet is an immutable record of independent toggles."""

    def test_all_combinations_covers_every_toggle_assignment(self) -> None:
        combinations = list(FeatureSet.all_combinations())

        assert len(combinations) == 2 ** len(FEATURE_FLAGS) == 32
        assert len({fs.enabled() for fs in combinations}) == 32

    def test_is_frozen(self) -> None:
        features = FeatureSet()

        with pytest.raises(dataclasses.FrozenInstanceError):
            features.use_tailwind = True  # type: ignore[misc]

    def test_enabled_lists_flags_in_step_order(self) -> None:
        features = FeatureSet(use_auth=True, use_tailwind=True, use_cursor_editor=True)

        assert features.enabled() == ("use_cursor_editor", "use_tailwind", "use_auth")

    def test_restricted_to_disables_flags_outside_allowed(self) -> None:
        features = FeatureSet(
            use_tailwind=True,
            use_program_test=True,
            use_i18n=True,
            package_manager=PackageManager.BUN,
        )

        restricted = features.restricted_to(["use_tailwind"])

        assert restricted.enabled() == ("use_tailwind",)
        assert restricted.package_manager is PackageManager.BUN

    def test_restricted_to_never_enables_a_flag(self) -> None:
        assert FeatureSet().restricted_to(FEATURE_FLAGS) == FeatureSet()

    def test_restricted_to_rejects_unknown_flag(self) -> None:
        with pytest.raises(ValueError, match="use_dark_mode"):
            FeatureSet().restricted_to(["use_dark_mode"])

    def test_describe(self) -> None:
        assert FeatureSet().describe() == "no optional features (npm)"
        assert (
            FeatureSet(use_tailwind=True, use_program_test=True).describe()
            == "tailwind, program-test (npm)"
        )


class TestPackageManager:

    def test_runner_per_package_manager(self) -> None:
        assert PackageManager.NPM.runner == "npx"
        assert PackageManager.BUN.runner == "bunx"

    def test_install_command(self) -> None:
        assert PackageManager.BUN.install_command == ["bun", "install"]

    def test_parse_is_case_insensitive(self) -> None:
        assert PackageManager.parse(" Bun ") is PackageManager.BUN

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError, match="yarn"):
            PackageManager.parse("yarn")


class TestVisibility:

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("public", Visibility.PUBLIC),
            ("pub", Visibility.PUBLIC),
            ("PRIVATE", Visibility.PRIVATE),
            ("priv", Visibility.PRIVATE),
        ],
    )
    def test_parse(self, value: str, expected: Visibility) -> None:
        assert Visibility.parse(value) is expected

    def test_gh_flag(self) -> None:
        assert Visibility.PUBLIC.gh_flag == "--public"
        assert Visibility.PRIVATE.gh_flag == "--private"

    def test_parse_rejects_unknown(self) -> None:
        with pytest.raises(ValueError):
            Visibility.parse("internal")
