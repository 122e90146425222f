"""Template variant tables for files whose content depends on several features.

Each table is an ordered list of (predicate, template) rules evaluated top to
bottom; the first matching rule wins. Every table ends with an unconditional
rule, so selection is total over all feature combinations.

Priority encoded below: the test harness and Tailwind dominate the
Frontend/Types selection. Localization only changes those files when no
higher-priority rule already claimed them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from create_lamdera_app.core.features import FeatureSet

Predicate = Callable[[FeatureSet], bool]


class UnmappedCombinationError(LookupError):
    """No variant rule matched a feature combination (a table defect)."""


def always(_features: FeatureSet) -> bool:
    return True


@dataclass(frozen=True)
class VariantRule:
    """One row of a variant table."""

    predicate: Predicate
    template: str
    label: str


@dataclass(frozen=True)
class VariantTable:
    """Priority-ordered variant rules for one destination path."""

    destination: str
    rules: tuple[VariantRule, ...]

    def __post_init__(self) -> None:
        if not self.rules:
            raise ValueError(f"Variant table for {self.destination} has no rules")

    def select_rule(self, features: FeatureSet) -> VariantRule:
        """Return the first rule whose predicate holds.

        Raises:
            UnmappedCombinationError: If no rule matches
        """
        for rule in self.rules:
            if rule.predicate(features):
                return rule
        raise UnmappedCombinationError(
            f"No template variant for {self.destination} with features: "
            + features.describe()
        )

    def select(self, features: FeatureSet) -> str:
        """Return the template id selected for ``features``."""
        return self.select_rule(features).template

    def coverage(self) -> dict[tuple[str, ...], str]:
        """Evaluate every feature combination.

        Returns:
            Mapping of enabled-flag tuples to selected template ids (32 entries)
        """
        return {
            features.enabled(): self.select(features)
            for features in FeatureSet.all_combinations()
        }


def _rule(template: str, label: str, predicate: Predicate = always) -> VariantRule:
    return VariantRule(predicate=predicate, template=template, label=label)


FRONTEND = VariantTable(
    destination="src/Frontend.elm",
    rules=(
        _rule(
            "variants/Frontend/tailwind-test.elm", "tailwind+test",
            lambda f: f.use_tailwind and f.use_program_test,
        ),
        _rule(
            "variants/Frontend/tailwind.elm", "tailwind",
            lambda f: f.use_tailwind and not f.use_program_test and not f.use_i18n,
        ),
        _rule(
            "variants/Frontend/test-i18n.elm", "test+i18n",
            lambda f: f.use_program_test and f.use_i18n,
        ),
        _rule("variants/Frontend/test.elm", "test", lambda f: f.use_program_test),
        _rule(
            "variants/Frontend/i18n-tailwind.elm", "i18n+tailwind",
            lambda f: f.use_i18n and f.use_tailwind,
        ),
        _rule("variants/Frontend/i18n.elm", "i18n", lambda f: f.use_i18n),
        _rule("variants/Frontend/base.elm", "base"),
    ),
)

# Each Types variant pairs with the Frontend variant chosen for the same features
TYPES = VariantTable(
    destination="src/Types.elm",
    rules=(
        _rule(
            "variants/Types/test-i18n.elm", "test+i18n",
            lambda f: f.use_program_test and f.use_i18n and not f.use_tailwind,
        ),
        _rule("variants/Types/test.elm", "test", lambda f: f.use_program_test),
        _rule("variants/Types/i18n.elm", "i18n", lambda f: f.use_i18n),
        _rule("variants/Types/base.elm", "base"),
    ),
)

BACKEND = VariantTable(
    destination="src/Backend.elm",
    rules=(
        _rule("variants/Backend/test.elm", "test", lambda f: f.use_program_test),
        _rule("variants/Backend/base.elm", "base"),
    ),
)

LOCAL_STORAGE = VariantTable(
    destination="src/LocalStorage.elm",
    rules=(
        _rule(
            "variants/LocalStorage/effect-ports.elm", "effect-wrapped ports",
            lambda f: f.use_program_test,
        ),
        _rule("variants/LocalStorage/ports.elm", "plain ports"),
    ),
)

HEAD_HTML = VariantTable(
    destination="head.html",
    rules=(
        _rule("variants/head/tailwind.html", "tailwind-linked", lambda f: f.use_tailwind),
        _rule("variants/head/inline-handler.html", "inline handler", lambda f: f.use_program_test),
        _rule("variants/head/standard.html", "standard"),
    ),
)

ELM_JSON = VariantTable(
    destination="elm.json",
    rules=(
        _rule("variants/elm.json/test.json", "test dependencies", lambda f: f.use_program_test),
        _rule("variants/elm.json/base.json", "base"),
    ),
)

ELM_PKG_JS_INCLUDES = VariantTable(
    destination="elm-pkg-js-includes.js",
    rules=(
        _rule(
            "variants/elm-pkg-js-includes/nested.js", "nested elm-pkg-js",
            lambda f: f.use_program_test,
        ),
        _rule("variants/elm-pkg-js-includes/root.js", "root script"),
    ),
)

VARIANT_TABLES: tuple[VariantTable, ...] = (
    FRONTEND,
    TYPES,
    BACKEND,
    LOCAL_STORAGE,
    HEAD_HTML,
    ELM_JSON,
    ELM_PKG_JS_INCLUDES,
)
