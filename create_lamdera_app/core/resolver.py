"""Feature resolver: turn a FeatureSet into an ordered write plan.

The resolver is pure. It decides which template lands at which path and in
what order, and never touches the filesystem; ``write_plan.apply_write_plan``
executes the result.

Setup steps run in a fixed order::

    base -> utilities -> cursor -> tailwind -> test -> i18n -> auth

Later steps may overwrite files written by earlier ones. Each step evaluates
its variant tables against the features applied *so far*, so the last step
that writes a path sees every feature that path's table depends on. That is
what makes the sequential plan agree with evaluating every table once on the
full FeatureSet (``resolve_direct``).

Example:
    >>> plan = build_write_plan(FeatureSet(use_tailwind=True, use_program_test=True))
    >>> final_templates(plan)["src/Frontend.elm"]
    'variants/Frontend/tailwind-test.elm'
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import yaml

from create_lamdera_app.core.features import FeatureSet
from create_lamdera_app.core.variants import (
    BACKEND,
    ELM_JSON,
    ELM_PKG_JS_INCLUDES,
    FRONTEND,
    HEAD_HTML,
    LOCAL_STORAGE,
    TYPES,
    Predicate,
    VariantTable,
    always,
)

# ============================================================================
# Plan entries
# ============================================================================


@dataclass(frozen=True)
class FileWrite:
    """Copy ``template`` to ``destination`` (replacing whatever is there)."""

    destination: str
    template: str
    executable: bool = False
    step: str = ""


@dataclass(frozen=True)
class FilePatch:
    """Run the registered patch ``patch`` on ``destination``.

    When the destination does not exist and ``fallback_template`` is set, the
    template is copied instead of patching.
    """

    destination: str
    patch: str
    fallback_template: str | None = None
    step: str = ""


PlanEntry = FileWrite | FilePatch
WritePlan = tuple[PlanEntry, ...]


# ============================================================================
# Step declarations
# ============================================================================


@dataclass(frozen=True)
class StepWrite:
    """A file a setup step writes.

    Attributes:
        destination: Path relative to the project root
        source: Fixed template id, or a variant table evaluated per FeatureSet
        executable: Whether the written file gets mode 0o755
        when: Write only if this holds for the features applied so far
        yields_to: Skip entirely when any of these flags is enabled in the
            full FeatureSet (a later step owns the file's content)
    """

    destination: str
    source: str | VariantTable
    executable: bool = False
    when: Predicate = always
    yields_to: tuple[str, ...] = ()

    def template_for(self, features: FeatureSet) -> str:
        if isinstance(self.source, VariantTable):
            return self.source.select(features)
        return self.source


@dataclass(frozen=True)
class StepPatch:
    """A file a setup step extends in place."""

    destination: str
    patch: str
    fallback_template: str | None = None


@dataclass(frozen=True)
class SetupStep:
    """One unit of scaffolding work, gated by a feature flag.

    Steps without a flag always run; ``new_project_only`` steps are left out
    when augmenting an existing project (``--init``).
    """

    name: str
    description: str
    items: tuple[StepWrite | StepPatch, ...]
    flag: str | None = None
    new_project_only: bool = False

    def is_active(self, features: FeatureSet, include_base: bool = True) -> bool:
        if self.new_project_only and not include_base:
            return False
        return self.flag is None or bool(getattr(features, self.flag))

    def writes(self) -> tuple[StepWrite, ...]:
        return tuple(item for item in self.items if isinstance(item, StepWrite))


def _table(table: VariantTable, **kwargs: object) -> StepWrite:
    return StepWrite(destination=table.destination, source=table, **kwargs)  # type: ignore[arg-type]


BASE_STEP = SetupStep(
    name="base",
    description="Creating Lamdera project files",
    new_project_only=True,
    items=(
        _table(ELM_JSON),
        _table(BACKEND),
        _table(FRONTEND),
        _table(TYPES),
        StepWrite("src/Env.elm", "base/Env.elm"),
        _table(HEAD_HTML),
        StepWrite(".gitignore", "base/gitignore"),
        StepPatch("package.json", "base:package-json"),
    ),
)

UTILITIES_STEP = SetupStep(
    name="utilities",
    description="Creating utility files",
    items=(
        StepWrite("lamdera-dev-watch.sh", "utilities/lamdera-dev-watch.sh", executable=True),
        StepWrite("toggle-debugger.py", "utilities/toggle-debugger.py", executable=True),
    ),
)

CURSOR_STEP = SetupStep(
    name="cursor",
    description="Adding Cursor editor configuration",
    flag="use_cursor_editor",
    items=(
        StepWrite(".cursorrules", "cursor/cursorrules"),
        StepWrite("openEditor.sh", "cursor/openEditor.sh", executable=True),
    ),
)

TAILWIND_STEP = SetupStep(
    name="tailwind",
    description="Setting up Tailwind CSS",
    flag="use_tailwind",
    items=(
        StepWrite("tailwind.config.js", "features/tailwind/tailwind.config.js"),
        StepWrite("src/styles.css", "features/tailwind/styles.css"),
        _table(HEAD_HTML),
        # With i18n enabled Tailwind only contributes infrastructure; the
        # i18n step writes the Tailwind-aware localized Frontend.
        _table(FRONTEND, yields_to=("use_i18n",)),
        StepPatch("package.json", "tailwind:package-json"),
    ),
)

TEST_STEP = SetupStep(
    name="test",
    description="Setting up lamdera-program-test",
    flag="use_program_test",
    items=(
        _table(FRONTEND),
        _table(TYPES),
        _table(BACKEND),
        _table(ELM_JSON),
        # Existing projects keep their elm.json in init mode
        StepPatch("elm.json", "test:elm-json"),
        _table(HEAD_HTML),
        StepWrite("tests/Tests.elm", "features/test/Tests.elm"),
        StepWrite(".githooks/pre-commit", "features/test/pre-commit", executable=True),
        StepPatch("package.json", "test:package-json"),
    ),
)

I18N_STEP = SetupStep(
    name="i18n",
    description="Setting up internationalization and theming",
    flag="use_i18n",
    items=(
        StepWrite("src/I18n.elm", "features/i18n/I18n.elm"),
        StepWrite("src/Theme.elm", "features/i18n/Theme.elm"),
        _table(FRONTEND),
        _table(TYPES),
        _table(LOCAL_STORAGE),
        StepWrite(
            "localStorage.js", "features/i18n/localStorage.js",
            when=lambda f: not f.use_program_test,
        ),
        StepWrite(
            "elm-pkg-js/localStorage.js", "features/i18n/localStorage.js",
            when=lambda f: f.use_program_test,
        ),
        _table(ELM_PKG_JS_INCLUDES),
        StepPatch("elm-pkg-js-includes.js", "i18n:includes"),
        StepPatch("elm.json", "i18n:elm-json"),
    ),
)

AUTH_STEP = SetupStep(
    name="auth",
    description="Setting up Google One Tap authentication",
    flag="use_auth",
    items=(
        StepWrite("src/Auth.elm", "features/auth/Auth.elm"),
        StepWrite("elm-pkg-js/googleOneTap.js", "features/auth/googleOneTap.js"),
        StepPatch("elm.json", "auth:elm-json"),
        StepPatch("head.html", "auth:head-script"),
        StepPatch(
            "elm-pkg-js-includes.js", "auth:includes",
            fallback_template="features/auth/elm-pkg-js-includes.js",
        ),
    ),
)

SETUP_STEPS: tuple[SetupStep, ...] = (
    BASE_STEP,
    UTILITIES_STEP,
    CURSOR_STEP,
    TAILWIND_STEP,
    TEST_STEP,
    I18N_STEP,
    AUTH_STEP,
)


def get_step(name: str) -> SetupStep:
    for step in SETUP_STEPS:
        if step.name == name:
            return step
    raise KeyError(f"Unknown setup step: {name}")


# ============================================================================
# Resolution
# ============================================================================


def active_steps(features: FeatureSet, include_base: bool = True) -> tuple[SetupStep, ...]:
    """Steps that run for ``features``, in execution order."""
    return tuple(step for step in SETUP_STEPS if step.is_active(features, include_base))


def build_write_plan(features: FeatureSet, include_base: bool = True) -> WritePlan:
    """Compute the ordered write plan for a feature combination.

    Args:
        features: Fully resolved feature selection
        include_base: Include the new-project base files (False for ``--init``)

    Returns:
        Plan entries in application order; later writes to the same path
        overwrite earlier ones.
    """
    plan: list[PlanEntry] = []
    applied_flags: list[str] = []

    for step in active_steps(features, include_base):
        if step.flag is not None:
            applied_flags.append(step.flag)
        applied = features.restricted_to(applied_flags)

        for item in step.items:
            if isinstance(item, StepPatch):
                plan.append(FilePatch(
                    destination=item.destination,
                    patch=item.patch,
                    fallback_template=item.fallback_template,
                    step=step.name,
                ))
                continue
            if any(getattr(features, flag) for flag in item.yields_to):
                continue
            if not item.when(applied):
                continue
            plan.append(FileWrite(
                destination=item.destination,
                template=item.template_for(applied),
                executable=item.executable,
                step=step.name,
            ))

    return tuple(plan)


def final_templates(plan: WritePlan) -> dict[str, str]:
    """Fold a plan's writes last-writer-wins: destination -> template id."""
    result: dict[str, str] = {}
    for entry in plan:
        if isinstance(entry, FileWrite):
            result[entry.destination] = entry.template
    return result


def resolve_direct(features: FeatureSet, include_base: bool = True) -> dict[str, str]:
    """Evaluate every active write once against the full FeatureSet.

    Must equal ``final_templates(build_write_plan(features, include_base))``.
    """
    result: dict[str, str] = {}
    for step in active_steps(features, include_base):
        for item in step.writes():
            if item.when(features):
                result[item.destination] = item.template_for(features)
    return result


def plan_templates(plan: WritePlan) -> set[str]:
    """Every template id a plan reads (writes and patch fallbacks)."""
    templates: set[str] = set()
    for entry in plan:
        if isinstance(entry, FileWrite):
            templates.add(entry.template)
        elif entry.fallback_template is not None:
            templates.add(entry.fallback_template)
    return templates


# ============================================================================
# Boilerplate (pre-built, all features)
# ============================================================================

BOILERPLATE_MANIFEST = "boilerplate/manifest.yaml"

BOILERPLATE_FEATURES = FeatureSet(
    use_cursor_editor=True,
    use_tailwind=True,
    use_program_test=True,
    use_i18n=True,
    use_auth=True,
)


class ManifestError(Exception):
    """The boilerplate manifest is missing or malformed."""


def load_boilerplate_plan(templates_root: Path) -> WritePlan:
    """Load the fixed boilerplate plan from its YAML manifest.

    The manifest has ``files`` (destination, template, optional executable)
    and ``patches`` (destination, patch, optional fallback_template) lists.
    """
    manifest_path = templates_root / BOILERPLATE_MANIFEST
    try:
        raw_data: object = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
    except (OSError, yaml.YAMLError) as exc:
        raise ManifestError(f"Cannot read boilerplate manifest {manifest_path}: {exc}") from exc

    if not isinstance(raw_data, dict):
        raise ManifestError(f"Boilerplate manifest {manifest_path} must be a mapping")

    plan: list[PlanEntry] = []
    try:
        for entry in raw_data.get("files") or []:
            plan.append(FileWrite(
                destination=str(entry["destination"]),
                template=str(entry["template"]),
                executable=bool(entry.get("executable", False)),
                step="boilerplate",
            ))
        for entry in raw_data.get("patches") or []:
            fallback = entry.get("fallback_template")
            plan.append(FilePatch(
                destination=str(entry["destination"]),
                patch=str(entry["patch"]),
                fallback_template=str(fallback) if fallback else None,
                step="boilerplate",
            ))
    except (KeyError, TypeError, AttributeError) as exc:
        raise ManifestError(f"Malformed boilerplate manifest entry: {exc}") from exc

    if not plan:
        raise ManifestError(f"Boilerplate manifest {manifest_path} lists no files")
    return tuple(plan)
