"""Feature resolution and file generation for Lamdera project scaffolds.

Public API:
    FeatureSet: Immutable feature selection
    build_write_plan: Ordered (destination, template) plan for a FeatureSet
    apply_write_plan: Materialize a plan in a project directory

Example:
    from create_lamdera_app.core import FeatureSet, build_write_plan

    plan = build_write_plan(FeatureSet(use_tailwind=True))
"""

from .features import FEATURE_FLAGS, FeatureSet, PackageManager, Visibility
from .patching import PatchContext, PatchError
from .resolver import (
    SETUP_STEPS,
    FilePatch,
    FileWrite,
    WritePlan,
    build_write_plan,
    final_templates,
    resolve_direct,
)
from .variants import VARIANT_TABLES, UnmappedCombinationError, VariantTable
from .write_plan import ApplyResult, apply_write_plan, get_templates_root

__all__ = [
    # Features
    "FEATURE_FLAGS",
    "FeatureSet",
    "PackageManager",
    "Visibility",
    # Resolution
    "SETUP_STEPS",
    "FilePatch",
    "FileWrite",
    "WritePlan",
    "build_write_plan",
    "final_templates",
    "resolve_direct",
    "VARIANT_TABLES",
    "VariantTable",
    "UnmappedCombinationError",
    # Application
    "ApplyResult",
    "PatchContext",
    "PatchError",
    "apply_write_plan",
    "get_templates_root",
]
