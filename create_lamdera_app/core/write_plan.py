"""Apply a write plan to a project directory.

This is the only place the resolver's decisions touch the filesystem.
Entries are applied strictly in order, so later writes replace earlier
ones at the same path, exactly as the plan describes.
"""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path

from create_lamdera_app.core.patching import PATCHES, PatchContext, PatchError
from create_lamdera_app.core.resolver import FilePatch, FileWrite, WritePlan
from create_lamdera_app.helpers.helpers_logging import (
    print_skipped,
    print_step,
    print_success,
    print_warning,
)

_EXECUTABLE_MODE = 0o755


class TemplateNotFoundError(FileNotFoundError):
    """A plan references a template that is not packaged."""


@dataclass
class ApplyResult:
    """Summary of what applying a plan changed."""

    written: list[str] = field(default_factory=list)
    patched: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)


def get_templates_root() -> Path:
    """Return the packaged templates directory."""
    import create_lamdera_app

    return Path(create_lamdera_app.__file__).resolve().parent / "templates"


def _template_path(templates_root: Path, template: str) -> Path:
    source = templates_root / template
    if not source.is_file():
        raise TemplateNotFoundError(f"Template not found: {template}")
    return source


def _write_file(
    templates_root: Path,
    template: str,
    target: Path,
    executable: bool,
) -> None:
    source = _template_path(templates_root, template)
    target.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(source, target)
    if executable:
        target.chmod(_EXECUTABLE_MODE)


def _apply_patch(
    entry: FilePatch,
    project_root: Path,
    templates_root: Path,
    context: PatchContext,
    result: ApplyResult,
) -> None:
    target = project_root / entry.destination

    if not target.exists() and entry.fallback_template is not None:
        _write_file(templates_root, entry.fallback_template, target, executable=False)
        result.written.append(entry.destination)
        print_success(f"Created file: {entry.destination}")
        return

    try:
        patch_function = PATCHES[entry.patch]
    except KeyError as exc:
        raise PatchError(f"Unknown patch '{entry.patch}' for {entry.destination}") from exc

    current = target.read_text(encoding="utf-8") if target.exists() else None
    updated = patch_function(current, context)

    if updated is None:
        print_warning(f"{entry.destination} not found, skipping {entry.patch}")
        result.skipped.append(entry.destination)
        return
    if updated == current:
        print_skipped(f"Already up to date: {entry.destination}")
        return

    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(updated, encoding="utf-8")
    if current is None:
        result.written.append(entry.destination)
        print_success(f"Created file: {entry.destination}")
    else:
        result.patched.append(entry.destination)
        print_success(f"Updated file: {entry.destination}")


def apply_write_plan(
    plan: WritePlan,
    project_root: Path,
    context: PatchContext,
    overwrite_existing: bool = True,
    templates_root: Path | None = None,
    step_descriptions: dict[str, str] | None = None,
) -> ApplyResult:
    """Materialize ``plan`` under ``project_root``.

    Args:
        plan: Ordered plan from the resolver (or the boilerplate manifest)
        project_root: Directory the plan's destinations are relative to
        context: Inputs for registered patches
        overwrite_existing: When False, files that existed before this call
            are left alone (``--init`` mode). Files written earlier in the
            same run are always replaced by later entries.
        templates_root: Template directory (defaults to the packaged one)
        step_descriptions: Optional step name -> progress header

    Returns:
        ApplyResult listing written, patched and skipped destinations

    Raises:
        TemplateNotFoundError: If a referenced template is not packaged
        PatchError: If a patch cannot be applied
    """
    root = templates_root or get_templates_root()
    descriptions = step_descriptions or {}
    result = ApplyResult()

    pre_existing = {
        entry.destination
        for entry in plan
        if isinstance(entry, FileWrite) and (project_root / entry.destination).exists()
    }

    current_step: str | None = None
    for entry in plan:
        if entry.step != current_step:
            current_step = entry.step
            header = descriptions.get(current_step)
            if header:
                print_step(f"\n{header}...")

        if isinstance(entry, FilePatch):
            _apply_patch(entry, project_root, root, context, result)
            continue

        if not overwrite_existing and entry.destination in pre_existing:
            if entry.destination not in result.skipped:
                print_skipped(f"Skipped (exists): {entry.destination}")
                result.skipped.append(entry.destination)
            continue

        _write_file(root, entry.template, project_root / entry.destination, entry.executable)
        if entry.destination not in result.written:
            result.written.append(entry.destination)
        print_success(f"Created file: {entry.destination}")

    return result
