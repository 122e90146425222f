"""Idempotent content patches for files that features extend rather than replace.

Feature steps add dependencies to ``elm.json``, a script tag to
``head.html`` and a module to ``elm-pkg-js-includes.js``. Those files may
already exist (earlier steps, or a user's project in ``--init`` mode), so
each patch checks for its fragment first and inserts it at most once.
Running a patch a second time returns the content unchanged.
"""

from __future__ import annotations

import json
from collections.abc import Callable
from dataclasses import dataclass

from create_lamdera_app.core.features import FeatureSet

GOOGLE_IDENTITY_SCRIPT = "https://accounts.google.com/gsi/client"

# elm.json packages merged in by feature steps: package -> version
I18N_ELM_DEPENDENCIES: dict[str, str] = {
    "elm/json": "1.1.3",
    "elm/time": "1.0.0",
}
AUTH_ELM_DEPENDENCIES: dict[str, str] = {
    "elm/http": "2.0.0",
    "elm/json": "1.1.3",
    "truqu/elm-base64": "2.0.4",
}
AUTH_ELM_INDIRECT_DEPENDENCIES: dict[str, str] = {
    "elm/bytes": "1.0.8",
    "elm/file": "1.0.5",
}

# Same package set as variants/elm.json/test.json
TEST_ELM_DEPENDENCIES: dict[str, str] = {
    "lamdera/program-test": "3.0.0",
    "elm/bytes": "1.0.8",
    "elm/http": "2.0.0",
    "elm/json": "1.1.3",
    "elm/time": "1.0.0",
}
TEST_ELM_INDIRECT_DEPENDENCIES: dict[str, str] = {
    "avh4/elm-color": "1.0.0",
    "elm/file": "1.0.5",
    "elm/random": "1.0.0",
    "mdgriffith/elm-ui": "1.1.8",
}
TEST_ELM_TEST_DEPENDENCIES: dict[str, str] = {
    "elm-explorations/test": "2.2.0",
}

TAILWIND_DEV_DEPENDENCIES: dict[str, str] = {
    "tailwindcss": "^3.4.17",
    "concurrently": "^9.1.2",
}
TEST_DEV_DEPENDENCIES: dict[str, str] = {
    "elm-test-rs": "^3.0.0",
}

_TAILWIND_INPUT = "./src/styles.css"
_TAILWIND_OUTPUT = "./public/styles.css"


class PatchError(Exception):
    """A file could not be patched (e.g. a manifest is not valid JSON)."""


@dataclass(frozen=True)
class PatchContext:
    """Inputs a patch may need beyond the current file content."""

    features: FeatureSet
    project_name: str


# (current content or None when the file is missing, context) -> new content,
# or None to leave a missing file absent
PatchFunction = Callable[[str | None, PatchContext], str | None]


# ============================================================================
# Generic content patches
# ============================================================================


def insert_head_script(html: str, src: str) -> str:
    """Insert ``<script src=...>`` into head.html unless ``src`` is already referenced.

    Example:
        >>> insert_head_script("<title>x</title>\\n", "https://a/b.js")
        '<title>x</title>\\n<script src="https://a/b.js" async defer></script>\\n'
    """
    if src in html:
        return html

    tag = f'<script src="{src}" async defer></script>'
    closing_index = html.lower().find("</head>")
    if closing_index != -1:
        return html[:closing_index] + tag + "\n" + html[closing_index:]

    if not html.strip():
        return tag + "\n"
    return html.rstrip("\n") + "\n" + tag + "\n"


def _is_comment(line: str) -> bool:
    stripped = line.strip()
    return stripped.startswith("//") or stripped.startswith("/*") or stripped.startswith("*")


def add_include_module(js: str, name: str, path: str) -> str:
    """Register an elm-pkg-js module in ``elm-pkg-js-includes.js`` once.

    Adds ``const <name> = require('<path>');`` after the last require and
    ``<name>.init(app);`` after the last init call inside ``exports.init``.
    """
    if f"require('{path}')" in js or f'require("{path}")' in js:
        return js

    lines = js.splitlines()
    require_line = f"const {name} = require('{path}');"

    require_indexes = [i for i, line in enumerate(lines) if "require(" in line]
    if require_indexes:
        insert_at = require_indexes[-1] + 1
    else:
        insert_at = 0
        while insert_at < len(lines) and _is_comment(lines[insert_at]):
            insert_at += 1
    lines.insert(insert_at, require_line)

    init_indexes = [i for i, line in enumerate(lines) if ".init(app)" in line]
    if init_indexes:
        anchor = init_indexes[-1]
        anchor_line = lines[anchor]
        indent = anchor_line[: len(anchor_line) - len(anchor_line.lstrip())]
        lines.insert(anchor + 1, f"{indent}{name}.init(app);")
    else:
        export_indexes = [i for i, line in enumerate(lines) if "exports.init" in line]
        if export_indexes:
            lines.insert(export_indexes[-1] + 1, f"  {name}.init(app);")
        else:
            lines.extend([
                "",
                "exports.init = async function init(app) {",
                f"  {name}.init(app);",
                "};",
            ])

    trailing = "\n" if js.endswith("\n") or not js else ""
    return "\n".join(lines) + trailing


def _load_json_object(text: str, label: str) -> dict[str, object]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise PatchError(f"{label} is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise PatchError(f"{label} must contain a JSON object")
    return data


def _section(data: dict[str, object], *keys: str) -> dict[str, str]:
    """Return nested dict ``data[k1][k2]...``, creating empty dicts on the way."""
    current: dict[str, object] = data
    for key in keys:
        value = current.get(key)
        if not isinstance(value, dict):
            value = {}
            current[key] = value
        current = value
    return current  # type: ignore[return-value]


def merge_elm_dependencies(
    text: str,
    direct: dict[str, str],
    indirect: dict[str, str] | None = None,
    test_direct: dict[str, str] | None = None,
) -> str:
    """Merge packages into an application ``elm.json`` without clobbering.

    Existing direct versions are kept. Packages already present as indirect
    or test dependencies are promoted to direct with their pinned version.
    ``test_direct`` packages go to ``test-dependencies.direct`` unless the
    application already depends on them directly.

    Returns:
        Updated JSON text, or ``text`` itself when nothing had to be added
    """
    data = _load_json_object(text, "elm.json")
    direct_deps = _section(data, "dependencies", "direct")
    indirect_deps = _section(data, "dependencies", "indirect")
    test_direct_deps = _section(data, "test-dependencies", "direct")
    test_indirect_deps = _section(data, "test-dependencies", "indirect")
    test_sections = [test_direct_deps, test_indirect_deps]
    changed = False

    for package, version in direct.items():
        if package in direct_deps:
            continue
        if package in indirect_deps:
            direct_deps[package] = indirect_deps.pop(package)
        else:
            pinned = next(
                (section.pop(package) for section in test_sections if package in section),
                version,
            )
            direct_deps[package] = pinned
        changed = True

    for package, version in (indirect or {}).items():
        if package in direct_deps or package in indirect_deps:
            continue
        pinned = next(
            (section.pop(package) for section in test_sections if package in section),
            version,
        )
        indirect_deps[package] = pinned
        changed = True

    for package, version in (test_direct or {}).items():
        if package in direct_deps or package in test_direct_deps:
            continue
        test_direct_deps[package] = test_indirect_deps.pop(package, version)
        changed = True

    if not changed:
        return text

    dependencies = _section(data, "dependencies")
    dependencies["direct"] = dict(sorted(direct_deps.items()))  # type: ignore[assignment]
    dependencies["indirect"] = dict(sorted(indirect_deps.items()))  # type: ignore[assignment]
    test_dependencies = _section(data, "test-dependencies")
    test_dependencies["direct"] = dict(sorted(test_direct_deps.items()))  # type: ignore[assignment]
    test_dependencies["indirect"] = dict(sorted(test_indirect_deps.items()))  # type: ignore[assignment]
    return json.dumps(data, indent=4) + "\n"


def merge_package_json(
    text: str,
    dev_dependencies: dict[str, str] | None = None,
    scripts: dict[str, str] | None = None,
) -> str:
    """Add missing devDependencies and scripts to ``package.json``.

    Returns:
        Updated JSON text, or ``text`` itself when nothing had to be added
    """
    data = _load_json_object(text, "package.json")
    changed = False

    for section_name, entries in (("scripts", scripts), ("devDependencies", dev_dependencies)):
        if not entries:
            continue
        section = _section(data, section_name)
        for key, value in entries.items():
            if key not in section:
                section[key] = value
                changed = True

    if not changed:
        return text
    return json.dumps(data, indent=2) + "\n"


# ============================================================================
# package.json content per package manager
# ============================================================================


def start_script(features: FeatureSet) -> str:
    """Dev server command, watching Tailwind CSS alongside when enabled."""
    runner = features.package_manager.runner
    if not features.use_tailwind:
        return f"{runner} lamdera live"
    return (
        f'{runner} concurrently "{runner} lamdera live" '
        + f'"{runner} tailwindcss -i {_TAILWIND_INPUT} -o {_TAILWIND_OUTPUT} --watch"'
    )


def new_package_json(context: PatchContext) -> str:
    """Fresh package.json for a project."""
    manifest = {
        "name": context.project_name,
        "version": "0.1.0",
        "private": True,
        "scripts": {"start": start_script(context.features)},
    }
    return json.dumps(manifest, indent=2) + "\n"


def tailwind_scripts(features: FeatureSet) -> dict[str, str]:
    runner = features.package_manager.runner
    return {
        "build:css": f"{runner} tailwindcss -i {_TAILWIND_INPUT} -o {_TAILWIND_OUTPUT} --minify",
        "watch:css": f"{runner} tailwindcss -i {_TAILWIND_INPUT} -o {_TAILWIND_OUTPUT} --watch",
    }


def program_test_scripts(features: FeatureSet) -> dict[str, str]:
    runner = features.package_manager.runner
    return {"test": f"{runner} elm-test-rs --compiler lamdera"}


# ============================================================================
# Registered patches (referenced by id from write plans)
# ============================================================================


def _patch_base_package_json(content: str | None, context: PatchContext) -> str | None:
    if content is None:
        return new_package_json(context)
    return merge_package_json(content, scripts={"start": start_script(context.features)})


def _patch_tailwind_package_json(content: str | None, context: PatchContext) -> str | None:
    base = new_package_json(context) if content is None else content
    return merge_package_json(
        base,
        dev_dependencies=TAILWIND_DEV_DEPENDENCIES,
        scripts=tailwind_scripts(context.features),
    )


def _patch_test_package_json(content: str | None, context: PatchContext) -> str | None:
    base = new_package_json(context) if content is None else content
    return merge_package_json(
        base,
        dev_dependencies=TEST_DEV_DEPENDENCIES,
        scripts=program_test_scripts(context.features),
    )


def _patch_test_elm_json(content: str | None, _context: PatchContext) -> str | None:
    if content is None:
        return None
    return merge_elm_dependencies(
        content,
        TEST_ELM_DEPENDENCIES,
        TEST_ELM_INDIRECT_DEPENDENCIES,
        test_direct=TEST_ELM_TEST_DEPENDENCIES,
    )


def _patch_i18n_elm_json(content: str | None, _context: PatchContext) -> str | None:
    if content is None:
        return None
    return merge_elm_dependencies(content, I18N_ELM_DEPENDENCIES)


def _patch_i18n_includes(content: str | None, context: PatchContext) -> str | None:
    if content is None:
        return None
    path = "./elm-pkg-js/localStorage" if context.features.use_program_test else "./localStorage"
    return add_include_module(content, "localStorage", path)


def _patch_auth_elm_json(content: str | None, _context: PatchContext) -> str | None:
    if content is None:
        return None
    return merge_elm_dependencies(
        content,
        AUTH_ELM_DEPENDENCIES,
        AUTH_ELM_INDIRECT_DEPENDENCIES,
    )


def _patch_auth_head(content: str | None, _context: PatchContext) -> str | None:
    return insert_head_script(content or "", GOOGLE_IDENTITY_SCRIPT)


def _patch_auth_includes(content: str | None, _context: PatchContext) -> str | None:
    if content is None:
        return None
    return add_include_module(content, "googleOneTap", "./elm-pkg-js/googleOneTap")


PATCHES: dict[str, PatchFunction] = {
    "base:package-json": _patch_base_package_json,
    "tailwind:package-json": _patch_tailwind_package_json,
    "test:package-json": _patch_test_package_json,
    "test:elm-json": _patch_test_elm_json,
    "i18n:elm-json": _patch_i18n_elm_json,
    "i18n:includes": _patch_i18n_includes,
    "auth:elm-json": _patch_auth_elm_json,
    "auth:head-script": _patch_auth_head,
    "auth:includes": _patch_auth_includes,
}
