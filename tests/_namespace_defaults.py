"""Shared argparse.Namespace default values for test files.

Single source of truth for the attributes the create-lamdera-app parser
produces. Import ``BASE_DEFAULTS`` and ``make_namespace`` from here instead of
duplicating the defaults dict in each test file.
"""

from __future__ import annotations

import argparse
from typing import Any

# Parsed-argument values when no flag is given
BASE_DEFAULTS: dict[str, object] = {
    "name": None,
    "init": False,
    # Feature toggles: None means "not given"
    "cursor": None,
    "tailwind": None,
    "test": None,
    "i18n": None,
    "auth": None,
    # GitHub
    "github": None,
    "public": False,
    "private": False,
    # Tooling
    "package_manager": None,
    "skip_install": None,
    "boilerplate": False,
    "install_timeout": None,
}


def make_namespace(**overrides: Any) -> argparse.Namespace:
    """Build an argparse.Namespace as the CLI parser would produce it.

    Example::

        args = make_namespace(name="my-app", tailwind=True)
    """
    values = dict(BASE_DEFAULTS)
    values.update(overrides)
    return argparse.Namespace(**values)
