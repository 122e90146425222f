"""
Create Lamdera App

Scaffold Lamdera (full-stack Elm) projects with optional Tailwind CSS,
lamdera/program-test, internationalization, Google One Tap authentication
and Cursor editor support.
"""

__version__ = "0.1.0"

from create_lamdera_app.cli.commands import main
from create_lamdera_app.core.features import FeatureSet
from create_lamdera_app.core.resolver import build_write_plan

__all__ = [
    "FeatureSet",
    "build_write_plan",
    "main",
]
