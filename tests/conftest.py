"""Shared fixtures for the create-lamdera-app test suite.

Every test runs against a config path that does not exist, so a developer's
own ``~/.config/create-lamdera-app/config.yaml`` never leaks into results.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from create_lamdera_app.core.write_plan import get_templates_root
from create_lamdera_app.helpers.config_loader import CONFIG_ENV_VAR


@pytest.fixture(autouse=True)
def isolated_user_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point the config loader at a file that does not exist."""
    config_path = tmp_path / "no-such-config.yaml"
    monkeypatch.setenv(CONFIG_ENV_VAR, str(config_path))
    return config_path


@pytest.fixture()
def templates_root() -> Path:
    """The packaged templates directory."""
    return get_templates_root()


@pytest.fixture()
def project_dir(tmp_path: Path) -> Path:
    """An empty directory to generate a project into."""
    path = tmp_path / "project"
    path.mkdir()
    return path
