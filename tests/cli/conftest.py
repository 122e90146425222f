"""Shared fixtures for end-to-end CLI tests.

Every CLI e2e test gets an isolated temporary directory to work in,
so tests never pollute each other or the real workspace.

Tests invoke the real ``create-lamdera-app`` command as a subprocess with
stdin closed, the way CI or a script would call it, which puts the tool in
non-interactive mode.

**Isolation:** If the ``create-lamdera-app`` entry point is not installed
(e.g. the package was never ``pip install -e .``'d), every test that depends
on ``run_app`` is automatically skipped with a clear reason. Tests that get
as far as creating a project also need ``lamdera`` on PATH.
"""

import os
import shutil
import subprocess
from collections.abc import Callable, Iterator
from pathlib import Path

import pytest

# Type alias for the callable fixture.
RunApp = Callable[..., subprocess.CompletedProcess[str]]

# ---------------------------------------------------------------------------
# Pre-flight checks (evaluated once at import time)
# ---------------------------------------------------------------------------

_APP_AVAILABLE = shutil.which("create-lamdera-app") is not None
_LAMDERA_AVAILABLE = shutil.which("lamdera") is not None

_SKIP_REASON_APP = "create-lamdera-app entry point is not installed (run: pip install -e .)"
_SKIP_REASON_LAMDERA = "lamdera is not installed"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def isolated_project(tmp_path: Path) -> Iterator[Path]:
    """Create an isolated empty working directory and cd into it.

    Yields:
        Path to the temporary working directory.

    After the test, the working directory is restored.
    """
    original_cwd = Path.cwd()
    os.chdir(tmp_path)
    try:
        yield tmp_path
    finally:
        os.chdir(original_cwd)


@pytest.fixture()
def run_app(isolated_project: Path, isolated_user_config: Path) -> RunApp:
    """Return a helper that invokes ``create-lamdera-app <args>``.

    Usage in tests::

        def test_help(run_app: RunApp) -> None:
            result = run_app("--help")
            assert result.returncode == 0

    Returns:
        A callable ``(*args) -> CompletedProcess[str]``.
    """
    if not _APP_AVAILABLE:
        pytest.skip(_SKIP_REASON_APP)

    env = dict(os.environ)
    env["CREATE_LAMDERA_APP_CONFIG"] = str(isolated_user_config)

    def _run(*args: str) -> subprocess.CompletedProcess[str]:
        return subprocess.run(
            ["create-lamdera-app", *args],
            cwd=isolated_project,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            check=False,
            env=env,
        )

    return _run


@pytest.fixture()
def require_lamdera() -> None:
    """Skip tests that need the lamdera binary when it is missing."""
    if not _LAMDERA_AVAILABLE:
        pytest.skip(_SKIP_REASON_LAMDERA)
