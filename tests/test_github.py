"""Tests for GitHub repository creation."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import call, patch

import pytest

from create_lamdera_app.core.features import Visibility
from create_lamdera_app.helpers.command_runner import CommandError
from create_lamdera_app.scaffolding.github import create_github_repository

_AVAILABLE = "create_lamdera_app.scaffolding.github.is_tool_available"
_RUN = "create_lamdera_app.scaffolding.github.run_command"


class TestCreateGithubRepository:

    def test_missing_gh_skips(
        self,
        project_dir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch(_AVAILABLE, return_value=False), patch(_RUN) as mock_run:
            assert create_github_repository(project_dir, "my-app", Visibility.PRIVATE) is False

        mock_run.assert_not_called()
        assert "GitHub CLI (gh) is not installed" in capsys.readouterr().out

    def test_command_sequence(self, project_dir: Path) -> None:
        with patch(_AVAILABLE, return_value=True), patch(_RUN) as mock_run:
            assert create_github_repository(project_dir, "my-app", Visibility.PRIVATE) is True

        assert mock_run.call_args_list == [
            call(["git", "init"], cwd=project_dir),
            call(["git", "add", "."], cwd=project_dir),
            call(["git", "commit", "-m", "Initial commit"], cwd=project_dir),
            call(
                ["gh", "repo", "create", "my-app", "--private",
                 "--source=.", "--remote=origin", "--push"],
                cwd=project_dir,
            ),
        ]

    def test_hooks_path_and_public(self, project_dir: Path) -> None:
        (project_dir / ".githooks").mkdir()

        with patch(_AVAILABLE, return_value=True), patch(_RUN) as mock_run:
            create_github_repository(project_dir, "my-app", Visibility.PUBLIC)

        commands = [recorded.args[0] for recorded in mock_run.call_args_list]
        assert ["git", "config", "core.hooksPath", ".githooks"] in commands
        assert "--public" in commands[-1]

    def test_failure_propagates(self, project_dir: Path) -> None:
        failure = CommandError(["git", "commit", "-m", "Initial commit"], 1)

        with patch(_AVAILABLE, return_value=True), \
                patch(_RUN, side_effect=[None, None, failure]) as mock_run, \
                pytest.raises(CommandError):
            create_github_repository(project_dir, "my-app", Visibility.PRIVATE)

        assert mock_run.call_count == 3
