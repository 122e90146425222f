"""Tests for the top-level main(): exit codes and error reporting."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

import click
import pytest

from create_lamdera_app.cli import commands
from create_lamdera_app.helpers.command_runner import CommandError, PrerequisiteError

_INTERACTIVE = "create_lamdera_app.cli.commands.is_interactive"
_REQUIRE_TOOL = "create_lamdera_app.cli.commands.require_tool"
_RUN = "create_lamdera_app.cli.commands.run"


@pytest.fixture()
def workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Run main() from an empty directory."""
    path = tmp_path / "work"
    path.mkdir()
    monkeypatch.chdir(path)
    return path


class TestValidationFailures:

    def test_init_with_name(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert commands.main(["--init", "--name", "my-app"]) == 1

        assert "Cannot use --name with --init" in capsys.readouterr().err
        assert not (workdir / "my-app").exists()

    def test_invalid_name(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        assert commands.main(["--name", "my app"]) == 1

        assert "Invalid project name 'my app'" in capsys.readouterr().err
        assert list(workdir.iterdir()) == []

    def test_missing_name_when_not_interactive(
        self,
        workdir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch(_INTERACTIVE, return_value=False):
            assert commands.main([]) == 1

        assert "--name is required in non-interactive mode" in capsys.readouterr().err

    def test_existing_directory(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        (workdir / "my-app").mkdir()

        with patch(_INTERACTIVE, return_value=False):
            assert commands.main(["--name", "my-app"]) == 1

        assert "Directory my-app already exists" in capsys.readouterr().err
        assert list((workdir / "my-app").iterdir()) == []

    def test_init_outside_lamdera_project(
        self,
        workdir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch(_INTERACTIVE, return_value=False):
            assert commands.main(["--init"]) == 1

        assert "No elm.json found" in capsys.readouterr().err

    def test_boilerplate_with_features_warns(
        self,
        workdir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch(_INTERACTIVE, return_value=False), patch(_RUN):
            result = commands.main(["--name", "my-app", "--boilerplate", "--no-tailwind"])

        assert result == 0
        assert "--tailwind ignored with --boilerplate" in capsys.readouterr().out


class TestRunOutcomes:

    def test_creates_project(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        argv = ["--name", "my-app", "--test", "yes", "--skip-install", "--no-github"]

        with patch(_INTERACTIVE, return_value=False), patch(_REQUIRE_TOOL) as mock_require:
            assert commands.main(argv) == 0

        project = workdir / "my-app"
        assert (project / "elm.json").is_file()
        assert (project / "tests" / "Tests.elm").is_file()
        assert not (project / ".git").exists()
        mock_require.assert_called_once_with("lamdera", commands.LAMDERA_INSTALL_HINT)
        assert "Project setup complete!" in capsys.readouterr().out

    def test_init_adds_features(self, workdir: Path) -> None:
        original_elm_json = '{"type": "application", "dependencies": {"direct": {}, "indirect": {}}}'
        (workdir / "elm.json").write_text(original_elm_json)
        (workdir / "src").mkdir()
        (workdir / "src" / "Frontend.elm").write_text("module Frontend exposing (..)\n")

        with patch(_INTERACTIVE, return_value=False), patch(_REQUIRE_TOOL):
            assert commands.main(["--init", "--i18n", "yes", "--skip-install"]) == 0

        assert (workdir / "src" / "I18n.elm").is_file()
        assert (workdir / "src" / "Frontend.elm").read_text() == "module Frontend exposing (..)\n"
        assert '"elm/time"' in (workdir / "elm.json").read_text()

    def test_missing_lamdera(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        missing = PrerequisiteError("lamdera", commands.LAMDERA_INSTALL_HINT)

        with patch(_INTERACTIVE, return_value=False), \
                patch(_REQUIRE_TOOL, side_effect=missing):
            assert commands.main(["--name", "my-app", "--skip-install"]) == 1

        assert "lamdera is not installed. Please install it first." in capsys.readouterr().err
        assert not (workdir / "my-app").exists()

    @pytest.mark.parametrize(
        ("extra_args", "expected_tools"),
        [
            (["--tailwind", "yes"], ["lamdera", "bun"]),
            (["--test", "yes"], ["lamdera", "bun"]),
            (["--boilerplate"], ["lamdera", "bun"]),
            (["--cursor", "yes", "--i18n", "yes", "--auth", "yes"], ["lamdera"]),
            ([], ["lamdera"]),
            (["--tailwind", "yes", "--skip-install"], ["lamdera"]),
        ],
    )
    def test_package_manager_required_only_when_installing(
        self,
        workdir: Path,
        extra_args: list[str],
        expected_tools: list[str],
    ) -> None:
        with patch(_INTERACTIVE, return_value=False), patch(_REQUIRE_TOOL) as mock_require, \
                patch("create_lamdera_app.cli.commands.create_new_project"):
            assert commands.main(["--name", "my-app", "--bun", *extra_args]) == 0

        checked = [call.args[0] for call in mock_require.call_args_list]
        assert checked == expected_tools

    def test_init_with_existing_package_dependencies_requires_package_manager(
        self,
        workdir: Path,
    ) -> None:
        (workdir / "elm.json").write_text('{"type": "application"}')
        (workdir / "package.json").write_text('{"devDependencies": {"tailwindcss": "^3"}}')

        with patch(_INTERACTIVE, return_value=False), patch(_REQUIRE_TOOL) as mock_require, \
                patch("create_lamdera_app.cli.commands.initialize_existing_project"):
            assert commands.main(["--init", "--cursor", "yes"]) == 0

        checked = [call.args[0] for call in mock_require.call_args_list]
        assert checked == ["lamdera", "npm"]

    def test_command_failure(self, workdir: Path, capsys: pytest.CaptureFixture[str]) -> None:
        failure = CommandError(["npm", "install"], 1)

        with patch(_INTERACTIVE, return_value=False), patch(_RUN, side_effect=failure):
            assert commands.main(["--name", "my-app"]) == 1

        assert "Error executing command: npm install" in capsys.readouterr().err


class TestInterruption:

    def test_keyboard_interrupt_exits_cleanly(
        self,
        workdir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch(_INTERACTIVE, return_value=False), \
                patch(_RUN, side_effect=KeyboardInterrupt):
            assert commands.main(["--name", "my-app"]) == 0

        assert "Process interrupted by user" in capsys.readouterr().out

    def test_cancelled_prompt_exits_cleanly(
        self,
        workdir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        with patch(_INTERACTIVE, return_value=True), \
                patch("create_lamdera_app.cli.prompts.click.prompt", side_effect=click.Abort()):
            assert commands.main([]) == 0

        assert "Process interrupted by user" in capsys.readouterr().out
        assert list(workdir.iterdir()) == []

    def test_prompted_name_is_checked(
        self,
        workdir: Path,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        (workdir / "taken").mkdir()
        argv = ["--no-cursor", "--no-tailwind", "--no-test", "--no-i18n", "--no-auth",
                "--no-github", "--pm", "npm"]

        with patch(_INTERACTIVE, return_value=True), \
                patch("create_lamdera_app.cli.prompts.click.prompt", return_value="taken"), \
                patch(_RUN) as mock_run:
            assert commands.main(argv) == 1

        mock_run.assert_not_called()
        assert "Directory taken already exists" in capsys.readouterr().err
