"""Create a GitHub repository for a freshly generated project."""

from pathlib import Path

from create_lamdera_app.core.features import Visibility
from create_lamdera_app.helpers.command_runner import is_tool_available, run_command
from create_lamdera_app.helpers.helpers_logging import print_step, print_success, print_warning


def create_github_repository(project_root: Path, name: str, visibility: Visibility) -> bool:
    """Commit the project and push it to a new GitHub repository.

    A missing ``gh`` CLI only skips this step; any failing git/gh command is
    raised as CommandError.

    Returns:
        True if the repository was created, False if the step was skipped
    """
    if not is_tool_available("gh"):
        print_warning("GitHub CLI (gh) is not installed. Skipping repository creation.")
        return False

    print_step("\nCreating GitHub repository...")
    run_command(["git", "init"], cwd=project_root)
    if (project_root / ".githooks").is_dir():
        run_command(["git", "config", "core.hooksPath", ".githooks"], cwd=project_root)
    run_command(["git", "add", "."], cwd=project_root)
    run_command(["git", "commit", "-m", "Initial commit"], cwd=project_root)
    run_command(
        [
            "gh", "repo", "create", name,
            visibility.gh_flag,
            "--source=.",
            "--remote=origin",
            "--push",
        ],
        cwd=project_root,
    )
    print_success("GitHub repository created and code pushed!")
    return True
