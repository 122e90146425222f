"""Project scaffolding: new projects, --init, package installs and GitHub."""
