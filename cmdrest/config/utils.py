"""Configuration file discovery utilities."""

import os
from pathlib import Path


def get_config_dir() -> Path:
    """Return the cmdrest directory inside XDG_CONFIG_HOME (default ~/.config)."""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    base = Path(xdg_config_home) if xdg_config_home else Path.home() / ".config"
    return base / "cmdrest"


def find_git_root(path: Path | None = None) -> Path | None:
    """Find the root directory of a git repository.

    Args:
        path: Starting path to search from. Defaults to current directory.

    Returns:
        Path to the git root directory, or None if not in a git repository.
    """
    if path is None:
        path = Path.cwd()

    current = path.resolve()
    while current != current.parent:
        if (current / ".git").exists():
            return current
        current = current.parent
    return None


def find_toml_config_file() -> Path | None:
    """Find the TOML configuration file for cmdrest.

    Searches in the following order:
    1. .cmdrest.toml in current directory
    2. cmdrest.toml in git repository root (if in a git repo)
    3. config.toml in XDG_CONFIG_HOME/cmdrest/

    Returns:
        Path to the first found configuration file, or None if not found.
    """
    current_dir_config = Path.cwd() / ".cmdrest.toml"
    if current_dir_config.exists():
        return current_dir_config

    git_root = find_git_root()
    if git_root:
        repo_config = git_root / "cmdrest.toml"
        if repo_config.exists():
            return repo_config

    xdg_config = get_config_dir() / "config.toml"
    if xdg_config.exists():
        return xdg_config

    return None
