"""Project root and config path discovery utilities.

The project root is the nearest directory, searching upward, that contains a
`.rqm/` marker directory. Project configuration lives in `.rqm/rqm.toml`.
"""

from pathlib import Path
from typing import Any

import platformdirs

from ._defaults import DEFAULT_CONFIG
from ._models import ConfigSource, ConfigSourceName

PROJECT_DIR_NAME = ".rqm"
PROJECT_CONFIG_NAME = "rqm.toml"
USER_CONFIG_NAME = "config.toml"


def find_project_root(start: Path | None = None) -> Path | None:
    """Find the project root by searching upward for a `.rqm/` directory.

    Args:
        start: Directory to start searching from. Defaults to the current
            working directory.

    Returns:
        The directory containing `.rqm/`, or None if the filesystem root is
        reached first.
    """
    current = (start or Path.cwd()).resolve()

    while True:
        if (current / PROJECT_DIR_NAME).is_dir():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent


def get_user_config_path() -> Path:
    r"""Get the platform-specific user config file path.

    - Linux: ``~/.config/rqm/config.toml``
    - macOS: ``~/Library/Application Support/rqm/config.toml``
    - Windows: ``%APPDATA%\rqm\config.toml``

    The path is returned whether or not it exists.
    """
    return platformdirs.user_config_path("rqm") / USER_CONFIG_NAME


def get_project_config_path(project_root: Path) -> Path:
    """Get the project config file path for a project root."""
    return project_root / PROJECT_DIR_NAME / PROJECT_CONFIG_NAME


def _file_exists(path: Path) -> bool:
    try:
        return path.is_file()
    except OSError:
        return False


def discover_sources(
    project_root: Path | None = None,
    *,
    include_env: bool = True,
    cli_overrides: dict[str, Any] | None = None,  # pyright: ignore[reportExplicitAny]
) -> list[ConfigSource]:
    """Discover all configuration sources, highest precedence first.

    File-based sources are included with ``exists=False`` when the file is
    missing. The project source is omitted when no project root is found.

    Args:
        project_root: Project root directory. If None, auto-detect.
        include_env: Include environment variables as a source.
        cli_overrides: CLI argument overrides, if any.

    Returns:
        Sources in precedence order (CLI, ENV, PROJECT, USER, DEFAULT).
    """
    sources: list[ConfigSource] = []
    resolved_root = project_root if project_root else find_project_root()

    if cli_overrides:
        sources.append(
            ConfigSource(
                name=ConfigSourceName.CLI,
                path=None,
                exists=True,
                values=cli_overrides,
            )
        )

    if include_env:
        # Values are parsed during loading
        sources.append(
            ConfigSource(name=ConfigSourceName.ENV, path=None, exists=True, values={})
        )

    if resolved_root:
        project_path = get_project_config_path(resolved_root)
        sources.append(
            ConfigSource(
                name=ConfigSourceName.PROJECT,
                path=project_path,
                exists=_file_exists(project_path),
                values={},
            )
        )

    user_path = get_user_config_path()
    sources.append(
        ConfigSource(
            name=ConfigSourceName.USER,
            path=user_path,
            exists=_file_exists(user_path),
            values={},
        )
    )

    sources.append(
        ConfigSource(
            name=ConfigSourceName.DEFAULT,
            path=None,
            exists=True,
            values=DEFAULT_CONFIG,
        )
    )

    return sources
