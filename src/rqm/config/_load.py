import os
import sys
from typing import TYPE_CHECKING

from rqm.exceptions import ConfigError

from ._models import Config

if TYPE_CHECKING:
    from pathlib import Path

STRICT_CONFIG_ENV = "RQM_STRICT_CONFIG"
LOAD_ERROR_EXIT_CODE = 2


def safe_load_config(
    *,
    config_path: "Path | None" = None,
    project_root: "Path | None" = None,
    cli_overrides: dict[str, object] | None = None,
) -> tuple[Config, str | None]:
    """Load configuration with error handling.

    Failures are handled according to the RQM_STRICT_CONFIG environment
    variable:
    - If unset or "0": warn to stderr and fall back to the defaults
    - If "1": fail fast with exit code 2

    An explicit config_path must exist.

    Args:
        config_path: Explicit path to config file (--config flag).
        project_root: Project root directory override (--project-root flag).
        cli_overrides: CLI argument overrides to pass to Config.load().

    Returns:
        Tuple of (Config, error_message). On success, error_message is None.
    """
    strict_mode = os.environ.get(STRICT_CONFIG_ENV, "0") == "1"

    try:
        if config_path is not None:
            if not config_path.exists():
                print(f"Error: Config file not found: {config_path}", file=sys.stderr)  # noqa: T201
                sys.exit(LOAD_ERROR_EXIT_CODE)
            return Config.from_file(config_path), None

        config = Config.load(project_root=project_root, cli_overrides=cli_overrides)
    except (ConfigError, OSError) as e:
        error_msg = str(e)
        if strict_mode:
            print(f"Error: {error_msg}", file=sys.stderr)  # noqa: T201
            sys.exit(LOAD_ERROR_EXIT_CODE)
        print(f"Warning: Failed to load config: {error_msg}", file=sys.stderr)  # noqa: T201
        return Config.from_dict({}), error_msg
    else:
        return config, None
