from pathlib import Path

import platformdirs

from rqm.config import find_project_root


def get_rqm_dir(project_root: Path | None = None) -> Path | None:
    """Get the `.rqm/` directory of the given or discovered project, if any."""
    root = project_root if project_root is not None else find_project_root()
    if root is None:
        return None
    return root / ".rqm"


def get_rqm_log_dir(project_root: Path | None = None) -> Path:
    """Get the log directory.

    This is `.rqm/logs/` inside the project, or the platform user log
    directory when no project is found.
    """
    rqm_dir = get_rqm_dir(project_root)
    if rqm_dir is None:
        return platformdirs.user_log_path("rqm")
    return rqm_dir / "logs"


def get_rqm_cli_log_file(project_root: Path | None = None) -> Path:
    """Get the path to the CLI log file."""
    return get_rqm_log_dir(project_root) / "cli.log"
