"""Shared utilities."""

from ._logging import LogFormatType, create_cli_logger, create_null_logger
from ._paths import get_rqm_cli_log_file, get_rqm_dir, get_rqm_log_dir

__all__ = [
    "LogFormatType",
    "create_cli_logger",
    "create_null_logger",
    "get_rqm_cli_log_file",
    "get_rqm_dir",
    "get_rqm_log_dir",
]
