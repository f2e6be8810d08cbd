"""RQM configuration.

This module provides the public API for RQM configuration management,
including loading, validation, and typed access to configuration values.

Example:
    >>> from rqm.config import Config
    >>> config = Config.load()
    >>> config.validation.owner_policy
    <OwnerPolicy.ERROR: 'error'>
"""

from rqm.exceptions import (
    ConfigError,
    ConfigLoadError,
    ConfigValidationError,
)

from ._defaults import DEFAULT_CONFIG
from ._discovery import (
    discover_sources,
    find_project_root,
    get_project_config_path,
    get_user_config_path,
)
from ._load import safe_load_config
from ._loader import (
    deep_merge,
    parse_env_vars,
    parse_string_value,
    read_toml_file,
    set_nested_key,
)
from ._models import (
    Config,
    ConfigSource,
    ConfigSourceName,
    DanglingPolicy,
    LogFormat,
    LoggingConfig,
    LogLevel,
    OwnerPolicy,
    ValidationConfig,
)
from ._validation import (
    ValidationIssue,
    get_config_schema,
    raise_if_validation_errors,
    validate_config,
    validate_source,
)

__all__ = [
    "DEFAULT_CONFIG",
    "Config",
    "ConfigError",
    "ConfigLoadError",
    "ConfigSource",
    "ConfigSourceName",
    "ConfigValidationError",
    "DanglingPolicy",
    "LogFormat",
    "LogLevel",
    "LoggingConfig",
    "OwnerPolicy",
    "ValidationConfig",
    "ValidationIssue",
    "deep_merge",
    "discover_sources",
    "find_project_root",
    "get_config_schema",
    "get_project_config_path",
    "get_user_config_path",
    "parse_env_vars",
    "parse_string_value",
    "raise_if_validation_errors",
    "read_toml_file",
    "safe_load_config",
    "set_nested_key",
    "validate_config",
    "validate_source",
]
