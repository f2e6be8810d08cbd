"""Built-in default configuration values.

DEFAULT_CONFIG is a plain dict so it can be passed straight to deep_merge,
which always returns copies. ``validation.max_depth`` has no default entry
because TOML cannot represent an unset value.
"""

from typing import Any

DEFAULT_CONFIG: dict[str, Any] = {  # pyright: ignore[reportExplicitAny]
    "logging": {
        "level": "info",
        "format": "json",
        "file": "",
    },
    "validation": {
        "owner_policy": "error",
        "dangling_policy": "warning",
        "strict_schema": False,
    },
}
