from __future__ import annotations

"""
Configuration Domain Management.

Defines the default runtime configuration and loads optional JSON config
files. A config file supplies base values; CLI overrides are merged on top
by the interface layer.
"""

import json
import logging
import os
from typing import Any, Dict, List

from combiner.domain.errors import ConfigError

logger = logging.getLogger(__name__)

# -----------------------------------------------------------------------------
# Constants & Defaults
# -----------------------------------------------------------------------------
DEFAULT_OUTPUT_FILE = "combined_output.txt"
DEFAULT_TOKENIZER = "p50k_base"

# Keys whose values are concatenated (config first, then CLI) when merging
LIST_KEYS: List[str] = ["ignore_patterns", "include_patterns"]

CONFIG_KEYS: List[str] = [
    "directory", "output", "tokenizer",
    "ignore_patterns", "include_patterns",
    "include_hidden", "verbose", "workers", "top",
]


# -----------------------------------------------------------------------------
# Configuration Models (Dict-based)
# -----------------------------------------------------------------------------
def get_default_config() -> Dict[str, Any]:
    """
    Generate the default runtime configuration.

    Returns:
        Dict[str, Any]: Default configuration values.
    """
    return {
        # IO Paths
        "directory": ".",
        "output": DEFAULT_OUTPUT_FILE,

        # Token counting
        "tokenizer": DEFAULT_TOKENIZER,
        "workers": 1,

        # Filtering
        "ignore_patterns": [],
        "include_patterns": [],
        "include_hidden": False,

        # Reporting
        "verbose": False,
        "top": 0,
    }


# -----------------------------------------------------------------------------
# Persistence Logic
# -----------------------------------------------------------------------------
def load_config_file(path: str) -> Dict[str, Any]:
    """
    Load a JSON configuration file.

    Args:
        path: Path to a JSON file holding a single object.

    Returns:
        Dict[str, Any]: Raw values as found in the file.

    Raises:
        ConfigError: If the file is missing, unreadable or malformed.
    """
    if not os.path.exists(path):
        raise ConfigError(f"Config file '{path}' does not exist")
    if not os.path.isfile(path):
        raise ConfigError(f"'{path}' is not a file")

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read config file '{path}': {e}") from e
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in config file '{path}': {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(
            f"Config file '{path}' must contain a JSON object, got {type(data).__name__}"
        )

    logger.debug(f"Loaded {len(data)} key(s) from {path}")
    return data


def merge_config(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge CLI overrides into a base configuration.

    Scalar overrides replace base values when not None. Pattern lists are
    concatenated so config-file rules and CLI rules both apply.

    Args:
        base: Defaults or values loaded from a config file.
        overrides: Values mapped from the command line.

    Returns:
        Dict[str, Any]: The merged configuration state.
    """
    out = dict(base)
    for k in CONFIG_KEYS:
        value = overrides.get(k)
        if value is None:
            continue
        if k in LIST_KEYS:
            out[k] = list(out.get(k) or []) + list(value)
        else:
            out[k] = value
    return out
