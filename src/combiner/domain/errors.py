from __future__ import annotations

"""
Domain Exception Hierarchy.

Fatal failures raised by library code. Recoverable per-entry problems
(unreadable files, non-text content) never raise; they are logged and
skipped by the scanner.
"""


class CombinerError(Exception):
    """Base class for all fatal run failures."""


class ConfigError(CombinerError):
    """Raised when a config file cannot be loaded or holds invalid values."""


class OutputError(CombinerError):
    """Raised when the output artifact cannot be created or written."""


class TokenizationError(CombinerError):
    """Raised when an encoding cannot be loaded or text cannot be encoded."""
