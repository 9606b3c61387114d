from __future__ import annotations

"""
Domain Exception Hierarchy.

Only run-level failures are modelled as exceptions. Per-node filesystem
errors never leave the walker; they are logged and counted instead.
"""


class RduError(Exception):
    """Base class for all application-level failures."""


class ConfigurationError(RduError, ValueError):
    """Raised when a configuration value cannot be accepted (fatal, pre-walk)."""


class OutputError(RduError):
    """Raised when the report cannot be written to its destination."""
