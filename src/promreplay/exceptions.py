"""
promreplay exceptions module.

Contains exception classes shared by config loading, registration and the CLI.
"""


class ReplayError(Exception):
    """Base class for all promreplay errors."""

    pass


class ConfigError(ReplayError):
    """Exception raised when a replay config cannot be read or validated."""

    pass


class RegistrationError(ReplayError):
    """Exception raised when a metric family cannot be registered."""

    pass
