"""Centralized exit codes for the modlists CLI."""


class ExitCodes:
    """Standard exit codes for modlists CLI commands."""

    SUCCESS = 0

    BUILD_FAILED = 1
    INVALID_INPUT = 2
