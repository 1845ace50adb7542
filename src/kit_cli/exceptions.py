"""Custom exceptions for kit."""

from kit_cli.utils.exit_codes import ERROR_GENERAL, ERROR_INVALID_ARGS


class KitError(Exception):
    """Base exception for all kit errors, carrying the process exit code."""

    exit_code = ERROR_GENERAL

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class InvalidConfiguration(KitError):
    """Raised when command parameters fail validation."""

    exit_code = ERROR_INVALID_ARGS


class TerminalModeFailure(KitError):
    """Raised when raw mode or the alternate screen cannot be entered or left."""


class InputStreamFailure(KitError):
    """Raised when reading terminal input fails."""


class ChannelClosed(KitError):
    """Raised when a channel has no live counterpart left."""
