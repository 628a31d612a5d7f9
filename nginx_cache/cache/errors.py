from typing import Optional

from .types import InvalidReason, ValidationResult


class PurgeError(Exception):
    """Base class for everything that stops a cache purge."""

    default_reason: Optional[InvalidReason] = None

    def __init__(self, message: str = "", reason: Optional[InvalidReason] = None):
        self.reason = reason or self.default_reason
        if not message and self.reason is not None:
            message = self.reason.message
        super().__init__(message)

    @property
    def message(self) -> str:
        return str(self)


class ConfigurationError(PurgeError):
    """The cache zone path is not configured yet. Informational."""

    default_reason = InvalidReason.PATH_EMPTY


class PathValidationError(PurgeError):
    """The configured path is not something we are willing to delete."""


class FilesystemUnavailableError(PurgeError):
    default_reason = InvalidReason.FILESYSTEM_UNAVAILABLE


class DeletionFailedError(FilesystemUnavailableError):
    """Removal of the cache zone failed part-way or entirely."""

    def __init__(self, message: str = "", reason: Optional[InvalidReason] = None):
        super().__init__(message or "Cache zone could not be removed.", reason)


class UnauthorizedError(PurgeError):
    """The anti-forgery token for a manual action was missing or invalid."""

    def __init__(self, message: str = "", reason: Optional[InvalidReason] = None):
        super().__init__(message or "The link you followed has expired.", reason)


def error_for_result(result: ValidationResult) -> PurgeError:
    """Map an invalid ValidationResult to the matching PurgeError."""
    if result.valid:
        raise ValueError("result is valid")
    if result.reason is InvalidReason.PATH_EMPTY:
        return ConfigurationError()
    if result.reason is InvalidReason.FILESYSTEM_UNAVAILABLE:
        return FilesystemUnavailableError()
    return PathValidationError(reason=result.reason)
