from .errors import (
    ConfigurationError,
    DeletionFailedError,
    FilesystemUnavailableError,
    PathValidationError,
    PurgeError,
    UnauthorizedError,
)
from .filesystem import Filesystem, LocalFilesystem, acquire_filesystem
from .purge import PurgeController, PurgeGuard
from .signals import after_purge, before_purge
from .types import CacheZoneConfig, DirectoryEntry, EntryKind, InvalidReason, ValidationResult
from .validator import is_cache_key_name, is_cache_zone_shape, validate_path

__all__ = [
    "CacheZoneConfig",
    "ConfigurationError",
    "DeletionFailedError",
    "DirectoryEntry",
    "EntryKind",
    "Filesystem",
    "FilesystemUnavailableError",
    "InvalidReason",
    "LocalFilesystem",
    "PathValidationError",
    "PurgeController",
    "PurgeError",
    "PurgeGuard",
    "UnauthorizedError",
    "ValidationResult",
    "acquire_filesystem",
    "after_purge",
    "before_purge",
    "is_cache_key_name",
    "is_cache_zone_shape",
    "validate_path",
]
