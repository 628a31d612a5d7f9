import logging
import string
from typing import Iterable, Optional

from .filesystem import Filesystem
from .types import DirectoryEntry, InvalidReason, ValidationResult

logger = logging.getLogger(__name__)

_HEX_DIGITS = frozenset(string.hexdigits)
CACHE_KEY_LENGTH = 32


def is_cache_key_name(name: str) -> bool:
    """Nginx names cached responses by the MD5 of the cache key."""
    return len(name) == CACHE_KEY_LENGTH and all(ch in _HEX_DIGITS for ch in name)


def is_cache_zone_shape(entries: Iterable[DirectoryEntry]) -> bool:
    """
    True when every file below ``entries``, at any depth, is named like an
    Nginx cache key. Directories recurse; empty directories pass.

    Files of a level are checked before any subdirectory is opened, and the
    walk stops at the first bad name, so lazy listings are only read as far
    as needed. OSError from a lazy listing propagates.
    """
    subdirs = []
    for entry in entries:
        if entry.is_dir:
            subdirs.append(entry)
        elif not is_cache_key_name(entry.name):
            return False
    for entry in subdirs:
        if not is_cache_zone_shape(entry.children):
            return False
    return True


def validate_path(path: Optional[str], filesystem: Optional[Filesystem]) -> ValidationResult:
    """
    Decide whether ``path`` is safe to purge as a cache zone.

    ``filesystem`` is an acquired handle, or None when acquisition failed.
    Checks run in order and stop at the first failure:
    empty, filesystem, exists, directory, shape, writable.
    Only reads from disk.
    """
    if not path or not path.strip():
        return ValidationResult.invalid(InvalidReason.PATH_EMPTY)

    if filesystem is None:
        return ValidationResult.invalid(InvalidReason.FILESYSTEM_UNAVAILABLE)

    if not filesystem.exists(path):
        return ValidationResult.invalid(InvalidReason.PATH_NOT_FOUND)

    if not filesystem.is_dir(path):
        return ValidationResult.invalid(InvalidReason.NOT_A_DIRECTORY)

    try:
        shaped = is_cache_zone_shape(filesystem.list_recursive(path).children)
    except OSError as e:
        # only reached when no bad file was seen before the unreadable directory
        logger.warning("Could not list cache zone %s: %s", path, e)
        return ValidationResult.invalid(InvalidReason.FILESYSTEM_UNAVAILABLE)

    if not shaped:
        return ValidationResult.invalid(InvalidReason.NOT_A_CACHE_ZONE_SHAPE)

    if not filesystem.is_writable(path):
        return ValidationResult.invalid(InvalidReason.NOT_WRITABLE)

    return ValidationResult.ok()
