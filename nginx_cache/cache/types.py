from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, Optional


class EntryKind(str, Enum):
    FILE = "f"
    DIRECTORY = "d"


@dataclass(frozen=True)
class DirectoryEntry:
    """One node of a recursive directory listing. ``children`` may be lazy."""

    name: str
    kind: EntryKind
    children: Iterable["DirectoryEntry"] = field(default=())

    @property
    def is_dir(self) -> bool:
        return self.kind is EntryKind.DIRECTORY


class InvalidReason(str, Enum):
    PATH_EMPTY = "path-empty"
    PATH_NOT_FOUND = "path-not-found"
    NOT_A_DIRECTORY = "not-a-directory"
    NOT_A_CACHE_ZONE_SHAPE = "not-a-cache-zone"
    NOT_WRITABLE = "not-writable"
    FILESYSTEM_UNAVAILABLE = "filesystem-unavailable"

    @property
    def message(self) -> str:
        return _REASON_MESSAGES[self]


_REASON_MESSAGES = {
    InvalidReason.PATH_EMPTY: '"Cache Zone Path" is not set.',
    InvalidReason.PATH_NOT_FOUND: '"Cache Zone Path" does not exist.',
    InvalidReason.NOT_A_DIRECTORY: '"Cache Zone Path" is not a directory.',
    InvalidReason.NOT_A_CACHE_ZONE_SHAPE: '"Cache Zone Path" does not appear to be a Nginx cache zone directory.',
    InvalidReason.NOT_WRITABLE: '"Cache Zone Path" is not writable.',
    InvalidReason.FILESYSTEM_UNAVAILABLE: "Filesystem API could not be initialized.",
}


@dataclass(frozen=True)
class ValidationResult:
    """Outcome of a path check: valid, or invalid with one reason."""

    reason: Optional[InvalidReason] = None

    @property
    def valid(self) -> bool:
        return self.reason is None

    @property
    def message(self) -> str:
        return "" if self.reason is None else self.reason.message

    @classmethod
    def ok(cls) -> "ValidationResult":
        return cls()

    @classmethod
    def invalid(cls, reason: InvalidReason) -> "ValidationResult":
        return cls(reason=reason)

    def __bool__(self) -> bool:
        return self.valid


@dataclass(frozen=True)
class CacheZoneConfig:
    path: str = ""
    auto_purge_enabled: bool = False
