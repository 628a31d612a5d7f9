"""
Filesystem collaborator used by the validator and the purge controller.

A handle has to be acquired with ``acquire_filesystem()`` before anything
touches the disk; acquisition is where credential or method problems show
up, so callers can tell them apart from a badly configured path.
"""

import logging
import os
import shutil
from abc import ABC, abstractmethod
from typing import Iterator, List, Optional, Tuple

from .errors import FilesystemUnavailableError
from .types import DirectoryEntry, EntryKind

logger = logging.getLogger(__name__)

METHOD_DIRECT = "direct"


class Filesystem(ABC):
    method: str = ""

    @abstractmethod
    def exists(self, path: str) -> bool:
        ...

    @abstractmethod
    def is_dir(self, path: str) -> bool:
        ...

    @abstractmethod
    def list_recursive(self, path: str) -> DirectoryEntry:
        """
        Return the tree rooted at ``path``. Children may be read lazily, so
        iterating them raises OSError when a directory cannot be read.
        """
        ...

    @abstractmethod
    def is_writable(self, path: str) -> bool:
        ...

    @abstractmethod
    def remove_recursive(self, path: str) -> None:
        """Delete ``path`` and everything below it. Raises OSError on failure."""
        ...


class LocalFilesystem(Filesystem):
    """Direct access to the local disk with the permissions of this process."""

    method = METHOD_DIRECT

    def exists(self, path: str) -> bool:
        return os.path.exists(path)

    def is_dir(self, path: str) -> bool:
        return os.path.isdir(path)

    def list_recursive(self, path: str) -> DirectoryEntry:
        return DirectoryEntry(
            name=os.path.basename(os.path.normpath(path)),
            kind=EntryKind.DIRECTORY,
            children=_ScannedChildren(path),
        )

    def is_writable(self, path: str) -> bool:
        return os.access(path, os.W_OK)

    def remove_recursive(self, path: str) -> None:
        shutil.rmtree(path)


class _ScannedChildren:
    """
    Entries of one directory, read from disk on first iteration.
    Walkers that stop early never scan the rest of the tree.
    """

    def __init__(self, path: str, missing_ok: bool = False):
        self._path = path
        self._missing_ok = missing_ok
        self._entries: Optional[Tuple[DirectoryEntry, ...]] = None

    def __iter__(self) -> Iterator[DirectoryEntry]:
        if self._entries is None:
            self._entries = self._scan()
        return iter(self._entries)

    def _scan(self) -> Tuple[DirectoryEntry, ...]:
        entries: List[DirectoryEntry] = []
        try:
            with os.scandir(self._path) as it:
                for entry in sorted(it, key=lambda e: e.name):
                    # symlinks are judged by name like files; rmtree never follows them
                    if entry.is_dir(follow_symlinks=False):
                        entries.append(DirectoryEntry(entry.name, EntryKind.DIRECTORY, _ScannedChildren(entry.path, True)))
                    else:
                        entries.append(DirectoryEntry(entry.name, EntryKind.FILE))
        except FileNotFoundError:
            if not self._missing_ok:
                raise
            # removed by nginx while we were listing
            return ()
        return tuple(entries)


_METHODS = {
    METHOD_DIRECT: LocalFilesystem,
}


def acquire_filesystem(method: str = METHOD_DIRECT) -> Filesystem:
    """
    Acquire a filesystem handle for ``method``.
    Raises FilesystemUnavailableError when the method cannot be used.
    """
    factory = _METHODS.get((method or METHOD_DIRECT).strip().lower())
    if factory is None:
        logger.warning("Filesystem method %r is not available", method)
        raise FilesystemUnavailableError()
    return factory()
