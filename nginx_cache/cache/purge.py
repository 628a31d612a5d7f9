import logging
import threading
from typing import Callable, Optional, Tuple

from .errors import DeletionFailedError, FilesystemUnavailableError, error_for_result
from .filesystem import Filesystem, acquire_filesystem
from .signals import after_purge, before_purge
from .types import CacheZoneConfig, ValidationResult
from .validator import validate_path

logger = logging.getLogger(__name__)


class PurgeGuard:
    """
    Allows one purge attempt per triggering context.
    Create a fresh guard for every request / command invocation.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self.completed = False

    def claim(self) -> bool:
        """Atomically flip ``completed``; True only for the first caller."""
        with self._lock:
            if self.completed:
                return False
            self.completed = True
            return True


class PurgeController:
    def __init__(
        self,
        load_config: Callable[[], CacheZoneConfig],
        acquire: Callable[[], Filesystem] = acquire_filesystem,
    ):
        self._load_config = load_config
        self._acquire = acquire

    def _acquire_filesystem(self) -> Optional[Filesystem]:
        try:
            return self._acquire()
        except FilesystemUnavailableError as e:
            logger.warning("Filesystem unavailable: %s", e)
            return None

    def _check(self) -> Tuple[str, Optional[Filesystem], ValidationResult]:
        path = (self._load_config().path or "").strip()
        if not path:
            # nothing to acquire a filesystem for
            return path, None, validate_path(path, None)
        filesystem = self._acquire_filesystem()
        return path, filesystem, validate_path(path, filesystem)

    def validate(self) -> ValidationResult:
        """Validate the configured cache zone path without purging."""
        return self._check()[2]

    def request_purge(self) -> None:
        """
        Validate the configured path and delete the cache zone.
        Raises a PurgeError subclass; nothing is deleted unless validation passed.
        """
        path, filesystem, result = self._check()
        if not result.valid:
            logger.info("Cache purge skipped for %r: %s", path, result.message)
            raise error_for_result(result)

        before_purge.send(self)

        try:
            filesystem.remove_recursive(path)
        except OSError as e:
            logger.error("Cache purge of %s failed: %s", path, e)
            raise DeletionFailedError() from e

        after_purge.send(self)
        logger.info("Purged cache zone %s", path)

    def request_purge_once(self, guard: PurgeGuard) -> bool:
        """
        Purge unless ``guard`` already saw an attempt in this context.
        Returns True when a purge was attempted. Errors from the attempt propagate.
        """
        if not guard.claim():
            logger.debug("Cache purge already attempted in this context")
            return False
        self.request_purge()
        return True
