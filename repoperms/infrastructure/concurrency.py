"""File locks serializing writes to one repository"""

import fcntl
import hashlib
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator

from repoperms.core.errors import LockTimeoutError
from repoperms.infrastructure.logging import get_logger

logger = get_logger(__name__)


class LockManager:
    """File-based exclusive locks keyed by resource id"""

    def __init__(self, lock_dir: Path, timeout: float = 10.0, poll_interval: float = 0.01):
        self.lock_dir = Path(lock_dir)
        self.timeout = timeout
        self.poll_interval = poll_interval

        self._metrics = {
            "acquisitions": 0,
            "releases": 0,
            "timeouts": 0,
            "contentions": 0
        }

    def _get_lock_path(self, resource_id: str) -> Path:
        """Get the filesystem path for a lock file"""
        # Resource ids contain slashes
        hash_id = hashlib.sha256(resource_id.encode()).hexdigest()[:16]
        return self.lock_dir / f"{hash_id}.lock"

    @contextmanager
    def acquire_lock(self, resource_id: str) -> Iterator[None]:
        """Hold an exclusive lock on ``resource_id`` for the ``with`` body"""
        self.lock_dir.mkdir(parents=True, exist_ok=True)
        lock_path = self._get_lock_path(resource_id)

        start_time = time.monotonic()
        deadline = start_time + self.timeout

        with open(lock_path, "a+") as lock_file:
            contended = False
            while True:
                try:
                    fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
                    break
                except BlockingIOError:
                    if not contended:
                        contended = True
                        self._metrics["contentions"] += 1
                    if time.monotonic() >= deadline:
                        self._metrics["timeouts"] += 1
                        logger.warning(
                            "lock_timeout",
                            resource_id=resource_id,
                            timeout=self.timeout
                        )
                        raise LockTimeoutError(resource_id, self.timeout)
                    time.sleep(self.poll_interval)

            self._metrics["acquisitions"] += 1
            logger.debug(
                "lock_acquired",
                resource_id=resource_id,
                duration=time.monotonic() - start_time
            )

            try:
                yield
            finally:
                fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)
                self._metrics["releases"] += 1
                logger.debug(
                    "lock_released",
                    resource_id=resource_id,
                    total_duration=time.monotonic() - start_time
                )

    def get_metrics(self) -> Dict[str, Any]:
        return dict(self._metrics)
