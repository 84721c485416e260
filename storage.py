import logging
import os
import tempfile
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class StorageError(OSError):
    """Raised when a key cannot be read from or written to storage."""


class FileStorage:
    """Local key-value storage: one ``<key>.json`` file per key in ``data_dir``."""

    def __init__(self, data_dir: str = ".") -> None:
        self.data_dir = data_dir

    def path_for(self, key: str) -> str:
        return os.path.join(self.data_dir, f"{key}.json")

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        if not os.path.exists(path):
            return None
        try:
            with open(path, "rb") as f:
                return f.read()
        except OSError as e:
            raise StorageError(f"Could not read {os.path.basename(path)}: {e}") from e

    def set(self, key: str, value: bytes) -> None:
        path = self.path_for(key)
        try:
            os.makedirs(self.data_dir, exist_ok=True)
            fd, tmp = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(value)
                os.replace(tmp, path)
            except BaseException:
                os.unlink(tmp)
                raise
        except OSError as e:
            raise StorageError(f"Could not save {os.path.basename(path)}: {e}") from e
        logger.debug("Wrote %d bytes to %s", len(value), path)


class MemoryStorage:
    """Dict-backed storage for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, bytes]] = None) -> None:
        self.data: Dict[str, bytes] = dict(initial or {})

    def get(self, key: str) -> Optional[bytes]:
        return self.data.get(key)

    def set(self, key: str, value: bytes) -> None:
        self.data[key] = bytes(value)
