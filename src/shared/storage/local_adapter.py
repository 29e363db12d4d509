"""Local-disk file storage.

Files land under ``<root>/<folder>/`` with a name built from the caller's
prefix, the upload time in milliseconds and a random suffix, keeping the
original extension.
"""

import os
import secrets
import time
from pathlib import Path, PurePath

import structlog

from shared.storage.port import FileStorage

logger = structlog.get_logger(__name__)


class LocalFileStorage(FileStorage):
    """Stores uploads on the local filesystem."""

    def __init__(self, root: str | None = None) -> None:
        self.root = Path(root or os.getenv("UPLOAD_DIR", "uploads"))

    def save(self, folder: str, prefix: str, filename: str, content: bytes) -> str:
        directory = self.root / folder
        directory.mkdir(parents=True, exist_ok=True)

        suffix = f"{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        target = directory / f"{prefix}-{suffix}{PurePath(filename).suffix.lower()}"
        target.write_bytes(content)

        logger.info("Stored upload", path=str(target), size=len(content))
        return str(target)

    def delete(self, path: str) -> None:
        target = Path(path)
        if target.exists():
            target.unlink()
            logger.info("Deleted upload", path=path)

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def read(self, path: str) -> bytes:
        return Path(path).read_bytes()
