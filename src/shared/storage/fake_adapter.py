"""In-memory file storage for tests.

Keeps saved files in a dict and can be told to fail deletions, which lets
tests exercise the non-fatal cleanup paths.
"""

from uuid import uuid4

from shared.storage.port import FileStorage


class InMemoryFileStorage(FileStorage):
    """Dict-backed file storage."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.fail_deletes: bool = False
        self.deleted: list[str] = []

    def save(self, folder: str, prefix: str, filename: str, content: bytes) -> str:
        path = f"memory://{folder}/{prefix}-{uuid4().hex[:12]}-{filename}"
        self.files[path] = content
        return path

    def delete(self, path: str) -> None:
        if self.fail_deletes:
            raise OSError(f"Cannot delete {path}")
        self.files.pop(path, None)
        self.deleted.append(path)

    def exists(self, path: str) -> bool:
        return path in self.files

    def read(self, path: str) -> bytes:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None
