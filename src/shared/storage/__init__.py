"""File storage factory.

Provides get_storage() / set_storage() to swap implementations:
- LocalFileStorage for development and production
- InMemoryFileStorage for tests

stored_file_response() serves a stored upload back to an authorized caller.
"""

import mimetypes
from pathlib import PurePath

from fastapi.responses import Response
from protean.exceptions import ObjectNotFoundError

from shared.storage.local_adapter import LocalFileStorage
from shared.storage.port import FileStorage

_current_storage: FileStorage | None = None


def get_storage() -> FileStorage:
    """Return the current file storage. Defaults to LocalFileStorage."""
    global _current_storage
    if _current_storage is None:
        _current_storage = LocalFileStorage()
    return _current_storage


def set_storage(storage: FileStorage) -> None:
    """Override the active file storage (useful for tests)."""
    global _current_storage
    _current_storage = storage


def reset_storage() -> None:
    """Reset to default storage."""
    global _current_storage
    _current_storage = None


def stored_file_response(path: str) -> Response:
    """Return the file at ``path`` inline, typed by its extension; 404 when it is gone."""
    try:
        content = get_storage().read(path)
    except FileNotFoundError:
        raise ObjectNotFoundError("Stored file not found") from None

    media_type = mimetypes.guess_type(path)[0] or "application/octet-stream"
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'inline; filename="{PurePath(path).name}"'},
    )
