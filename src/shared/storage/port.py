"""File storage port (abstract interface).

Receipts and CVs are written through this contract so that the local-disk
adapter used in deployments and the in-memory fake used in tests are
interchangeable without touching domain or route code.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import PurePath

from protean.exceptions import ValidationError

MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class UploadPolicy:
    """Accepted extensions and content types for one kind of upload."""

    field: str
    extensions: frozenset[str]
    content_types: frozenset[str]
    max_bytes: int = MAX_UPLOAD_BYTES


RECEIPT_POLICY = UploadPolicy(
    field="receipt",
    extensions=frozenset({".jpg", ".jpeg", ".png", ".pdf"}),
    content_types=frozenset({"image/jpeg", "image/jpg", "image/png", "application/pdf"}),
)

CV_POLICY = UploadPolicy(
    field="cv_file",
    extensions=frozenset({".pdf", ".doc", ".docx"}),
    content_types=frozenset(
        {
            "application/pdf",
            "application/msword",
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        }
    ),
)


def validate_upload(policy: UploadPolicy, filename: str | None, content_type: str | None, size: int) -> None:
    """Reject uploads whose extension, content type or size breaks the policy."""
    if not filename:
        raise ValidationError({policy.field: ["File is required"]})

    extension = PurePath(filename).suffix.lower()
    if extension not in policy.extensions or (content_type or "").lower() not in policy.content_types:
        allowed = ", ".join(sorted(ext.lstrip(".").upper() for ext in policy.extensions))
        raise ValidationError({policy.field: [f"Only {allowed} files are allowed"]})

    if size > policy.max_bytes:
        raise ValidationError({policy.field: [f"File exceeds the {policy.max_bytes // (1024 * 1024)}MB limit"]})


async def read_upload(policy: UploadPolicy, upload) -> bytes:
    """Validate a FastAPI ``UploadFile`` against the policy and return its content.

    The declared size is checked before reading, and at most ``max_bytes + 1``
    bytes are read, so an oversized body is refused without being buffered whole.
    """
    validate_upload(policy, upload.filename, upload.content_type, upload.size or 0)
    content = await upload.read(policy.max_bytes + 1)
    validate_upload(policy, upload.filename, upload.content_type, len(content))
    return content


class FileStorage(ABC):
    """Abstract file storage interface."""

    @abstractmethod
    def save(self, folder: str, prefix: str, filename: str, content: bytes) -> str:
        """Persist the content and return a path that can later be deleted."""
        ...

    @abstractmethod
    def delete(self, path: str) -> None:
        """Remove a previously saved file. Missing files are not an error."""
        ...

    @abstractmethod
    def exists(self, path: str) -> bool:
        """Return True when a file is stored at the given path."""
        ...

    @abstractmethod
    def read(self, path: str) -> bytes:
        """Return the stored content. Raises FileNotFoundError for unknown paths."""
        ...
