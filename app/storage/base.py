"""Object storage port used by the upload service."""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class StorageReceipt:
    """Confirmation returned by a backend after a successful write."""

    bucket: str
    key: str
    etag: str | None = None
    version_id: str | None = None


class ObjectStorage(ABC):
    """Write-only view of an object store."""

    name: str

    @abstractmethod
    def put(self, bucket: str, key: str, data: bytes, content_type: str, content_length: int) -> StorageReceipt:
        """Store ``data`` under ``bucket/key``. Raises StorageError on failure."""
