"""Filesystem and in-memory object storage for development and tests."""

import hashlib
from contextlib import suppress
from pathlib import Path

import orjson

from app.core.errors import StorageError
from app.storage.base import ObjectStorage, StorageReceipt

METADATA_SUFFIX = ".meta.json"
STAGING_SUFFIX = ".partial"


def _check_key(bucket: str, key: str) -> None:
    for part in (bucket, key):
        if not part or "/" in part or "\\" in part or part in (".", ".."):
            raise StorageError("Bucket and key must be single path segments", bucket=bucket, key=key)


class LocalObjectStorage(ObjectStorage):
    """Stores objects as ``<root>/<bucket>/<key>`` with a JSON metadata sidecar."""

    name = "local"

    def __init__(self, root: Path) -> None:
        self.root = Path(root)

    def put(self, bucket: str, key: str, data: bytes, content_type: str, content_length: int) -> StorageReceipt:
        _check_key(bucket, key)
        target = self.root / bucket / key
        metadata = {"content_type": content_type, "content_length": content_length}

        metadata_path = target.with_name(key + METADATA_SUFFIX)
        staging = target.with_name(f".{key}{STAGING_SUFFIX}")

        # The object only appears under its key once both files are complete
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            metadata_path.write_bytes(orjson.dumps(metadata))
            staging.write_bytes(data)
            staging.replace(target)
        except OSError as ex:
            for leftover in (staging, metadata_path):
                with suppress(OSError):
                    leftover.unlink(missing_ok=True)
            raise StorageError(str(ex), bucket=bucket, key=key) from ex

        return StorageReceipt(bucket=bucket, key=key, etag=hashlib.md5(data).hexdigest())


class InMemoryObjectStorage(ObjectStorage):
    """Keeps objects in a dict keyed by ``(bucket, key)``."""

    name = "memory"

    def __init__(self) -> None:
        self.objects: dict[tuple[str, str], tuple[bytes, str, int]] = {}

    def put(self, bucket: str, key: str, data: bytes, content_type: str, content_length: int) -> StorageReceipt:
        self.objects[(bucket, key)] = (bytes(data), content_type, content_length)
        return StorageReceipt(bucket=bucket, key=key, etag=hashlib.md5(data).hexdigest())

    def get(self, bucket: str, key: str) -> bytes | None:
        stored = self.objects.get((bucket, key))
        return stored[0] if stored else None
