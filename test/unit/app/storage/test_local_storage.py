"""Tests for the filesystem and in-memory storage backends and the backend factory."""

from pathlib import Path
from unittest.mock import patch

import orjson
import pytest

from app.core.errors import StorageError
from app.core.settings import Settings
from app.storage.factory import create_storage
from app.storage.local import InMemoryObjectStorage, LocalObjectStorage
from app.storage.s3 import S3ObjectStorage


class TestLocalObjectStorage:
    """Tests for LocalObjectStorage."""

    def test_writes_object_and_metadata(self, tmp_path: Path) -> None:
        storage = LocalObjectStorage(tmp_path)

        receipt = storage.put("covers", "key-1", b"\x89PNG", "multipart/form-data; boundary=x", 4)

        assert (tmp_path / "covers" / "key-1").read_bytes() == b"\x89PNG"
        metadata = orjson.loads((tmp_path / "covers" / "key-1.meta.json").read_bytes())
        assert metadata == {"content_type": "multipart/form-data; boundary=x", "content_length": 4}
        assert receipt.key == "key-1"
        assert receipt.etag

    @pytest.mark.parametrize(("bucket", "key"), [("covers", "../escape"), ("covers", "a/b"), ("..", "k"), ("b", "")])
    def test_path_segments_are_rejected(self, tmp_path: Path, bucket: str, key: str) -> None:
        with pytest.raises(StorageError):
            LocalObjectStorage(tmp_path).put(bucket, key, b"x", "image/png", 1)

    def test_os_error_becomes_storage_error(self, tmp_path: Path) -> None:
        blocker = tmp_path / "covers"
        blocker.write_bytes(b"a file where the bucket directory should be")

        with pytest.raises(StorageError):
            LocalObjectStorage(tmp_path).put("covers", "key-1", b"x", "image/png", 1)

    def test_failed_write_leaves_no_object(self, tmp_path: Path) -> None:
        with patch.object(Path, "replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError, match="disk full"):
                LocalObjectStorage(tmp_path).put("covers", "key-1", b"\x89PNG", "image/png", 4)

        assert list((tmp_path / "covers").iterdir()) == []

    def test_failed_metadata_write_leaves_no_object(self, tmp_path: Path) -> None:
        with patch("app.storage.local.orjson") as serializer:
            serializer.dumps.side_effect = OSError("read-only")
            with pytest.raises(StorageError):
                LocalObjectStorage(tmp_path).put("covers", "key-1", b"\x89PNG", "image/png", 4)

        assert not (tmp_path / "covers" / "key-1").exists()


class TestInMemoryObjectStorage:
    """Tests for InMemoryObjectStorage."""

    def test_put_and_get(self) -> None:
        storage = InMemoryObjectStorage()
        storage.put("b", "k", b"data", "image/png", 4)

        assert storage.get("b", "k") == b"data"
        assert storage.objects[("b", "k")] == (b"data", "image/png", 4)

    def test_get_missing(self) -> None:
        assert InMemoryObjectStorage().get("b", "missing") is None


class TestCreateStorage:
    """Tests for create_storage factory."""

    def test_memory_backend(self) -> None:
        assert isinstance(create_storage(Settings(STORAGE_BACKEND="memory")), InMemoryObjectStorage)

    def test_local_backend_uses_configured_path(self, tmp_path: Path) -> None:
        storage = create_storage(Settings(STORAGE_BACKEND="local", LOCAL_STORAGE_PATH=tmp_path))
        assert isinstance(storage, LocalObjectStorage)
        assert storage.root == tmp_path

    def test_s3_backend(self) -> None:
        config = Settings(STORAGE_BACKEND="s3", AWS_REGION="us-west-1", S3_ENDPOINT_URL="http://minio:9000")
        with patch("app.storage.factory.create_s3_client") as client_factory:
            storage = create_storage(config)

        client_factory.assert_called_once_with("us-west-1", "http://minio:9000")
        assert isinstance(storage, S3ObjectStorage)
