"""Select the configured storage backend."""

from app.core.settings import Settings
from app.storage.base import ObjectStorage
from app.storage.local import InMemoryObjectStorage, LocalObjectStorage
from app.storage.s3 import S3ObjectStorage, create_s3_client


def create_storage(settings: Settings) -> ObjectStorage:
    """Build the backend named by ``STORAGE_BACKEND``."""
    match settings.STORAGE_BACKEND:
        case "s3":
            return S3ObjectStorage(create_s3_client(settings.AWS_REGION, settings.S3_ENDPOINT_URL))
        case "local":
            return LocalObjectStorage(settings.LOCAL_STORAGE_PATH)
        case "memory":
            return InMemoryObjectStorage()
        case other:
            raise ValueError(f"Unknown storage backend: {other}")
