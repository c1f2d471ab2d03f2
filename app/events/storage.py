"""Storage backend lifespan event."""

from app.core.lifespan import BaseEvent
from app.core.logger import LogIcon, logger
from app.storage.base import ObjectStorage
from app.storage.factory import create_storage


class StorageEvent(BaseEvent[ObjectStorage]):
    """Creates the configured object storage once per process."""

    name = "storage"

    async def startup(self) -> ObjectStorage:
        storage = create_storage(self.config)
        logger.info("Storage ready", icon=LogIcon.STORAGE, backend=storage.name, bucket=self.config.BUCKET_NAME)
        return storage
