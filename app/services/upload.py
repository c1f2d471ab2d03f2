"""Upload orchestration: decode, scan, store."""

import uuid
from collections.abc import Callable

from app.core.errors import StorageError
from app.core.logger import LogIcon, logger
from app.models.core import RawRequest, UploadResult
from app.multipart.decoder import CONTENT_TYPE_HEADER, decode_body, extract_boundary
from app.multipart.scanner import first_part
from app.storage.base import ObjectStorage


def new_id() -> str:
    """Random UUID4 string, used as the object key."""
    return str(uuid.uuid4())


class UploadService:
    """Turns one encoded multipart request into one stored object.

    Only the first part of the body is stored. Nothing is written unless the
    whole body decodes and scans cleanly.
    """

    def __init__(
        self,
        storage: ObjectStorage,
        bucket: str,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        self.storage = storage
        self.bucket = bucket
        self.id_factory = id_factory

    def upload(self, request: RawRequest) -> UploadResult:
        logger.info("Upload request received", icon=LogIcon.NETWORK, encoded=request.is_base64_encoded)

        payload = decode_body(request.body, request.is_base64_encoded)
        logger.info("Request body decoded", icon=LogIcon.PROCESSING, decoded_bytes=len(payload))

        boundary = extract_boundary(request.headers)
        content_type = request.header(CONTENT_TYPE_HEADER)
        logger.info("Boundary extracted", icon=LogIcon.VALIDATION, boundary_length=len(boundary))

        part = first_part(payload, boundary)
        logger.info("File part extracted", icon=LogIcon.FILE, filename=part.filename, part_bytes=len(part.body))

        key = self.id_factory()
        receipt = self._store(key, part.body, content_type)
        logger.info("File persisted", icon=LogIcon.SUCCESS, bucket=self.bucket, key=key)

        return UploadResult(id=key, byte_length=len(part.body), content_type=content_type, receipt=receipt)

    def _store(self, key: str, data: bytes, content_type: str):
        logger.info("Writing object", icon=LogIcon.UPLOAD, bucket=self.bucket, backend=self.storage.name)
        try:
            return self.storage.put(self.bucket, key, data, content_type, len(data))
        except StorageError:
            raise
        except Exception as ex:
            raise StorageError(str(ex), bucket=self.bucket, key=key) from ex
