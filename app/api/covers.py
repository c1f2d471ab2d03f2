"""Cover upload endpoint."""

import asyncio

from robyn import Request

from app.api.responses import build_response
from app.core.errors import UploadError
from app.core.logger import LogIcon, logger
from app.core.router import Router
from app.core.settings import settings as st
from app.models.core import ProxyResponse, RawRequest
from app.services.upload import UploadService
from app.storage.base import ObjectStorage

router = Router(__file__, prefix="")

TRANSFER_ENCODING_HEADER = "content-transfer-encoding"


def handle_upload(raw: RawRequest, service: UploadService) -> ProxyResponse:
    """Run one upload and map its outcome, success or failure, to a response."""
    try:
        result = service.upload(raw)
    except UploadError as err:
        log = logger.warning if err.status_code < 500 else logger.error
        log("Upload rejected", icon=LogIcon.ERROR, kind=err.kind, reason=err.message)
        return build_response(err)
    except Exception as ex:
        logger.exception("Unexpected upload failure", icon=LogIcon.ERROR, error=str(ex))
        return build_response(ex)

    response = build_response(result)
    logger.info("Upload complete", icon=LogIcon.COMPLETE, status=response.statusCode, uuid=result.id)
    return response


def raw_request_from_http(request: Request) -> RawRequest:
    """Read an HTTP request whose body is base64 text flagged by Content-Transfer-Encoding."""
    headers = request.headers
    content_type = headers.get("content-type")
    encoding = headers.get(TRANSFER_ENCODING_HEADER) or ""
    return RawRequest(
        body=request.body,
        is_base64_encoded=encoding.strip().lower() == "base64",
        headers={"content-type": content_type} if content_type is not None else {},
    )


async def store_cover(request: Request, storage: ObjectStorage) -> ProxyResponse:
    """Store the first file of a base64 multipart body and return its id."""
    service = UploadService(storage=storage, bucket=st.BUCKET_NAME)
    return await asyncio.to_thread(handle_upload, raw_request_from_http(request), service)


@router.post("/covers")
async def upload_cover(request: Request, global_dependencies) -> ProxyResponse:
    return await store_cover(request, global_dependencies["state"].storage)
