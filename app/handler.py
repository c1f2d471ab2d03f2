"""AWS Lambda entry point for API Gateway proxy (v1) events."""

from functools import lru_cache
from typing import Any

from asgi_correlation_id import correlation_id
from pydantic import ValidationError
from robyn import status_codes

from app.api.covers import handle_upload
from app.core.logger import LogIcon, logger
from app.core.settings import settings as st
from app.models.core import ProxyResponse, RawRequest
from app.models.events import APIGatewayProxyEvent
from app.services.upload import UploadService
from app.storage.factory import create_storage


@lru_cache(maxsize=1)
def get_upload_service() -> UploadService:
    """One service (and storage client) per warm Lambda container."""
    return UploadService(storage=create_storage(st), bucket=st.BUCKET_NAME)


def handler(event: dict[str, Any], context: Any = None) -> dict[str, Any]:
    request_id = getattr(context, "aws_request_id", None)
    token = correlation_id.set(request_id)
    try:
        try:
            proxy_event = APIGatewayProxyEvent.model_validate(event)
        except ValidationError as ex:
            logger.error("Event is not an API Gateway proxy event", icon=LogIcon.ERROR, error=str(ex))
            return ProxyResponse(statusCode=status_codes.HTTP_500_INTERNAL_SERVER_ERROR).model_dump()

        if proxy_event.requestContext.requestId:
            correlation_id.set(proxy_event.requestContext.requestId)
        logger.info("Request received", icon=LogIcon.START, body_chars=len(proxy_event.body or ""))

        try:
            service = get_upload_service()
        except Exception as ex:
            logger.exception("Storage backend unavailable", icon=LogIcon.ERROR, error=str(ex))
            return ProxyResponse(statusCode=status_codes.HTTP_500_INTERNAL_SERVER_ERROR).model_dump()

        response = handle_upload(RawRequest.from_event(proxy_event), service)
        logger.info("Sending response", icon=LogIcon.COMPLETE, status=response.statusCode)
        return response.model_dump()
    finally:
        correlation_id.reset(token)
