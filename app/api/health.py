"""Health check endpoint."""

from pydantic import BaseModel

from app.core.logger import LogIcon, logger
from app.core.router import Router
from app.core.settings import settings as st

router = Router(__file__, prefix="")


class HealthResponse(BaseModel):
    status: str
    service: str
    version: str
    storage: str
    bucket: str


def health_report(storage_name: str | None) -> HealthResponse:
    """Healthy once a storage backend has been started."""
    return HealthResponse(
        status="healthy" if storage_name else "starting",
        service=st.API_NAME,
        version=st.API_VERSION,
        storage=storage_name or "none",
        bucket=st.BUCKET_NAME,
    )


@router.get("/health")
async def health_check(global_dependencies) -> HealthResponse:
    logger.info("Health check requested", icon=LogIcon.HEALTHCHECK)
    storage = global_dependencies["state"].get("storage")
    return health_report(storage.name if storage is not None else None)
