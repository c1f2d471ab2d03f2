"""cover-upload-api - book cover upload service powered by Robyn."""

from robyn import Robyn

from app.api.covers import router as covers_router
from app.api.health import router as health_router
from app.core.lifespan import Lifespan
from app.core.logger import LogIcon, logger
from app.core.settings import settings as st
from app.events.storage import StorageEvent

app = Robyn(__file__)

# Lifespan events
lifespan = Lifespan(app).register(StorageEvent)

app.startup_handler(lifespan.startup)
app.shutdown_handler(lifespan.shutdown)

# Routers
app.include_router(health_router)
app.include_router(covers_router)


def main() -> None:
    logger.info("Starting server", icon=LogIcon.START, name=st.API_NAME, host=st.API_HOST, port=st.API_PORT)
    app.start(host=st.API_HOST, port=st.API_PORT)


if __name__ == "__main__":
    main()
