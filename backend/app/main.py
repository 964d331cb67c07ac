import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.container import get_coalescer, get_upstream_bridge
from app.core.config import settings
from app.core.middleware import apply_cors, register_exception_handlers
from app.routes import api_router, health_router, realtime_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler.

    On startup:
    - Connect the upstream checker bridge (when CHECKER_WEBSOCKET_URL is set)

    On shutdown:
    - Stop the bridge without reconnecting
    - Flush pending block-status broadcasts
    """
    logger.info("=== Domain Dashboard Starting ===")

    bridge = get_upstream_bridge()
    if bridge is not None:
        bridge.start()
    else:
        logger.info("Checker bridge disabled (CHECKER_WEBSOCKET_URL not set)")

    logger.info("=== Domain Dashboard Ready ===")

    yield

    logger.info("=== Domain Dashboard Shutting Down ===")

    if bridge is not None:
        await bridge.stop()
    get_coalescer().close()

    logger.info("Shutdown complete")


app = FastAPI(title="Domain Dashboard Backend", lifespan=lifespan)
logging.basicConfig(
    level=getattr(logging, settings.log_level.upper(), logging.INFO),
    format="%(levelname)s:%(name)s:%(message)s",
)

apply_cors(app)
register_exception_handlers(app)

app.include_router(health_router)
app.include_router(realtime_router)
app.include_router(api_router)
