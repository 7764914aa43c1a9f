# preference_center/main.py
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles

from preference_center.api.preferences import STATIC_DIR
from preference_center.api.preferences import router as preferences_router
from preference_center.core.logging import configure_logging
from preference_center.core.settings import Settings, get_settings
from preference_center.customerio.client import CustomerIOClient

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI, app_settings: Settings) -> AsyncGenerator[None, None]:
    logger.info(f"Initializing Customer.io client (region: {app_settings.CUSTOMERIO_REGION.value})...")
    app.state.customerio = CustomerIOClient.from_settings(app_settings)
    logger.info("Customer.io client initialized.")

    yield

    logger.info("Application shutting down. Closing Customer.io client...")
    await app.state.customerio.aclose()


def create_app() -> FastAPI:
    app_settings = get_settings()
    configure_logging(app_settings.LOG_LEVEL.value)

    @asynccontextmanager
    async def lifespan_wrapper(app_instance: FastAPI) -> AsyncGenerator[None, None]:
        async with lifespan(app_instance, app_settings):
            yield

    instance = FastAPI(
        title=app_settings.PROJECT_NAME,
        version=app_settings.PROJECT_VERSION,
        lifespan=lifespan_wrapper,
    )

    instance.include_router(preferences_router)
    instance.mount("/static", StaticFiles(directory=STATIC_DIR), name="static")

    @instance.get("/ping", tags=["health"])
    async def ping() -> dict[str, str]:
        return {"ping": "pong"}

    return instance


app = create_app()
