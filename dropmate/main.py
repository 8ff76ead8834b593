import logging
import sys

import uvicorn
from fastapi import FastAPI
from pydantic import ValidationError

from dropmate.infrastructure.config import Settings, get_settings
from dropmate.infrastructure.messaging.gateway import MessagingGateway
from dropmate.presentation.routers import router
from dropmate.presentation.streams import router as streams_router
from dropmate.presentation.webhook import router as webhook_router
from dropmate.services.relay import build_relay

logger = logging.getLogger("dropmate")


def create_app(settings: Settings | None = None, *, gateway: MessagingGateway | None = None) -> FastAPI:
    """
    Build the application with its own in-memory store, subscription registry and LINE gateway.
    """
    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    app = FastAPI(title="DROPMATE")
    app.state.relay = build_relay(settings, gateway=gateway)

    app.include_router(router)
    app.include_router(streams_router)
    app.include_router(webhook_router)
    return app


def run() -> None:
    try:
        settings = get_settings()
    except ValidationError as e:
        missing = ", ".join(str(err["loc"][0]).upper() for err in e.errors())
        logging.basicConfig(level=logging.INFO)
        logger.error("Missing or invalid env: %s", missing)
        sys.exit(1)

    app = create_app(settings)
    logger.info("DROPMATE on http://localhost:%s", settings.port)
    logger.info("   Public base: %s", settings.public_base_url)
    logger.info("   Webhook URL: %s/webhook", settings.public_base_url)
    uvicorn.run(app, host="0.0.0.0", port=settings.port)


if __name__ == "__main__":
    run()
