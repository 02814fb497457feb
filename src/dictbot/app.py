"""Webhook application: Discord interactions endpoint and health check."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dictbot import __version__
from dictbot.config import get_settings
from dictbot.discord.router import router as discord_router
from dictbot.logging_config import SERVICE_NAME, configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = get_settings()
    configure_logging(settings.log_level, settings.environment)
    if not settings.discord_public_key:
        logger.warning("DISCORD_PUBLIC_KEY is not set; every interaction will be rejected")
    app.state.settings = settings
    yield


app = FastAPI(
    title="Discord Dictionary Bot",
    version=__version__,
    lifespan=lifespan,
)
app.include_router(discord_router)


@app.get("/health")
async def health():
    """Liveness probe. Does not touch Discord or the queue."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "version": __version__,
    }
