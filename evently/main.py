"""
Production FastAPI Application

Run with: granian --interface asgi evently.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from evently.platform.app_factory import create_app
from evently.platform.config.di import container
from evently.platform.config.wire_modules import WIRE_MODULES
from evently.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Evently] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Evently] Dependency injection wired')

    # Connect eagerly (fail-fast) and make sure the storage-level constraints exist
    await container.connection_manager().acquire()
    await container.event_repo().ensure_indexes()
    await container.booking_repo().ensure_indexes()
    Logger.base.info('🗄️  [Evently] MongoDB connected, indexes ensured')

    yield

    Logger.base.info('🛑 [Evently] Shutting down...')
    await container.connection_manager().close()
    container.unwire()
    Logger.base.info('👋 [Evently] Shutdown complete')


app = create_app(lifespan=lifespan)
