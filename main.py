import logging
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.config import settings
from app.database import create_tables
from app.exception_handlers import register_exception_handlers
from app.plugins.loader import initialize_plugins, shutdown_plugins
from app.plugins.registry import plugin_registry
from app.routes import plugins, topics

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Tasks to run at application startup and shutdown."""
    logger.info("Starting up the application...")
    await create_tables()
    logger.info("Database tables created (if not existing).")
    await initialize_plugins(plugin_registry)
    yield
    logger.info("Shutting down the application...")
    await shutdown_plugins(plugin_registry)


def create_app() -> FastAPI:
    """Create the FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        description="Forum topics with plugin-provided custom fields",
        debug=settings.debug,
        version=settings.app_version,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(topics.router, prefix="/api/v1", tags=["Topics"])
    app.include_router(plugins.router, prefix="/api/v1/plugins")

    if settings.debug:
        logger.info("Running in %s mode", settings.environment)
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)  # Logs SQL statements

    return app


app = create_app()


@app.get("/", tags=["Root"])
async def root():
    return {"message": "Welcome to the forum API"}


if __name__ == "__main__":
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=settings.debug)
