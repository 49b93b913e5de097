"""
FastAPI application factory
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from dailytodo.config import get_settings
from dailytodo.infrastructure.db.session import check_db_connection, init_db
from dailytodo.api.v1 import tasks

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("Database tables ready")
    yield


def create_app(create_tables: bool = True) -> FastAPI:
    """
    Application factory - builds and configures the FastAPI app
    """
    settings = get_settings()
    logging.basicConfig(level=settings.LOG_LEVEL)

    app = FastAPI(
        title="Daily Todo",
        debug=settings.DEBUG,
        lifespan=lifespan if create_tables else None,
    )

    app.include_router(tasks.router)

    # Health checks
    @app.get("/health", response_class=PlainTextResponse, tags=["system"])
    def health():
        """Health check endpoint"""
        return "ok"

    @app.get("/ready", response_class=PlainTextResponse, tags=["system"])
    def ready():
        """Readiness check endpoint (database reachable)"""
        check_db_connection()
        return "ok"

    return app


# Create app instance
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "dailytodo.main:app",
        host="127.0.0.1",
        port=8000,
        reload=True,
    )
