"""FastAPI application entrypoint."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.deps import activity_recorder
from .api.router import router
from .config import settings
from .database import dispose_db, init_db
from .errors import ReviewGateError
from .tasks.worker import app as procrastinate_app
from .utils.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    # Startup
    setup_logging()
    await init_db()
    await procrastinate_app.open_async()
    yield
    # Shutdown
    await activity_recorder.drain()
    await procrastinate_app.close_async()
    await dispose_db()


app = FastAPI(
    title="reviewgate",
    description="Team-consensus pull request reviews with a merge gate and live rooms",
    version="0.1.0",
    lifespan=lifespan,
)


@app.exception_handler(ReviewGateError)
async def reviewgate_error_handler(request: Request, exc: ReviewGateError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.warning(f"{request.method} {request.url.path} failed upstream: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


# Include routes
app.include_router(router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "reviewgate.main:app",
        host=settings.host,
        port=settings.port,
        reload=True,
    )
