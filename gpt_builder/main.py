from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .routers import gpts, pages
from .db import Base, get_engine
from .deps import get_vector_index
from .errors import AppError
from . import models  # noqa: F401  registers tables on Base.metadata
from gpt_builder.utils.logging import logger


def init_storage() -> None:
    logger.info("Creating database tables (if not exist)")
    Base.metadata.create_all(bind=get_engine())
    get_vector_index().ensure_index()


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_storage()
    yield


app = FastAPI(title="Custom GPT Builder", lifespan=lifespan)
logger.info("FastAPI app instance created")


# Routers
app.include_router(gpts.router)
app.include_router(pages.router)
logger.info("Routers registered: gpts, pages")


@app.get("/health")
def health():
    logger.info("Health check /health endpoint called")
    return {"status": "ok"}


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError):
    if exc.status_code >= 500:
        logger.error(f"{type(exc).__name__} on path {request.url.path}: {exc.detail or exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on path {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"Invalid request body on path {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=400, content={"error": "Invalid request"})


# Global exception handler (nice for logging unexpected errors)
@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on path {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error"},
    )
