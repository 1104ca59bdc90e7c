import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from quickdrop.api.routes import router
from quickdrop.config import settings
from quickdrop.db import engine
from quickdrop.models.transfer_event import Base
from quickdrop.store.base import StorageError

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s %(message)s",
)
logger = logging.getLogger(__name__)

MISSING_FIELDS = "Missing required fields"
INVALID_JSON = "Invalid JSON body"
REQUIRED_FIELDS = {"senderName", "receiverName", "fileName"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    logger.info("Database table checked/created")
    yield
    await engine.dispose()


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


def describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if any(error["type"] == "json_invalid" for error in errors):
        return INVALID_JSON
    for error in errors:
        field = error["loc"][-1] if error["loc"] else None
        if error["type"] == "missing" or field in REQUIRED_FIELDS or field == "body":
            return MISSING_FIELDS
    fields = sorted({str(error["loc"][-1]) for error in errors if error["loc"]})
    return f"Invalid fields: {', '.join(fields)}"


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return 400 (not 422) for request validation errors."""
    message = describe_validation_error(exc)
    logger.warning("Rejected %s %s: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": message},
    )


@app.exception_handler(StorageError)
async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
    return JSONResponse(
        status_code=500,
        content={"success": False, "error": str(exc)},
    )


app.include_router(router)
