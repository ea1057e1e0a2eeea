from contextlib import asynccontextmanager
import logging
import uuid
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import ORJSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.responses import HTMLResponse
from starlette import status

from rallypoint.api.router import api_router
from rallypoint.config import settings
from rallypoint.db.core import engine
from rallypoint.response import ErrorResponse, CustomHTTPException
from rallypoint.core.utils.discord import notify_error
from rallypoint.core.middlewares.process_time_middleware import (
    ProcessingTimeMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    await engine.dispose()


application = FastAPI(
    title="RallyPoint",
    version=settings.APP_VERSION,
    default_response_class=ORJSONResponse,
    lifespan=lifespan,
)

application.include_router(router=api_router)
application.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
application.add_middleware(ProcessingTimeMiddleware)


@application.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    track_id = str(uuid.uuid4())
    logger.exception(
        f"Unhandled error on {request.method} {request.url.path} (track id {track_id})",
        exc_info=exc,
    )
    try:
        await notify_error(request, exc, track_id)
    except Exception:
        logger.exception("Error while sending error notification")
    return ErrorResponse(
        message="Internal Server Error",
        errors={"error": "An error occurred while processing the request"},
        track_id=track_id,
    ).get_response(status.HTTP_500_INTERNAL_SERVER_ERROR)


@application.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = {}

    for error in exc.errors():
        current = errors

        if len(error["loc"]) <= 1:
            current[error["loc"][0]] = error["msg"]
            continue

        keys = error["loc"][1:]
        for loc in keys[:-1]:
            current = current.setdefault(loc, {})
        current[keys[-1]] = error["msg"]

    return ErrorResponse(
        message="Invalid request",
        errors=errors,
        error_code="VALIDATION_ERROR",
    ).get_response(status.HTTP_400_BAD_REQUEST)


@application.exception_handler(CustomHTTPException)
async def custom_http_exception_handler(request: Request, exc: CustomHTTPException):
    return exc.get_response(exc.status_code, headers=exc.headers)


@application.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return ErrorResponse(message=str(exc.detail)).get_response(
        exc.status_code, headers=getattr(exc, "headers", None)
    )


@application.head("/ping")
async def ping():
    return HTMLResponse(content=None, status_code=status.HTTP_204_NO_CONTENT)
