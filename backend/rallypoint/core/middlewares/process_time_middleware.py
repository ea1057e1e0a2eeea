import time
from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware


class ProcessingTimeMiddleware(BaseHTTPMiddleware):
    """Adds the request handling time, in milliseconds, as a response header."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        processing_time = (time.perf_counter() - start_time) * 1000
        response.headers["X-Process-Time-MS"] = str(round(processing_time, 2))
        return response
