"""
Middleware para logging de requests HTTP
"""
import logging
import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.types import ASGIApp

logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """
    Logea cada request entrante con su status y tiempo de procesamiento.

    Agrega el header `X-Process-Time` y emite un warning cuando el request
    supera `slow_request_threshold` segundos (normalmente por Riot lento).
    """

    def __init__(self, app: ASGIApp, slow_request_threshold: float = 5.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.perf_counter()
        client_host = request.client.host if request.client else None

        logger.debug(
            f"[REQUEST] {request.method} {request.url.path} | "
            f"Client: {client_host} | Query: {dict(request.query_params)}"
        )

        try:
            response = await call_next(request)
        except Exception as e:
            process_time = time.perf_counter() - start_time
            logger.error(
                f"[REQUEST] ERROR en {request.method} {request.url.path} | "
                f"Time: {process_time:.3f}s | Error: {e}",
                exc_info=True
            )
            raise

        process_time = time.perf_counter() - start_time
        response.headers["X-Process-Time"] = f"{process_time:.4f}"

        log_level = logging.INFO if response.status_code < 400 else logging.WARNING
        logger.log(
            log_level,
            f"[REQUEST] {request.method} {request.url.path} | "
            f"Status: {response.status_code} | Time: {process_time:.3f}s"
        )

        if process_time > self.slow_request_threshold:
            logger.warning(
                f"[PERFORMANCE] Request lento: {request.method} {request.url.path} | "
                f"Tiempo: {process_time:.3f}s (umbral: {self.slow_request_threshold}s)"
            )

        return response
