"""
Middleware que registra cada petición: método, ruta, estado y duración.
"""
import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

logger = logging.getLogger("petmatch.access")


class RequestLoggingMiddleware(BaseHTTPMiddleware):

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception:
            # el manejador global responde 500; aquí sólo dejamos constancia
            logger.info("%s %s -> 500 (%.1f ms)", request.method, request.url.path,
                        (time.perf_counter() - start) * 1000)
            raise
        logger.info("%s %s -> %d (%.1f ms)", request.method, request.url.path,
                    response.status_code, (time.perf_counter() - start) * 1000)
        return response
