import logging
import time

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

logger = logging.getLogger(__name__)


def _level_for(status_code: int) -> int:
    # 4xx sono errori del client (validazione, id inesistente), non guasti
    if status_code >= 500:
        return logging.ERROR
    if status_code >= 400:
        return logging.WARNING
    return logging.INFO


class LoggingMiddleware(BaseHTTPMiddleware):
    """Una riga per richiesta; le eccezioni non gestite vengono loggate e rilanciate."""

    async def dispatch(self, request: Request, call_next):
        start = time.monotonic()
        client = request.client.host if request.client else "-"

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "%s %s da %s -> eccezione non gestita (%.3fs)",
                request.method, request.url.path, client, time.monotonic() - start,
            )
            raise

        logger.log(
            _level_for(response.status_code),
            "%s %s da %s -> %s (%.3fs)",
            request.method,
            request.url.path,
            client,
            response.status_code,
            time.monotonic() - start,
        )
        return response
