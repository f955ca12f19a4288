import logging

from starlette.middleware.base import (
    BaseHTTPMiddleware,
    RequestResponseEndpoint,
)
from starlette.requests import Request
from starlette.responses import Response

from app.db.db import async_session_maker

logger = logging.getLogger(__name__)


class DBSessionMiddleware(BaseHTTPMiddleware):
    """
    Opens one session per request and ends its transaction once the
    response is ready.

    4xx responses still commit: a request rejected because the time limit
    elapsed has already force-completed the attempt, and that must stick.
    """

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        async with async_session_maker() as session:
            request.state.db = session
            try:
                response = await call_next(request)
                if response.status_code >= 500:
                    logger.warning(
                        f'{request.method} {request.url.path} returned '
                        f'{response.status_code}, rolling back.'
                    )
                    await session.rollback()
                else:
                    await session.commit()
            except Exception:
                logger.exception(
                    'An error occurred during a database transaction, '
                    'rolling back.'
                )
                await session.rollback()
                raise
        return response
