import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator, Dict

from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from app.api.middleware.transaction import DBSessionMiddleware
from app.api.v1.api import api_router
from app.config import settings
from app.db.db import engine, init_db
from app.logging_config import configure_logging
from app.sentry_sdk import sentry_init

configure_logging()

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, Any]:
    if not settings.debug:
        sentry_init()

    await init_db()

    logger.info('Application startup complete.')
    yield

    logger.info('Application shutdown initiated.')
    await engine.dispose()
    logger.info('Application shutdown complete.')


app = FastAPI(title='Exercise Attempts API', lifespan=lifespan)

# Add the transaction management middleware. It should be one of the first.
app.add_middleware(DBSessionMiddleware)

Instrumentator().instrument(app).expose(app)

app.include_router(api_router, prefix='/api/v1')


@app.get('/health', tags=['health'])
async def health() -> Dict[str, str]:
    return {'status': 'ok'}


if __name__ == '__main__':
    import uvicorn

    uvicorn.run('app.main:app', reload=True)
