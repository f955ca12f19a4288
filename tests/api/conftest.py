from typing import Any, AsyncGenerator

import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.api.dependencies import get_exercise_attempt_service
from app.core.entities.exercise import Exercise
from app.core.services.exercise_attempt import ExerciseAttemptService
from app.db.repositories.exercise import SQLAlchemyExerciseRepository
from app.db.repositories.exercise_attempt import (
    SQLAlchemyExerciseAttemptRepository,
)
from app.main import app


@pytest_asyncio.fixture
async def exercise_attempt_service(async_session) -> ExerciseAttemptService:
    return ExerciseAttemptService(
        exercise_repository=SQLAlchemyExerciseRepository(async_session),
        exercise_attempt_repository=SQLAlchemyExerciseAttemptRepository(
            async_session
        ),
    )


@pytest_asyncio.fixture
async def client(
    exercise_attempt_service,
) -> AsyncGenerator[AsyncClient, Any]:
    app.dependency_overrides[get_exercise_attempt_service] = (
        lambda: exercise_attempt_service
    )
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url='http://test'
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def exercise(async_session, multiple_choice_exercise) -> Exercise:
    return await SQLAlchemyExerciseRepository(async_session).create(
        multiple_choice_exercise
    )


@pytest_asyncio.fixture
async def timed_exercise_stored(async_session, timed_exercise) -> Exercise:
    return await SQLAlchemyExerciseRepository(async_session).create(
        timed_exercise
    )
