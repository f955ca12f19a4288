from typing import Annotated, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.core.services.exercise_attempt import ExerciseAttemptService
from app.db.db import get_async_session
from app.db.repositories.exercise import SQLAlchemyExerciseRepository
from app.db.repositories.exercise_attempt import (
    SQLAlchemyExerciseAttemptRepository,
)


def get_exercise_attempt_service(
    session: Annotated[AsyncSession, Depends(get_async_session)],
) -> ExerciseAttemptService:
    return ExerciseAttemptService(
        exercise_repository=SQLAlchemyExerciseRepository(session),
        exercise_attempt_repository=SQLAlchemyExerciseAttemptRepository(
            session
        ),
    )


async def get_current_student_id(
    student_id: Annotated[
        Optional[int],
        Header(
            alias=settings.student_id_header,
            description='ID of the student making the request',
        ),
    ] = None,
) -> int:
    """Identity is resolved upstream; the gateway passes it in a header."""
    if student_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f'Missing {settings.student_id_header} header',
        )
    return student_id
