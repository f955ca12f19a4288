import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path, status

from app.api.dependencies import (
    get_current_student_id,
    get_exercise_attempt_service,
)
from app.api.errors import to_http_error
from app.api.schemas.attempt import AttemptSchema, StartAttemptResponse
from app.api.schemas.exercise import ExerciseSchema
from app.api.schemas.stats import ExerciseStatsSchema
from app.core.errors import ExerciseEngineError
from app.core.services.exercise_attempt import ExerciseAttemptService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    '/{exercise_id}/attempts',
    response_model=StartAttemptResponse,
    status_code=status.HTTP_200_OK,
    summary='Start an exercise attempt or resume the one in progress',
)
async def start_attempt(
    exercise_id: Annotated[int, Path(description='Exercise ID', ge=1)],
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
) -> StartAttemptResponse:
    """
    Returns the student's attempt in progress for the exercise, creating
    one when there is none, together with the exercise items captured by
    that attempt. Answer keys and explanations are never included.
    """
    try:
        attempt, snapshot = await service.start_attempt(
            exercise_id=exercise_id, student_id=student_id
        )
    except ExerciseEngineError as e:
        raise to_http_error(e) from e
    return StartAttemptResponse(
        attempt=AttemptSchema.from_entity(attempt),
        exercise=ExerciseSchema.from_snapshot(snapshot),
    )


@router.get(
    '/{exercise_id}/stats',
    response_model=ExerciseStatsSchema,
    summary='Attempt statistics for an exercise',
)
async def get_exercise_stats(
    exercise_id: Annotated[int, Path(description='Exercise ID', ge=1)],
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
) -> ExerciseStatsSchema:
    try:
        stats = await service.get_exercise_stats(exercise_id)
    except ExerciseEngineError as e:
        raise to_http_error(e) from e
    return ExerciseStatsSchema(**stats.model_dump())
