from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.dependencies import (
    get_current_student_id,
    get_exercise_attempt_service,
)
from app.api.schemas.attempt import AttemptSchema
from app.api.schemas.stats import StudentStatsSchema
from app.core.services.exercise_attempt import ExerciseAttemptService

router = APIRouter()


@router.get(
    '/me/attempts',
    response_model=List[AttemptSchema],
    summary='Attempts of the current student, newest first',
)
async def list_my_attempts(
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
    exercise_id: Annotated[
        Optional[int], Query(description='Only attempts on this exercise')
    ] = None,
) -> List[AttemptSchema]:
    attempts = await service.list_student_attempts(
        student_id, exercise_id=exercise_id
    )
    return [AttemptSchema.from_entity(attempt) for attempt in attempts]


@router.get(
    '/me/stats',
    response_model=StudentStatsSchema,
    summary='Exercise statistics of the current student',
)
async def get_my_stats(
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
) -> StudentStatsSchema:
    stats = await service.get_student_stats(student_id)
    return StudentStatsSchema(**stats.model_dump())
