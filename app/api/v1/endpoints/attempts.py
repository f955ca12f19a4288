import logging
from typing import Annotated

from fastapi import APIRouter, Depends, Path

from app.api.dependencies import (
    get_current_student_id,
    get_exercise_attempt_service,
)
from app.api.errors import to_http_error
from app.api.schemas.answer import (
    AnswerSubmissionSchema,
    EvaluationResultSchema,
)
from app.api.schemas.attempt import AttemptSchema, CompletionResultSchema
from app.core.errors import ExerciseEngineError
from app.core.services.exercise_attempt import ExerciseAttemptService

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get(
    '/{attempt_id}',
    response_model=AttemptSchema,
    summary='Get an attempt of the current student',
)
async def get_attempt(
    attempt_id: Annotated[int, Path(description='Attempt ID', ge=1)],
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
) -> AttemptSchema:
    try:
        attempt = await service.get_attempt(attempt_id, student_id)
    except ExerciseEngineError as e:
        raise to_http_error(e) from e
    return AttemptSchema.from_entity(attempt)


@router.post(
    '/{attempt_id}/answers',
    response_model=EvaluationResultSchema,
    summary='Submit the answer for one item',
)
async def submit_answer(
    attempt_id: Annotated[int, Path(description='Attempt ID', ge=1)],
    submission: AnswerSubmissionSchema,
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
) -> EvaluationResultSchema:
    """
    Grades the answer right away. Submitting again for the same item
    replaces the earlier answer. Answers sent after the time limit are
    rejected with 409 and the attempt is completed with what it has.
    """
    try:
        result = await service.submit_answer(
            attempt_id=attempt_id,
            student_id=student_id,
            item_id=submission.item_id,
            answer=submission.answer,
        )
    except ExerciseEngineError as e:
        raise to_http_error(e) from e
    return EvaluationResultSchema(
        is_correct=result.is_correct,
        points_earned=result.points_earned,
        explanation=result.explanation,
    )


@router.post(
    '/{attempt_id}/complete',
    response_model=CompletionResultSchema,
    summary='Finish an attempt and get the score',
)
async def complete_attempt(
    attempt_id: Annotated[int, Path(description='Attempt ID', ge=1)],
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
) -> CompletionResultSchema:
    try:
        result = await service.complete_attempt(attempt_id, student_id)
    except ExerciseEngineError as e:
        raise to_http_error(e) from e
    return CompletionResultSchema(**result.model_dump())


@router.post(
    '/{attempt_id}/abandon',
    response_model=AttemptSchema,
    summary='Give up an attempt without a score',
)
async def abandon_attempt(
    attempt_id: Annotated[int, Path(description='Attempt ID', ge=1)],
    student_id: Annotated[int, Depends(get_current_student_id)],
    service: Annotated[
        ExerciseAttemptService, Depends(get_exercise_attempt_service)
    ],
) -> AttemptSchema:
    try:
        attempt = await service.abandon_attempt(attempt_id, student_id)
    except ExerciseEngineError as e:
        raise to_http_error(e) from e
    return AttemptSchema.from_entity(attempt)
