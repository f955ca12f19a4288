from typing import Any

from fastapi import HTTPException, status

from app.core.errors import (
    AttemptAlreadyTerminal,
    AttemptNotFound,
    AttemptTimeExpired,
    ConcurrentAttemptModification,
    DuplicateActiveAttempt,
    ExerciseEngineError,
    ExerciseNotFound,
    InvalidAnswerShape,
    ItemAlreadyAnswered,
    ItemNotFound,
    Unauthorized,
)


class NotFoundError(HTTPException):  # type: ignore
    def __init__(self, detail: str = 'Not Found'):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class BadRequestError(HTTPException):  # type: ignore
    def __init__(self, detail: str = 'Bad Request'):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST, detail=detail
        )


class ForbiddenError(HTTPException):  # type: ignore
    def __init__(self, detail: str = 'Forbidden'):
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class ConflictError(HTTPException):  # type: ignore
    def __init__(self, detail: Any = 'Conflict'):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnprocessableEntityError(HTTPException):  # type: ignore
    def __init__(self, detail: str = 'Unprocessable Entity'):
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail
        )


def to_http_error(error: ExerciseEngineError) -> HTTPException:
    """Maps an engine error to the HTTP error the API answers with."""
    if isinstance(error, (ExerciseNotFound, ItemNotFound, AttemptNotFound)):
        return NotFoundError(str(error))
    if isinstance(error, Unauthorized):
        return ForbiddenError(str(error))
    if isinstance(error, InvalidAnswerShape):
        return UnprocessableEntityError(str(error))
    if isinstance(error, AttemptTimeExpired) and error.result is not None:
        return ConflictError(
            {
                'message': str(error),
                'result': error.result.model_dump(),
            }
        )
    if isinstance(
        error,
        (
            AttemptAlreadyTerminal,
            ItemAlreadyAnswered,
            ConcurrentAttemptModification,
            DuplicateActiveAttempt,
        ),
    ):
        return ConflictError(str(error))
    return BadRequestError(str(error))
