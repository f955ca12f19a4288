from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from app.core.value_objects.completion import CompletionResult


class ExerciseEngineError(Exception):
    """Base class for errors raised by the attempt and grading engine."""


class ExerciseNotFound(ExerciseEngineError):
    def __init__(self, exercise_id: int, reason: str = 'not found'):
        self.exercise_id = exercise_id
        super().__init__(f'Exercise {exercise_id} {reason}')


class ItemNotFound(ExerciseEngineError):
    def __init__(self, item_id: int, exercise_id: int):
        self.item_id = item_id
        self.exercise_id = exercise_id
        super().__init__(
            f'Item {item_id} is not part of exercise {exercise_id}'
        )


class AttemptNotFound(ExerciseEngineError):
    def __init__(self, attempt_id: int):
        self.attempt_id = attempt_id
        super().__init__(f'Attempt {attempt_id} not found')


class AttemptAlreadyTerminal(ExerciseEngineError):
    def __init__(
        self, attempt_id: int, status: str, message: Optional[str] = None
    ):
        self.attempt_id = attempt_id
        self.status = status
        super().__init__(
            message
            or (
                f'Attempt {attempt_id} is already {status} '
                f'and accepts no further changes'
            )
        )


class AttemptTimeExpired(AttemptAlreadyTerminal):
    """Raised when an interaction hits an attempt whose time limit has
    elapsed. The attempt has been force-completed before raising."""

    def __init__(
        self,
        attempt_id: int,
        result: Optional['CompletionResult'] = None,
    ):
        self.result = result
        super().__init__(
            attempt_id,
            'completed',
            message=(
                f'Time limit for attempt {attempt_id} has elapsed; '
                f'the attempt was completed with the answers recorded so far'
            ),
        )


class ItemAlreadyAnswered(ExerciseEngineError):
    def __init__(self, attempt_id: int, item_id: int):
        self.attempt_id = attempt_id
        self.item_id = item_id
        super().__init__(
            f'Item {item_id} was already answered in attempt {attempt_id}'
        )


class InvalidAnswerShape(ExerciseEngineError):
    def __init__(self, exercise_type: str, detail: str = ''):
        self.exercise_type = exercise_type
        self.detail = detail
        message = f'Answer does not match the shape of a {exercise_type} item'
        if detail:
            message = f'{message}: {detail}'
        super().__init__(message)


class Unauthorized(ExerciseEngineError):
    def __init__(self, attempt_id: int, student_id: int):
        self.attempt_id = attempt_id
        self.student_id = student_id
        super().__init__(
            f'Student {student_id} does not own attempt {attempt_id}'
        )


class ConcurrentAttemptModification(ExerciseEngineError):
    def __init__(self, attempt_id: Optional[int]):
        self.attempt_id = attempt_id
        super().__init__(
            f'Attempt {attempt_id} was modified by a concurrent request'
        )


class DuplicateActiveAttempt(ExerciseEngineError):
    """Raised by a store when an IN_PROGRESS attempt already exists for the
    (exercise, student) pair."""

    def __init__(self, exercise_id: int, student_id: int):
        self.exercise_id = exercise_id
        self.student_id = student_id
        super().__init__(
            f'Student {student_id} already has an attempt in progress '
            f'for exercise {exercise_id}'
        )
