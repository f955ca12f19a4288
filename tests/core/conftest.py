from typing import Dict, List, Optional

import pytest
import pytest_asyncio

from app.core.entities.exercise import Exercise
from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.enums import AttemptStatus
from app.core.errors import (
    AttemptNotFound,
    ConcurrentAttemptModification,
    DuplicateActiveAttempt,
)
from app.core.repositories.exercise import ExerciseRepository
from app.core.repositories.exercise_attempt import ExerciseAttemptRepository
from app.core.services.exercise_attempt import ExerciseAttemptService


class InMemoryExerciseRepository(ExerciseRepository):
    def __init__(self):
        self.exercises: Dict[int, Exercise] = {}
        self._next_exercise_id = 1
        self._next_item_id = 101

    async def get_by_id(self, exercise_id: int) -> Optional[Exercise]:
        exercise = self.exercises.get(exercise_id)
        return exercise.model_copy(deep=True) if exercise else None

    async def exists(self, exercise_id: int) -> bool:
        return exercise_id in self.exercises

    async def create(self, exercise: Exercise) -> Exercise:
        stored = exercise.model_copy(deep=True)
        stored.exercise_id = self._next_exercise_id
        self._next_exercise_id += 1
        for item in stored.items:
            item.item_id = self._next_item_id
            self._next_item_id += 1
        self.exercises[stored.exercise_id] = stored
        return stored.model_copy(deep=True)


class InMemoryExerciseAttemptRepository(ExerciseAttemptRepository):
    def __init__(self):
        self.attempts: Dict[int, ExerciseAttempt] = {}
        self._next_attempt_id = 1

    def _copy(self, attempt: Optional[ExerciseAttempt]):
        return attempt.model_copy(deep=True) if attempt else None

    async def get_by_id(self, attempt_id: int) -> Optional[ExerciseAttempt]:
        return self._copy(self.attempts.get(attempt_id))

    async def get_by_id_for_update(
        self, attempt_id: int
    ) -> Optional[ExerciseAttempt]:
        return self._copy(self.attempts.get(attempt_id))

    async def get_in_progress(
        self, exercise_id: int, student_id: int
    ) -> Optional[ExerciseAttempt]:
        return self._copy(
            next(
                (
                    attempt
                    for attempt in self.attempts.values()
                    if attempt.exercise_id == exercise_id
                    and attempt.student_id == student_id
                    and attempt.status is AttemptStatus.IN_PROGRESS
                ),
                None,
            )
        )

    async def get_by_student(
        self, student_id: int, exercise_id: Optional[int] = None
    ) -> List[ExerciseAttempt]:
        attempts = [
            attempt
            for attempt in self.attempts.values()
            if attempt.student_id == student_id
            and (exercise_id is None or attempt.exercise_id == exercise_id)
        ]
        attempts.sort(
            key=lambda attempt: (attempt.started_at, attempt.attempt_id),
            reverse=True,
        )
        return [self._copy(attempt) for attempt in attempts]

    async def create(
        self, exercise_attempt: ExerciseAttempt
    ) -> ExerciseAttempt:
        if await self.get_in_progress(
            exercise_attempt.exercise_id, exercise_attempt.student_id
        ):
            raise DuplicateActiveAttempt(
                exercise_attempt.exercise_id, exercise_attempt.student_id
            )
        stored = exercise_attempt.model_copy(deep=True)
        stored.attempt_id = self._next_attempt_id
        stored.version = 1
        self._next_attempt_id += 1
        self.attempts[stored.attempt_id] = stored
        return self._copy(stored)

    async def update(
        self, exercise_attempt: ExerciseAttempt
    ) -> ExerciseAttempt:
        current = self.attempts.get(exercise_attempt.attempt_id)
        if current is None:
            raise AttemptNotFound(exercise_attempt.attempt_id)
        if current.version != exercise_attempt.version:
            raise ConcurrentAttemptModification(exercise_attempt.attempt_id)
        stored = exercise_attempt.model_copy(deep=True)
        stored.version = current.version + 1
        self.attempts[stored.attempt_id] = stored
        return self._copy(stored)

    async def get_student_summary(self, student_id: int) -> Dict:
        attempts = [
            a for a in self.attempts.values() if a.student_id == student_id
        ]
        completed = [
            a for a in attempts if a.status is AttemptStatus.COMPLETED
        ]
        return {
            'total_attempts': len(attempts),
            'completed': len(completed),
            'avg_percentage': (
                sum(a.percentage or 0 for a in completed) / len(completed)
                if completed
                else None
            ),
        }

    async def get_exercise_summary(self, exercise_id: int) -> Dict:
        attempts = [
            a for a in self.attempts.values() if a.exercise_id == exercise_id
        ]
        completed = [
            a for a in attempts if a.status is AttemptStatus.COMPLETED
        ]
        return {
            'attempt_count': len(attempts),
            'completed_count': len(completed),
            'avg_percentage': (
                sum(a.percentage or 0 for a in completed) / len(completed)
                if completed
                else None
            ),
            'avg_time_spent': (
                sum(a.time_spent_seconds or 0 for a in completed)
                / len(completed)
                if completed
                else None
            ),
        }


@pytest.fixture
def exercise_repository() -> InMemoryExerciseRepository:
    return InMemoryExerciseRepository()


@pytest.fixture
def attempt_repository() -> InMemoryExerciseAttemptRepository:
    return InMemoryExerciseAttemptRepository()


@pytest.fixture
def service(
    exercise_repository, attempt_repository
) -> ExerciseAttemptService:
    return ExerciseAttemptService(
        exercise_repository=exercise_repository,
        exercise_attempt_repository=attempt_repository,
    )


@pytest_asyncio.fixture
async def stored_exercise(
    exercise_repository, multiple_choice_exercise
) -> Exercise:
    return await exercise_repository.create(multiple_choice_exercise)


@pytest_asyncio.fixture
async def stored_timed_exercise(
    exercise_repository, timed_exercise
) -> Exercise:
    return await exercise_repository.create(timed_exercise)
