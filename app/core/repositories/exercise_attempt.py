from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from app.core.entities.exercise_attempt import ExerciseAttempt


class ExerciseAttemptRepository(ABC):
    @abstractmethod
    async def get_by_id(self, attempt_id: int) -> Optional[ExerciseAttempt]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_id_for_update(
        self, attempt_id: int
    ) -> Optional[ExerciseAttempt]:
        """
        Reads an attempt for a read-modify-write cycle. Implementations
        lock the row until the surrounding transaction ends.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_in_progress(
        self, exercise_id: int, student_id: int
    ) -> Optional[ExerciseAttempt]:
        raise NotImplementedError

    @abstractmethod
    async def get_by_student(
        self, student_id: int, exercise_id: Optional[int] = None
    ) -> List[ExerciseAttempt]:
        """Newest attempts first."""
        raise NotImplementedError

    @abstractmethod
    async def create(
        self, exercise_attempt: ExerciseAttempt
    ) -> ExerciseAttempt:
        """
        Raises DuplicateActiveAttempt when the student already has an
        attempt in progress for the exercise.
        """
        raise NotImplementedError

    @abstractmethod
    async def update(
        self, exercise_attempt: ExerciseAttempt
    ) -> ExerciseAttempt:
        """
        Writes back an attempt read earlier. Raises
        ConcurrentAttemptModification when the stored version moved on.
        """
        raise NotImplementedError

    @abstractmethod
    async def get_student_summary(self, student_id: int) -> Dict:
        """
        Keys: total_attempts, completed, avg_percentage (None when no
        attempt is completed).
        """
        raise NotImplementedError

    @abstractmethod
    async def get_exercise_summary(self, exercise_id: int) -> Dict:
        """
        Keys: attempt_count, completed_count, avg_percentage,
        avg_time_spent (averages are None when no attempt is completed).
        """
        raise NotImplementedError
