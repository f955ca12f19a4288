from abc import ABC, abstractmethod
from typing import Optional

from app.core.entities.exercise import Exercise


class ExerciseRepository(ABC):
    """Read side of the exercise catalog used by the attempt engine."""

    @abstractmethod
    async def get_by_id(self, exercise_id: int) -> Optional[Exercise]:
        """Returns the exercise with its items ordered by order_index."""
        raise NotImplementedError

    @abstractmethod
    async def exists(self, exercise_id: int) -> bool:
        raise NotImplementedError

    @abstractmethod
    async def create(self, exercise: Exercise) -> Exercise:
        raise NotImplementedError
