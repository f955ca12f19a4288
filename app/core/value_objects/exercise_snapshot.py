from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.core.entities.exercise import Exercise, ExerciseItem
from app.core.enums import ExerciseType, LanguageLevel


class ExerciseSnapshot(BaseModel):
    """Grading-relevant copy of an exercise, frozen when an attempt starts.

    Edits made to the exercise afterwards do not reach attempts that
    already hold a snapshot. The snapshot is also what a resumed
    attempt shows the student, so shown and graded items always agree.
    """

    model_config = ConfigDict(frozen=True)

    exercise_id: int = Field(description='Exercise ID')
    exercise_type: ExerciseType = Field(description='Type of exercise')
    title: str = Field(description='Exercise title')
    language: str = Field(description='Language of exercise')
    cefr_level: Optional[LanguageLevel] = Field(default=None)
    instructions: Optional[str] = Field(default=None)
    time_limit_seconds: Optional[int] = Field(default=None)
    passing_score_percent: int = Field(ge=0, le=100)
    items: List[ExerciseItem] = Field(description='Items ordered for scoring')

    @classmethod
    def from_exercise(cls, exercise: Exercise) -> 'ExerciseSnapshot':
        if exercise.exercise_id is None:
            raise ValueError('Cannot snapshot an exercise without an ID')
        return cls(
            exercise_id=exercise.exercise_id,
            exercise_type=exercise.exercise_type,
            title=exercise.title,
            language=exercise.language,
            cefr_level=exercise.cefr_level,
            instructions=exercise.instructions,
            time_limit_seconds=exercise.time_limit_seconds,
            passing_score_percent=exercise.passing_score_percent,
            items=[item.model_copy(deep=True) for item in exercise.items],
        )

    @property
    def has_time_limit(self) -> bool:
        return bool(self.time_limit_seconds)

    @property
    def max_score(self) -> int:
        return sum(item.points for item in self.items)

    def get_item(self, item_id: int) -> Optional[ExerciseItem]:
        return next(
            (item for item in self.items if item.item_id == item_id), None
        )
