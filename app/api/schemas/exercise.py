from typing import List, Optional

from pydantic import BaseModel, Field

from app.core.entities.exercise import ExerciseItem
from app.core.value_objects.exercise import ItemContent
from app.core.value_objects.exercise_snapshot import ExerciseSnapshot


class ExerciseItemSchema(BaseModel):
    """Item as a student sees it: no answer key, no explanation."""

    item_id: int = Field(description='Item ID')
    order_index: int = Field(description='Position in the exercise')
    question_text: Optional[str] = Field(default=None)
    content: ItemContent = Field(description='Question payload')
    points: int = Field(description='Points for a correct answer')
    hint: Optional[str] = Field(default=None)
    audio_url: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)

    @classmethod
    def from_entity(cls, item: ExerciseItem) -> 'ExerciseItemSchema':
        if item.item_id is None:
            raise ValueError('Cannot show an item without an ID')
        return cls(
            item_id=item.item_id,
            order_index=item.order_index,
            question_text=item.question_text,
            content=item.content,
            points=item.points,
            hint=item.hint,
            audio_url=item.audio_url,
            image_url=item.image_url,
        )


class ExerciseSchema(BaseModel):
    """Exercise as captured by the attempt the student is working on."""

    exercise_id: int = Field(description='Exercise ID')
    title: str = Field(description='Exercise title')
    exercise_type: str = Field(description='Type of exercise')
    language: str = Field(description='Language of exercise')
    cefr_level: Optional[str] = Field(default=None, description='CEFR level')
    instructions: Optional[str] = Field(default=None)
    time_limit_seconds: Optional[int] = Field(default=None)
    passing_score_percent: int = Field(description='Percentage to pass')
    items: List[ExerciseItemSchema] = Field(description='Ordered items')

    @classmethod
    def from_snapshot(cls, snapshot: ExerciseSnapshot) -> 'ExerciseSchema':
        return cls(
            exercise_id=snapshot.exercise_id,
            title=snapshot.title,
            exercise_type=snapshot.exercise_type.value,
            language=snapshot.language,
            cefr_level=(
                snapshot.cefr_level.value if snapshot.cefr_level else None
            ),
            instructions=snapshot.instructions,
            time_limit_seconds=snapshot.time_limit_seconds,
            passing_score_percent=snapshot.passing_score_percent,
            items=[
                ExerciseItemSchema.from_entity(item) for item in snapshot.items
            ],
        )
