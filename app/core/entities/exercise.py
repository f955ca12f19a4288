from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from app.config import settings
from app.core.enums import ExerciseType, LanguageLevel
from app.core.value_objects.exercise import ItemAnswerKey, ItemContent


class ExerciseItem(BaseModel):
    item_id: Optional[int] = Field(None, description='Item ID')
    order_index: int = Field(ge=0, description='Position in the exercise')
    question_text: Optional[str] = Field(
        default=None, description='Question shown above the content'
    )
    content: ItemContent = Field(description='Question payload')
    correct_answer: ItemAnswerKey = Field(description='Answer key')
    points: int = Field(default=1, ge=1, description='Points for the item')
    hint: Optional[str] = Field(default=None)
    explanation: Optional[str] = Field(default=None)
    audio_url: Optional[str] = Field(default=None)
    image_url: Optional[str] = Field(default=None)

    @model_validator(mode='after')
    def check_content_matches_key(self) -> 'ExerciseItem':
        if self.content.type != self.correct_answer.type:
            raise ValueError(
                f'Item content is {self.content.type} '
                f'but answer key is {self.correct_answer.type}'
            )
        return self


class Exercise(BaseModel):
    exercise_id: Optional[int] = Field(None, description='Exercise ID')
    title: str = Field(description='Exercise title')
    exercise_type: ExerciseType = Field(description='Type of exercise')
    language: str = Field(description='Language of exercise')
    cefr_level: Optional[LanguageLevel] = Field(
        default=None, description='CEFR level'
    )
    instructions: Optional[str] = Field(default=None)
    time_limit_seconds: Optional[int] = Field(
        default=None, ge=0, description='Time limit, none or 0 for no limit'
    )
    passing_score_percent: int = Field(
        default=settings.default_passing_score_percent,
        ge=0,
        le=100,
        description='Minimum percentage to pass',
    )
    is_published: bool = Field(default=True)
    items: List[ExerciseItem] = Field(default_factory=list)

    @model_validator(mode='after')
    def check_items(self) -> 'Exercise':
        order_indexes = set()
        for item in self.items:
            if item.content.exercise_type != self.exercise_type:
                raise ValueError(
                    f'Item {item.item_id} is {item.content.type}, '
                    f'exercise is {self.exercise_type.value}'
                )
            if item.order_index in order_indexes:
                raise ValueError(
                    f'Duplicate order_index {item.order_index} in exercise'
                )
            order_indexes.add(item.order_index)
        self.items.sort(key=lambda item: item.order_index)
        return self

    def get_item(self, item_id: int) -> Optional[ExerciseItem]:
        return next(
            (item for item in self.items if item.item_id == item_id), None
        )

    def __str__(self):
        return (
            f'Exercise(exercise_id={self.exercise_id}, '
            f'exercise_type={self.exercise_type.value}, '
            f'language={self.language}, '
            f'items={len(self.items)}, '
            f'time_limit_seconds={self.time_limit_seconds}, '
            f'passing_score_percent={self.passing_score_percent})'
        )
