from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field, field_serializer, field_validator

from app.core.value_objects.answer import Answer, create_answer_model_validate


def ensure_utc(value: Any) -> Any:
    """Some drivers hand back naive timestamps; they are stored as UTC."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class AnswerRecord(BaseModel):
    item_id: int = Field(description='Answered item')
    answer: Answer = Field(description='Submitted answer')
    is_correct: bool = Field()
    points_earned: int = Field(ge=0)
    submitted_at: datetime = Field()

    @field_validator('answer', mode='before')
    @classmethod
    def restore_answer(cls, value: Any) -> Any:
        if isinstance(value, dict):
            return create_answer_model_validate(value)
        return value

    @field_validator('submitted_at', mode='before')
    @classmethod
    def submitted_at_utc(cls, value: Any) -> Any:
        return ensure_utc(value)

    @field_serializer('answer')
    def dump_answer(self, answer: Answer) -> dict:
        return answer.model_dump()
