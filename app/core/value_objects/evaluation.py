from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class EvaluationResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    is_correct: bool = Field(description='Whether the answer is correct')
    points_earned: int = Field(ge=0, description='Points awarded')
    explanation: Optional[str] = Field(
        default=None, description='Feedback shown after answering'
    )
