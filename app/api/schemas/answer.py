from typing import Any, Optional

from pydantic import BaseModel, Field


class AnswerSubmissionSchema(BaseModel):
    item_id: int = Field(description='Item being answered')
    answer: Any = Field(
        default=None,
        description=(
            'Answer payload for the exercise type: a string for multiple '
            'choice and listening, a boolean for true/false, a list of '
            'strings for fill in the blanks and reorder, a list of '
            '{left, right} pairs for matching, a mapping of zone to labels '
            'for drag and drop'
        ),
    )


class EvaluationResultSchema(BaseModel):
    is_correct: bool = Field(description='Whether the answer is correct')
    points_earned: int = Field(description='Points awarded for the answer')
    explanation: Optional[str] = Field(
        default=None, description='Feedback on the answer'
    )
