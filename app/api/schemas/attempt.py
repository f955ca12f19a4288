from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field

from app.api.schemas.exercise import ExerciseSchema
from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.enums import AttemptStatus


class AnswerRecordSchema(BaseModel):
    item_id: int = Field(description='Answered item')
    answer: Any = Field(description='Answer payload as submitted')
    is_correct: bool = Field()
    points_earned: int = Field()
    submitted_at: datetime = Field()


class AttemptSchema(BaseModel):
    attempt_id: int = Field(description='Attempt ID')
    exercise_id: int = Field(description='Exercise ID')
    student_id: int = Field(description='Student ID')
    status: AttemptStatus = Field(description='Attempt status')
    started_at: datetime = Field()
    completed_at: Optional[datetime] = Field(default=None)
    answers: List[AnswerRecordSchema] = Field(default_factory=list)
    score: Optional[int] = Field(default=None)
    max_score: Optional[int] = Field(default=None)
    percentage: Optional[int] = Field(default=None)
    passed: Optional[bool] = Field(default=None)
    time_spent_seconds: Optional[int] = Field(default=None)
    time_limit_seconds: Optional[int] = Field(default=None)
    timed_out: bool = Field(default=False)

    @classmethod
    def from_entity(cls, attempt: ExerciseAttempt) -> 'AttemptSchema':
        if attempt.attempt_id is None:
            raise ValueError('Cannot show an attempt without an ID')
        return cls(
            attempt_id=attempt.attempt_id,
            exercise_id=attempt.exercise_id,
            student_id=attempt.student_id,
            status=attempt.status,
            started_at=attempt.started_at,
            completed_at=attempt.completed_at,
            answers=[
                AnswerRecordSchema(
                    item_id=record.item_id,
                    answer=record.answer.payload,
                    is_correct=record.is_correct,
                    points_earned=record.points_earned,
                    submitted_at=record.submitted_at,
                )
                for record in attempt.answers
            ],
            score=attempt.score,
            max_score=attempt.max_score,
            percentage=attempt.percentage,
            passed=attempt.passed,
            time_spent_seconds=attempt.time_spent_seconds,
            time_limit_seconds=attempt.exercise_snapshot.time_limit_seconds,
            timed_out=attempt.timed_out,
        )


class StartAttemptResponse(BaseModel):
    attempt: AttemptSchema = Field(description='New or resumed attempt')
    exercise: ExerciseSchema = Field(description='Exercise without answers')


class CompletionResultSchema(BaseModel):
    score: int = Field()
    max_score: int = Field()
    percentage: int = Field()
    passed: bool = Field()
    passing_score: int = Field(description='Percentage needed to pass')
    time_spent: int = Field(description='Seconds from start to finish')
    timed_out: bool = Field(
        default=False, description='Whether the time limit ended the attempt'
    )
