from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator

from app.core.entities.answer_record import AnswerRecord, ensure_utc
from app.core.enums import AttemptStatus
from app.core.value_objects.completion import CompletionResult, ScoreSummary
from app.core.value_objects.exercise_snapshot import ExerciseSnapshot


class ExerciseAttempt(BaseModel):
    attempt_id: Optional[int] = Field(None, description='Attempt ID')
    exercise_id: int = Field()
    student_id: int = Field()
    status: AttemptStatus = Field(default=AttemptStatus.IN_PROGRESS)
    started_at: datetime = Field()
    completed_at: Optional[datetime] = Field(default=None)
    answers: List[AnswerRecord] = Field(default_factory=list)
    score: Optional[int] = Field(default=None)
    max_score: Optional[int] = Field(default=None)
    percentage: Optional[int] = Field(default=None)
    passed: Optional[bool] = Field(default=None)
    time_spent_seconds: Optional[int] = Field(default=None)
    timed_out: bool = Field(default=False)
    version: int = Field(default=0, description='Optimistic lock counter')
    exercise_snapshot: ExerciseSnapshot = Field(
        description='Exercise as it was when the attempt started'
    )

    @field_validator('started_at', 'completed_at', mode='before')
    @classmethod
    def timestamps_utc(cls, value: Any) -> Any:
        return ensure_utc(value)

    def get_answer(self, item_id: int) -> Optional[AnswerRecord]:
        return next(
            (record for record in self.answers if record.item_id == item_id),
            None,
        )

    def upsert_answer(self, record: AnswerRecord) -> None:
        """Last submission for an item wins and moves to the end."""
        self.answers = [
            existing
            for existing in self.answers
            if existing.item_id != record.item_id
        ]
        self.answers.append(record)

    def apply_score(self, summary: ScoreSummary) -> None:
        self.score = summary.score
        self.max_score = summary.max_score
        self.percentage = summary.percentage
        self.passed = summary.passed

    def completion_result(self) -> CompletionResult:
        if (
            self.status is not AttemptStatus.COMPLETED
            or self.score is None
            or self.max_score is None
            or self.percentage is None
            or self.passed is None
        ):
            raise ValueError(
                f'Attempt {self.attempt_id} has no stored completion result'
            )
        return CompletionResult(
            score=self.score,
            max_score=self.max_score,
            percentage=self.percentage,
            passed=self.passed,
            passing_score=self.exercise_snapshot.passing_score_percent,
            time_spent=self.time_spent_seconds or 0,
            timed_out=self.timed_out,
        )

    def __str__(self):
        return (
            f'ExerciseAttempt(attempt_id={self.attempt_id}, '
            f'exercise_id={self.exercise_id}, '
            f'student_id={self.student_id}, '
            f'status={self.status.value}, '
            f'answers={len(self.answers)}, '
            f'version={self.version})'
        )
