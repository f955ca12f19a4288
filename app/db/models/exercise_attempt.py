from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    false,
    text,
)
from sqlalchemy import Enum as SQLAlchemyEnum
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.enums import AttemptStatus
from app.db.base import Base, JSONType

if TYPE_CHECKING:
    from app.db.models.exercise import Exercise

IN_PROGRESS_CLAUSE = text(f"status = '{AttemptStatus.IN_PROGRESS.value}'")


class ExerciseAttempt(Base):
    __tablename__ = 'exercise_attempts'
    __table_args__ = (
        # At most one attempt in progress per student and exercise.
        Index(
            'uq_exercise_attempts_in_progress',
            'exercise_id',
            'student_id',
            unique=True,
            postgresql_where=IN_PROGRESS_CLAUSE,
            sqlite_where=IN_PROGRESS_CLAUSE,
        ),
        Index(
            'ix_exercise_attempts_student_started', 'student_id', 'started_at'
        ),
    )

    attempt_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey('exercises.exercise_id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    student_id: Mapped[int] = mapped_column(Integer, nullable=False)
    status: Mapped[AttemptStatus] = mapped_column(
        SQLAlchemyEnum(
            AttemptStatus,
            name='attempt_status_enum',
            values_callable=lambda enum_class: [
                item.value for item in enum_class
            ],
        ),
        nullable=False,
        default=AttemptStatus.IN_PROGRESS,
        server_default=AttemptStatus.IN_PROGRESS.value,
    )
    started_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    answers: Mapped[list] = mapped_column(
        JSONType, nullable=False, default=list
    )
    score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    max_score: Mapped[int | None] = mapped_column(Integer, nullable=True)
    percentage: Mapped[int | None] = mapped_column(Integer, nullable=True)
    passed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    time_spent_seconds: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    timed_out: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=false()
    )
    exercise_snapshot: Mapped[dict] = mapped_column(JSONType, nullable=False)
    version: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default='0'
    )

    exercise: Mapped['Exercise'] = relationship(back_populates='attempts')

    __mapper_args__ = {'version_id_col': version}
