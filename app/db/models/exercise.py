from datetime import datetime
from typing import TYPE_CHECKING

from sqlalchemy import (
    Boolean,
    DateTime,
    ForeignKey,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base, JSONType

if TYPE_CHECKING:
    from app.db.models.exercise_attempt import ExerciseAttempt


class Exercise(Base):
    __tablename__ = 'exercises'

    exercise_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    exercise_type: Mapped[str] = mapped_column(String, nullable=False)
    language: Mapped[str] = mapped_column(String, nullable=False)
    cefr_level: Mapped[str | None] = mapped_column(String(2), nullable=True)
    instructions: Mapped[str | None] = mapped_column(Text, nullable=True)
    time_limit_seconds: Mapped[int | None] = mapped_column(
        Integer, nullable=True
    )
    passing_score_percent: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default='70'
    )
    is_published: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, index=True
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    items: Mapped[list['ExerciseItem']] = relationship(
        back_populates='exercise',
        cascade='all, delete-orphan',
        order_by='ExerciseItem.order_index',
        lazy='selectin',
    )
    attempts: Mapped[list['ExerciseAttempt']] = relationship(
        back_populates='exercise'
    )


class ExerciseItem(Base):
    __tablename__ = 'exercise_items'
    __table_args__ = (
        UniqueConstraint(
            'exercise_id', 'order_index', name='uq_exercise_item_order'
        ),
    )

    item_id: Mapped[int] = mapped_column(
        Integer, primary_key=True, index=True, autoincrement=True
    )
    exercise_id: Mapped[int] = mapped_column(
        ForeignKey('exercises.exercise_id', ondelete='CASCADE'),
        nullable=False,
        index=True,
    )
    order_index: Mapped[int] = mapped_column(Integer, nullable=False)
    question_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    content: Mapped[dict] = mapped_column(JSONType, nullable=False)
    correct_answer: Mapped[dict] = mapped_column(JSONType, nullable=False)
    points: Mapped[int] = mapped_column(
        Integer, nullable=False, server_default='1'
    )
    hint: Mapped[str | None] = mapped_column(Text, nullable=True)
    explanation: Mapped[str | None] = mapped_column(Text, nullable=True)
    audio_url: Mapped[str | None] = mapped_column(String, nullable=True)
    image_url: Mapped[str | None] = mapped_column(String, nullable=True)

    exercise: Mapped['Exercise'] = relationship(back_populates='items')
