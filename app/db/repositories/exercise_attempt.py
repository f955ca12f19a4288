import logging
from typing import Dict, List, Optional

from typing_extensions import override

from sqlalchemy import case, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from app.core.entities.exercise_attempt import (
    ExerciseAttempt as ExerciseAttemptEntity,
)
from app.core.enums import AttemptStatus
from app.core.errors import (
    AttemptNotFound,
    ConcurrentAttemptModification,
    DuplicateActiveAttempt,
)
from app.core.repositories.exercise_attempt import ExerciseAttemptRepository
from app.db.models import ExerciseAttempt

logger = logging.getLogger(__name__)


class SQLAlchemyExerciseAttemptRepository(ExerciseAttemptRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    @override
    async def get_by_id(
        self,
        attempt_id: int,
    ) -> Optional[ExerciseAttemptEntity]:
        result = await self.session.get(ExerciseAttempt, attempt_id)
        if not result:
            return None
        return self._to_entity(result)

    @override
    async def get_by_id_for_update(
        self,
        attempt_id: int,
    ) -> Optional[ExerciseAttemptEntity]:
        stmt = (
            select(ExerciseAttempt)
            .where(ExerciseAttempt.attempt_id == attempt_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        result = await self.session.execute(stmt)
        db_attempt = result.scalar_one_or_none()
        if not db_attempt:
            return None
        return self._to_entity(db_attempt)

    @override
    async def get_in_progress(
        self,
        exercise_id: int,
        student_id: int,
    ) -> Optional[ExerciseAttemptEntity]:
        stmt = select(ExerciseAttempt).where(
            ExerciseAttempt.exercise_id == exercise_id,
            ExerciseAttempt.student_id == student_id,
            ExerciseAttempt.status == AttemptStatus.IN_PROGRESS,
        )
        result = await self.session.execute(stmt)
        db_attempt = result.scalar_one_or_none()
        if not db_attempt:
            return None
        return self._to_entity(db_attempt)

    @override
    async def get_by_student(
        self,
        student_id: int,
        exercise_id: Optional[int] = None,
    ) -> List[ExerciseAttemptEntity]:
        stmt = select(ExerciseAttempt).where(
            ExerciseAttempt.student_id == student_id,
        )
        if exercise_id is not None:
            stmt = stmt.where(ExerciseAttempt.exercise_id == exercise_id)
        stmt = stmt.order_by(
            ExerciseAttempt.started_at.desc(),
            ExerciseAttempt.attempt_id.desc(),
        )
        result = await self.session.execute(stmt)
        attempts = result.scalars().all()
        return [self._to_entity(attempt) for attempt in attempts]

    @override
    async def create(
        self,
        exercise_attempt: ExerciseAttemptEntity,
    ) -> ExerciseAttemptEntity:
        db_attempt = ExerciseAttempt(
            exercise_id=exercise_attempt.exercise_id,
            student_id=exercise_attempt.student_id,
            status=exercise_attempt.status,
            started_at=exercise_attempt.started_at,
            completed_at=exercise_attempt.completed_at,
            answers=self._dump_answers(exercise_attempt),
            timed_out=exercise_attempt.timed_out,
            exercise_snapshot=exercise_attempt.exercise_snapshot.model_dump(
                mode='json'
            ),
        )
        try:
            async with self.session.begin_nested():
                self.session.add(db_attempt)
                await self.session.flush()
        except IntegrityError as e:
            logger.info(
                f'Attempt for student {exercise_attempt.student_id} on '
                f'exercise {exercise_attempt.exercise_id} already exists'
            )
            raise DuplicateActiveAttempt(
                exercise_attempt.exercise_id, exercise_attempt.student_id
            ) from e
        await self.session.refresh(db_attempt)
        return self._to_entity(db_attempt)

    @override
    async def update(
        self,
        exercise_attempt: ExerciseAttemptEntity,
    ) -> ExerciseAttemptEntity:
        attempt_id = exercise_attempt.attempt_id
        if attempt_id is None:
            raise ValueError('Cannot update an attempt without an ID')
        db_attempt = await self.session.get(ExerciseAttempt, attempt_id)
        if not db_attempt:
            raise AttemptNotFound(attempt_id)
        if db_attempt.version != exercise_attempt.version:
            raise ConcurrentAttemptModification(attempt_id)

        db_attempt.status = exercise_attempt.status
        db_attempt.completed_at = exercise_attempt.completed_at
        db_attempt.answers = self._dump_answers(exercise_attempt)
        db_attempt.score = exercise_attempt.score
        db_attempt.max_score = exercise_attempt.max_score
        db_attempt.percentage = exercise_attempt.percentage
        db_attempt.passed = exercise_attempt.passed
        db_attempt.time_spent_seconds = exercise_attempt.time_spent_seconds
        db_attempt.timed_out = exercise_attempt.timed_out
        try:
            await self.session.flush()
        except StaleDataError as e:
            raise ConcurrentAttemptModification(attempt_id) from e
        await self.session.refresh(db_attempt)
        return self._to_entity(db_attempt)

    @override
    async def get_student_summary(self, student_id: int) -> Dict:
        completed = ExerciseAttempt.status == AttemptStatus.COMPLETED
        stmt = select(
            func.count(ExerciseAttempt.attempt_id),
            func.sum(case((completed, 1), else_=0)),
            func.avg(case((completed, ExerciseAttempt.percentage))),
        ).where(ExerciseAttempt.student_id == student_id)
        result = await self.session.execute(stmt)
        total, completed_count, avg_percentage = result.one()
        return {
            'total_attempts': total or 0,
            'completed': completed_count or 0,
            'avg_percentage': avg_percentage,
        }

    @override
    async def get_exercise_summary(self, exercise_id: int) -> Dict:
        completed = ExerciseAttempt.status == AttemptStatus.COMPLETED
        stmt = select(
            func.count(ExerciseAttempt.attempt_id),
            func.sum(case((completed, 1), else_=0)),
            func.avg(case((completed, ExerciseAttempt.percentage))),
            func.avg(case((completed, ExerciseAttempt.time_spent_seconds))),
        ).where(ExerciseAttempt.exercise_id == exercise_id)
        result = await self.session.execute(stmt)
        total, completed_count, avg_percentage, avg_time = result.one()
        return {
            'attempt_count': total or 0,
            'completed_count': completed_count or 0,
            'avg_percentage': avg_percentage,
            'avg_time_spent': avg_time,
        }

    def _dump_answers(self, exercise_attempt: ExerciseAttemptEntity) -> list:
        return [
            record.model_dump(mode='json')
            for record in exercise_attempt.answers
        ]

    def _to_entity(
        self, db_attempt: ExerciseAttempt
    ) -> ExerciseAttemptEntity:
        return ExerciseAttemptEntity(
            attempt_id=db_attempt.attempt_id,
            exercise_id=db_attempt.exercise_id,
            student_id=db_attempt.student_id,
            status=db_attempt.status,
            started_at=db_attempt.started_at,
            completed_at=db_attempt.completed_at,
            answers=db_attempt.answers or [],
            score=db_attempt.score,
            max_score=db_attempt.max_score,
            percentage=db_attempt.percentage,
            passed=db_attempt.passed,
            time_spent_seconds=db_attempt.time_spent_seconds,
            timed_out=db_attempt.timed_out,
            version=db_attempt.version,
            exercise_snapshot=db_attempt.exercise_snapshot,
        )
