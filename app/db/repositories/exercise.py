import logging
from typing import Optional

from typing_extensions import override

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.core.entities.exercise import Exercise, ExerciseItem
from app.core.repositories.exercise import ExerciseRepository
from app.db.models import Exercise as ExerciseModel
from app.db.models import ExerciseItem as ExerciseItemModel

logger = logging.getLogger(__name__)


class SQLAlchemyExerciseRepository(ExerciseRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    def _item_to_entity(self, db_item: ExerciseItemModel) -> ExerciseItem:
        return ExerciseItem.model_validate(
            {
                column.name: getattr(db_item, column.name)
                for column in db_item.__table__.columns
                if column.name != 'exercise_id'
            }
        )

    def _to_entity(self, db_exercise: ExerciseModel) -> Exercise:
        """Converts an ExerciseModel and its items to an Exercise
        entity using Pydantic validation."""
        return Exercise(
            exercise_id=db_exercise.exercise_id,
            title=db_exercise.title,
            exercise_type=db_exercise.exercise_type,
            language=db_exercise.language,
            cefr_level=db_exercise.cefr_level,
            instructions=db_exercise.instructions,
            time_limit_seconds=db_exercise.time_limit_seconds,
            passing_score_percent=db_exercise.passing_score_percent,
            is_published=db_exercise.is_published,
            items=[self._item_to_entity(item) for item in db_exercise.items],
        )

    def _to_db_model(self, exercise: Exercise) -> ExerciseModel:
        return ExerciseModel(
            exercise_id=exercise.exercise_id,
            title=exercise.title,
            exercise_type=exercise.exercise_type.value,
            language=exercise.language,
            cefr_level=(
                exercise.cefr_level.value if exercise.cefr_level else None
            ),
            instructions=exercise.instructions,
            time_limit_seconds=exercise.time_limit_seconds,
            passing_score_percent=exercise.passing_score_percent,
            is_published=exercise.is_published,
            items=[
                ExerciseItemModel(
                    item_id=item.item_id,
                    order_index=item.order_index,
                    question_text=item.question_text,
                    content=item.content.model_dump(),
                    correct_answer=item.correct_answer.model_dump(),
                    points=item.points,
                    hint=item.hint,
                    explanation=item.explanation,
                    audio_url=item.audio_url,
                    image_url=item.image_url,
                )
                for item in exercise.items
            ],
        )

    @override
    async def get_by_id(self, exercise_id: int) -> Optional[Exercise]:
        stmt = (
            select(ExerciseModel)
            .where(ExerciseModel.exercise_id == exercise_id)
            .options(selectinload(ExerciseModel.items))
        )
        result = await self.session.execute(stmt)
        db_exercise = result.scalar_one_or_none()
        if not db_exercise:
            return None
        return self._to_entity(db_exercise)

    @override
    async def exists(self, exercise_id: int) -> bool:
        stmt = select(ExerciseModel.exercise_id).where(
            ExerciseModel.exercise_id == exercise_id
        )
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none() is not None

    @override
    async def create(self, exercise: Exercise) -> Exercise:
        db_exercise = self._to_db_model(exercise)
        self.session.add(db_exercise)
        await self.session.flush()
        await self.session.refresh(db_exercise, attribute_names=['items'])
        logger.debug(
            f'Created exercise {db_exercise.exercise_id} '
            f'with {len(db_exercise.items)} items'
        )
        return self._to_entity(db_exercise)
