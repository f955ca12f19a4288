from typing import Any, AsyncGenerator

import pytest
import pytest_asyncio
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from app.config import settings
from app.core.entities.exercise import Exercise, ExerciseItem
from app.core.enums import ExerciseType, LanguageLevel
from app.core.value_objects.exercise import (
    ChoiceOption,
    FillBlanksContent,
    FillBlanksKey,
    MultipleChoiceContent,
    MultipleChoiceKey,
)
from app.db.base import Base


@pytest_asyncio.fixture
async def async_engine() -> AsyncGenerator[AsyncEngine, Any]:
    """In-memory database shared by every connection of one test."""
    engine = create_async_engine(
        settings.test_database_url,
        echo=False,
        poolclass=StaticPool,
        connect_args={'check_same_thread': False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def async_session(
    async_engine: AsyncEngine,
) -> AsyncGenerator[AsyncSession, Any]:
    async_session_factory = async_sessionmaker(
        async_engine,
        expire_on_commit=False,
        autoflush=False,
    )
    async with async_session_factory() as session:
        try:
            yield session
        finally:
            await session.rollback()


def _choice_options():
    return [
        ChoiceOption(value='a', label='Report it to your manager'),
        ChoiceOption(value='b', label='Ignore it'),
        ChoiceOption(value='c', label='Fix it yourself'),
    ]


@pytest.fixture
def multiple_choice_exercise() -> Exercise:
    """Three items worth 1, 2 and 1 points; 70% to pass."""
    return Exercise(
        title='Workplace safety basics',
        exercise_type=ExerciseType.MULTIPLE_CHOICE,
        language='en',
        cefr_level=LanguageLevel.B1,
        passing_score_percent=70,
        items=[
            ExerciseItem(
                order_index=0,
                question_text='You notice a frayed cable. What do you do?',
                content=MultipleChoiceContent(options=_choice_options()),
                correct_answer=MultipleChoiceKey(value='a'),
                points=1,
                explanation='Hazards are always reported first.',
            ),
            ExerciseItem(
                order_index=1,
                question_text='A colleague skips the safety briefing.',
                content=MultipleChoiceContent(options=_choice_options()),
                correct_answer=MultipleChoiceKey(value='a'),
                points=2,
            ),
            ExerciseItem(
                order_index=2,
                question_text='The fire exit is blocked by boxes.',
                content=MultipleChoiceContent(options=_choice_options()),
                correct_answer=MultipleChoiceKey(value='c'),
                points=1,
            ),
        ],
    )


@pytest.fixture
def timed_exercise(multiple_choice_exercise: Exercise) -> Exercise:
    return multiple_choice_exercise.model_copy(
        update={'title': 'Timed safety quiz', 'time_limit_seconds': 60},
        deep=True,
    )


@pytest.fixture
def fill_blanks_exercise() -> Exercise:
    return Exercise(
        title='Business emails',
        exercise_type=ExerciseType.FILL_BLANKS,
        language='en',
        cefr_level=LanguageLevel.A2,
        items=[
            ExerciseItem(
                order_index=0,
                content=FillBlanksContent(
                    text='I look ___ to ___ from you.',
                    word_bank=['forward', 'hearing', 'back'],
                ),
                correct_answer=FillBlanksKey(blanks=['forward', 'hearing']),
            ),
        ],
    )
