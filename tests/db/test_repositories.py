from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio

from app.core.entities.answer_record import AnswerRecord
from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.enums import AttemptStatus
from app.core.errors import (
    ConcurrentAttemptModification,
    DuplicateActiveAttempt,
)
from app.core.value_objects.answer import (
    FillBlanksAnswer,
    MultipleChoiceAnswer,
)
from app.core.value_objects.exercise import FillBlanksKey, MultipleChoiceKey
from app.core.value_objects.exercise_snapshot import ExerciseSnapshot
from app.db.repositories.exercise import SQLAlchemyExerciseRepository
from app.db.repositories.exercise_attempt import (
    SQLAlchemyExerciseAttemptRepository,
)

pytestmark = pytest.mark.asyncio

STUDENT_ID = 42
START = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def exercise_repository(async_session):
    return SQLAlchemyExerciseRepository(async_session)


@pytest.fixture
def attempt_repository(async_session):
    return SQLAlchemyExerciseAttemptRepository(async_session)


@pytest_asyncio.fixture
async def exercise(exercise_repository, multiple_choice_exercise):
    return await exercise_repository.create(multiple_choice_exercise)


def _new_attempt(exercise, student_id=STUDENT_ID, started_at=START):
    return ExerciseAttempt(
        exercise_id=exercise.exercise_id,
        student_id=student_id,
        started_at=started_at,
        exercise_snapshot=ExerciseSnapshot.from_exercise(exercise),
    )


async def test_create_and_get_exercise(exercise, exercise_repository):
    loaded = await exercise_repository.get_by_id(exercise.exercise_id)

    assert loaded == exercise
    assert loaded.exercise_id is not None
    assert [item.order_index for item in loaded.items] == [0, 1, 2]
    assert all(item.item_id is not None for item in loaded.items)
    assert loaded.items[2].correct_answer == MultipleChoiceKey(value='c')
    assert loaded.items[0].explanation == 'Hazards are always reported first.'


async def test_get_missing_exercise(exercise_repository):
    assert await exercise_repository.get_by_id(999) is None


async def test_exercise_exists(exercise, exercise_repository):
    assert await exercise_repository.exists(exercise.exercise_id)
    assert not await exercise_repository.exists(exercise.exercise_id + 1)


async def test_exercise_keeps_item_payloads(
    exercise_repository, fill_blanks_exercise
):
    created = await exercise_repository.create(fill_blanks_exercise)

    item = created.items[0]
    assert item.correct_answer == FillBlanksKey(blanks=['forward', 'hearing'])
    assert item.content.word_bank == ['forward', 'hearing', 'back']
    assert created.passing_score_percent == 70


async def test_create_attempt(exercise, attempt_repository):
    created = await attempt_repository.create(_new_attempt(exercise))

    assert created.attempt_id is not None
    assert created.status is AttemptStatus.IN_PROGRESS
    assert created.version == 1
    assert created.started_at == START
    assert created.timed_out is False
    assert created.exercise_snapshot == ExerciseSnapshot.from_exercise(
        exercise
    )


async def test_second_in_progress_attempt_is_rejected(
    exercise, attempt_repository
):
    first = await attempt_repository.create(_new_attempt(exercise))

    with pytest.raises(DuplicateActiveAttempt):
        await attempt_repository.create(_new_attempt(exercise))

    in_progress = await attempt_repository.get_in_progress(
        exercise.exercise_id, STUDENT_ID
    )
    assert in_progress.attempt_id == first.attempt_id


async def test_new_attempt_allowed_after_completion(
    exercise, attempt_repository
):
    first = await attempt_repository.create(_new_attempt(exercise))
    first.status = AttemptStatus.ABANDONED
    first.completed_at = START + timedelta(seconds=5)
    await attempt_repository.update(first)

    second = await attempt_repository.create(_new_attempt(exercise))

    assert second.attempt_id != first.attempt_id
    assert await attempt_repository.get_in_progress(
        exercise.exercise_id, STUDENT_ID
    ) == second


async def test_update_persists_answers_and_bumps_version(
    exercise, attempt_repository
):
    attempt = await attempt_repository.create(_new_attempt(exercise))
    attempt.upsert_answer(
        AnswerRecord(
            item_id=exercise.items[0].item_id,
            answer=MultipleChoiceAnswer(value='a'),
            is_correct=True,
            points_earned=1,
            submitted_at=START + timedelta(seconds=3),
        )
    )

    updated = await attempt_repository.update(attempt)
    loaded = await attempt_repository.get_by_id_for_update(attempt.attempt_id)

    assert updated.version == attempt.version + 1
    assert loaded.answers == attempt.answers
    assert isinstance(loaded.answers[0].answer, MultipleChoiceAnswer)
    assert loaded.answers[0].submitted_at == START + timedelta(seconds=3)


async def test_stale_update_is_rejected(exercise, attempt_repository):
    attempt = await attempt_repository.create(_new_attempt(exercise))
    stale = attempt.model_copy(deep=True)
    attempt.status = AttemptStatus.ABANDONED
    await attempt_repository.update(attempt)

    stale.answers = []
    with pytest.raises(ConcurrentAttemptModification):
        await attempt_repository.update(stale)


async def test_update_completion_fields(exercise, attempt_repository):
    attempt = await attempt_repository.create(_new_attempt(exercise))
    attempt.status = AttemptStatus.COMPLETED
    attempt.completed_at = START + timedelta(minutes=2)
    attempt.score = 3
    attempt.max_score = 4
    attempt.percentage = 75
    attempt.passed = True
    attempt.time_spent_seconds = 120
    attempt.timed_out = True

    await attempt_repository.update(attempt)
    loaded = await attempt_repository.get_by_id(attempt.attempt_id)

    assert loaded.completion_result().model_dump() == {
        'score': 3,
        'max_score': 4,
        'percentage': 75,
        'passed': True,
        'passing_score': 70,
        'time_spent': 120,
        'timed_out': True,
    }
    assert loaded.completed_at == START + timedelta(minutes=2)


async def test_get_by_student_newest_first(exercise, attempt_repository):
    older = await attempt_repository.create(_new_attempt(exercise))
    older.status = AttemptStatus.COMPLETED
    await attempt_repository.update(older)
    newer = await attempt_repository.create(
        _new_attempt(exercise, started_at=START + timedelta(hours=1))
    )
    await attempt_repository.create(_new_attempt(exercise, student_id=7))

    attempts = await attempt_repository.get_by_student(STUDENT_ID)
    filtered = await attempt_repository.get_by_student(
        STUDENT_ID, exercise_id=exercise.exercise_id + 1
    )

    assert [a.attempt_id for a in attempts] == [
        newer.attempt_id,
        older.attempt_id,
    ]
    assert filtered == []


async def test_summaries(
    exercise, exercise_repository, attempt_repository, fill_blanks_exercise
):
    other_exercise = await exercise_repository.create(fill_blanks_exercise)
    for percentage, time_spent in ((75, 40), (50, 21)):
        attempt = await attempt_repository.create(_new_attempt(exercise))
        attempt.status = AttemptStatus.COMPLETED
        attempt.percentage = percentage
        attempt.time_spent_seconds = time_spent
        await attempt_repository.update(attempt)
    await attempt_repository.create(_new_attempt(exercise))
    await attempt_repository.create(_new_attempt(other_exercise))
    abandoned = await attempt_repository.create(
        _new_attempt(exercise, student_id=7)
    )
    abandoned.status = AttemptStatus.ABANDONED
    abandoned.time_spent_seconds = 999
    await attempt_repository.update(abandoned)

    student = await attempt_repository.get_student_summary(STUDENT_ID)
    by_exercise = await attempt_repository.get_exercise_summary(
        exercise.exercise_id
    )

    assert student['total_attempts'] == 4
    assert student['completed'] == 2
    assert float(student['avg_percentage']) == 62.5
    assert by_exercise['attempt_count'] == 4
    assert by_exercise['completed_count'] == 2
    assert float(by_exercise['avg_percentage']) == 62.5
    assert float(by_exercise['avg_time_spent']) == 30.5


async def test_summaries_without_attempts(attempt_repository):
    student = await attempt_repository.get_student_summary(STUDENT_ID)

    assert student == {
        'total_attempts': 0,
        'completed': 0,
        'avg_percentage': None,
    }


async def test_fill_blanks_answer_survives_storage(
    exercise_repository, attempt_repository, fill_blanks_exercise
):
    exercise = await exercise_repository.create(fill_blanks_exercise)
    attempt = await attempt_repository.create(_new_attempt(exercise))
    attempt.upsert_answer(
        AnswerRecord(
            item_id=exercise.items[0].item_id,
            answer=FillBlanksAnswer(blanks=['Forward', 'hearing']),
            is_correct=True,
            points_earned=1,
            submitted_at=START,
        )
    )
    await attempt_repository.update(attempt)

    loaded = await attempt_repository.get_by_id(attempt.attempt_id)

    assert loaded.answers[0].answer.blanks == ['Forward', 'hearing']
