from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import update

from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.value_objects.exercise_snapshot import ExerciseSnapshot
from app.db.models.exercise import Exercise as ExerciseModel
from app.db.repositories.exercise_attempt import (
    SQLAlchemyExerciseAttemptRepository,
)

pytestmark = pytest.mark.asyncio

STUDENT = {'X-Student-Id': '42'}
OTHER_STUDENT = {'X-Student-Id': '43'}


async def _start(client, exercise, headers=STUDENT):
    response = await client.post(
        f'/api/v1/exercises/{exercise.exercise_id}/attempts', headers=headers
    )
    assert response.status_code == 200, response.text
    return response.json()


async def test_health(client):
    response = await client.get('/health')

    assert response.status_code == 200
    assert response.json() == {'status': 'ok'}


async def test_start_attempt_hides_answer_keys(client, exercise):
    data = await _start(client, exercise)

    attempt = data['attempt']
    assert attempt['status'] == 'in_progress'
    assert attempt['student_id'] == 42
    assert attempt['answers'] == []
    assert attempt['completed_at'] is None
    items = data['exercise']['items']
    assert [item['order_index'] for item in items] == [0, 1, 2]
    for item in items:
        assert 'correct_answer' not in item
        assert 'explanation' not in item
    assert items[0]['content']['type'] == 'multiple_choice'


async def test_start_attempt_resumes(client, exercise):
    first = await _start(client, exercise)
    second = await _start(client, exercise)

    assert second['attempt']['attempt_id'] == first['attempt']['attempt_id']


async def test_resume_after_exercise_is_unpublished(
    client, async_session, exercise
):
    first = await _start(client, exercise)
    await async_session.execute(
        update(ExerciseModel)
        .where(ExerciseModel.exercise_id == exercise.exercise_id)
        .values(is_published=False, title='Withdrawn')
    )

    resumed = await _start(client, exercise)
    response = await client.post(
        f'/api/v1/exercises/{exercise.exercise_id}/attempts',
        headers=OTHER_STUDENT,
    )

    assert resumed['attempt']['attempt_id'] == first['attempt']['attempt_id']
    assert resumed['exercise'] == first['exercise']
    assert resumed['exercise']['title'] == 'Workplace safety basics'
    assert response.status_code == 404


async def test_full_attempt_flow(client, exercise):
    data = await _start(client, exercise)
    attempt_id = data['attempt']['attempt_id']
    item_ids = [item['item_id'] for item in data['exercise']['items']]

    answers = [
        (item_ids[0], 'a', True, 1),
        (item_ids[1], 'b', False, 0),
        (item_ids[1], 'a', True, 2),
        (item_ids[2], 'a', False, 0),
    ]
    for item_id, answer, is_correct, points in answers:
        response = await client.post(
            f'/api/v1/attempts/{attempt_id}/answers',
            json={'item_id': item_id, 'answer': answer},
            headers=STUDENT,
        )
        assert response.status_code == 200, response.text
        assert response.json()['is_correct'] is is_correct
        assert response.json()['points_earned'] == points

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/complete', headers=STUDENT
    )
    assert response.status_code == 200, response.text
    result = response.json()
    assert result['score'] == 3
    assert result['max_score'] == 4
    assert result['percentage'] == 75
    assert result['passed'] is True
    assert result['passing_score'] == 70
    assert result['timed_out'] is False

    response = await client.get(
        f'/api/v1/attempts/{attempt_id}', headers=STUDENT
    )
    attempt = response.json()
    assert attempt['status'] == 'completed'
    assert len(attempt['answers']) == 3
    assert {record['answer'] for record in attempt['answers']} == {'a'}

    repeated = await client.post(
        f'/api/v1/attempts/{attempt_id}/complete', headers=STUDENT
    )
    assert repeated.json() == result


async def test_answer_explanation(client, exercise):
    data = await _start(client, exercise)
    attempt_id = data['attempt']['attempt_id']

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/answers',
        json={
            'item_id': data['exercise']['items'][0]['item_id'],
            'answer': 'b',
        },
        headers=STUDENT,
    )

    assert response.json()['explanation'] == (
        'Hazards are always reported first.'
    )


async def test_answer_of_wrong_shape(client, exercise):
    data = await _start(client, exercise)
    attempt_id = data['attempt']['attempt_id']

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/answers',
        json={
            'item_id': data['exercise']['items'][0]['item_id'],
            'answer': {'value': 'a'},
        },
        headers=STUDENT,
    )

    assert response.status_code == 422


async def test_answer_for_unknown_item(client, exercise):
    data = await _start(client, exercise)
    attempt_id = data['attempt']['attempt_id']

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/answers',
        json={'item_id': 999, 'answer': 'a'},
        headers=STUDENT,
    )

    assert response.status_code == 404


async def test_abandon_then_answer_conflicts(client, exercise):
    data = await _start(client, exercise)
    attempt_id = data['attempt']['attempt_id']

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/abandon', headers=STUDENT
    )
    assert response.status_code == 200
    assert response.json()['status'] == 'abandoned'
    assert response.json()['score'] is None

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/answers',
        json={
            'item_id': data['exercise']['items'][0]['item_id'],
            'answer': 'a',
        },
        headers=STUDENT,
    )
    assert response.status_code == 409

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/complete', headers=STUDENT
    )
    assert response.status_code == 409


async def test_other_student_is_forbidden(client, exercise):
    data = await _start(client, exercise)
    attempt_id = data['attempt']['attempt_id']

    response = await client.get(
        f'/api/v1/attempts/{attempt_id}', headers=OTHER_STUDENT
    )
    assert response.status_code == 403

    response = await client.post(
        f'/api/v1/attempts/{attempt_id}/complete', headers=OTHER_STUDENT
    )
    assert response.status_code == 403


async def test_missing_student_header(client, exercise):
    response = await client.post(
        f'/api/v1/exercises/{exercise.exercise_id}/attempts'
    )

    assert response.status_code == 401


async def test_unknown_exercise_and_attempt(client):
    response = await client.post(
        '/api/v1/exercises/999/attempts', headers=STUDENT
    )
    assert response.status_code == 404

    response = await client.get('/api/v1/attempts/999', headers=STUDENT)
    assert response.status_code == 404

    response = await client.get(
        '/api/v1/exercises/999/stats', headers=STUDENT
    )
    assert response.status_code == 404


async def test_answer_after_time_limit(
    client, async_session, timed_exercise_stored
):
    # Started long enough ago that the 60 second limit has passed.
    repository = SQLAlchemyExerciseAttemptRepository(async_session)
    attempt = await repository.create(
        ExerciseAttempt(
            exercise_id=timed_exercise_stored.exercise_id,
            student_id=42,
            started_at=datetime.now(timezone.utc) - timedelta(minutes=5),
            exercise_snapshot=ExerciseSnapshot.from_exercise(
                timed_exercise_stored
            ),
        )
    )

    response = await client.post(
        f'/api/v1/attempts/{attempt.attempt_id}/answers',
        json={
            'item_id': timed_exercise_stored.items[0].item_id,
            'answer': 'a',
        },
        headers=STUDENT,
    )

    assert response.status_code == 409
    detail = response.json()['detail']
    assert detail['result']['timed_out'] is True
    assert detail['result']['score'] == 0

    response = await client.get(
        f'/api/v1/attempts/{attempt.attempt_id}', headers=STUDENT
    )
    assert response.json()['status'] == 'completed'
    assert response.json()['timed_out'] is True
    assert response.json()['time_limit_seconds'] == 60


async def test_my_attempts_and_stats(client, exercise):
    data = await _start(client, exercise)
    attempt_id = data['attempt']['attempt_id']
    await client.post(
        f'/api/v1/attempts/{attempt_id}/answers',
        json={
            'item_id': data['exercise']['items'][1]['item_id'],
            'answer': 'a',
        },
        headers=STUDENT,
    )
    await client.post(
        f'/api/v1/attempts/{attempt_id}/complete', headers=STUDENT
    )
    await _start(client, exercise)
    await _start(client, exercise, headers=OTHER_STUDENT)

    response = await client.get(
        '/api/v1/students/me/attempts', headers=STUDENT
    )
    assert response.status_code == 200
    attempts = response.json()
    assert len(attempts) == 2
    assert {a['status'] for a in attempts} == {'in_progress', 'completed'}

    response = await client.get(
        '/api/v1/students/me/attempts',
        params={'exercise_id': exercise.exercise_id + 1},
        headers=STUDENT,
    )
    assert response.json() == []

    response = await client.get('/api/v1/students/me/stats', headers=STUDENT)
    assert response.json() == {
        'total_attempts': 2,
        'completed': 1,
        'avg_score': 50,
    }

    response = await client.get(
        f'/api/v1/exercises/{exercise.exercise_id}/stats', headers=STUDENT
    )
    stats = response.json()
    assert stats['attempt_count'] == 3
    assert stats['completed_count'] == 1
    assert stats['completion_rate'] == 33
    assert stats['avg_score'] == 50
