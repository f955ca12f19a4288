import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

from app.config import settings
from app.core.entities.answer_record import AnswerRecord
from app.core.entities.exercise import Exercise
from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.errors import (
    AttemptAlreadyTerminal,
    AttemptNotFound,
    AttemptTimeExpired,
    DuplicateActiveAttempt,
    ExerciseNotFound,
    ItemAlreadyAnswered,
    ItemNotFound,
)
from app.core.repositories.exercise import ExerciseRepository
from app.core.repositories.exercise_attempt import ExerciseAttemptRepository
from app.core.services.answer_evaluator import AnswerEvaluator
from app.core.services.completion_controller import (
    CompletionController,
    elapsed_seconds,
)
from app.core.value_objects.answer import Answer, create_answer_from_payload
from app.core.value_objects.evaluation import EvaluationResult
from app.core.value_objects.exercise_snapshot import ExerciseSnapshot
from app.metrics import BACKEND_ATTEMPT_METRICS

logger = logging.getLogger(__name__)


class AttemptManager:
    def __init__(
        self,
        exercise_repository: ExerciseRepository,
        exercise_attempt_repository: ExerciseAttemptRepository,
        completion_controller: CompletionController,
        answer_evaluator: Optional[AnswerEvaluator] = None,
        allow_answer_resubmission: Optional[bool] = None,
    ):
        self.exercise_repository = exercise_repository
        self.exercise_attempt_repository = exercise_attempt_repository
        self.completion_controller = completion_controller
        self.answer_evaluator = answer_evaluator or AnswerEvaluator()
        if allow_answer_resubmission is None:
            allow_answer_resubmission = settings.allow_answer_resubmission
        self.allow_answer_resubmission = allow_answer_resubmission

    async def get_available_exercise(self, exercise_id: int) -> Exercise:
        """Catalog exercise a student may start; unpublished are hidden."""
        exercise = await self.exercise_repository.get_by_id(exercise_id)
        if exercise is None:
            raise ExerciseNotFound(exercise_id)
        if not exercise.is_published:
            raise ExerciseNotFound(exercise_id, reason='is not available')
        if not exercise.items:
            raise ExerciseNotFound(exercise_id, reason='has no items')
        return exercise

    async def start_or_resume(
        self, exercise_id: int, student_id: int
    ) -> ExerciseAttempt:
        """
        Returns the student's live attempt, or starts a new one.

        A live attempt is resumed from its own snapshot, so the catalog
        is only read when a new attempt is created. Unpublishing or
        editing the exercise never locks a student out of an attempt
        they already hold.
        """
        existing = await self.exercise_attempt_repository.get_in_progress(
            exercise_id, student_id
        )
        if existing is not None:
            controller = self.completion_controller
            forced = await controller.force_complete_if_expired(existing)
            if forced is None:
                logger.info(
                    f'Student {student_id} resumed attempt '
                    f'{existing.attempt_id} on exercise {exercise_id}'
                )
                BACKEND_ATTEMPT_METRICS['resumed'].labels(
                    exercise_type=(
                        existing.exercise_snapshot.exercise_type.value
                    )
                ).inc()
                return existing

        exercise = await self.get_available_exercise(exercise_id)
        exercise_type = exercise.exercise_type.value
        attempt = ExerciseAttempt(
            attempt_id=None,
            exercise_id=exercise_id,
            student_id=student_id,
            started_at=datetime.now(timezone.utc),
            exercise_snapshot=ExerciseSnapshot.from_exercise(exercise),
        )
        try:
            created = await self.exercise_attempt_repository.create(attempt)
        except DuplicateActiveAttempt:
            winner = await self.exercise_attempt_repository.get_in_progress(
                exercise_id, student_id
            )
            if winner is None:
                raise
            logger.info(
                f'Concurrent start for student {student_id} on exercise '
                f'{exercise_id}, resuming attempt {winner.attempt_id}'
            )
            BACKEND_ATTEMPT_METRICS['resumed'].labels(
                exercise_type=exercise_type
            ).inc()
            return winner

        logger.info(
            f'Student {student_id} started attempt {created.attempt_id} '
            f'on exercise {exercise_id}'
        )
        BACKEND_ATTEMPT_METRICS['started'].labels(
            exercise_type=exercise_type
        ).inc()
        return created

    async def record_answer(
        self, attempt_id: int, item_id: int, answer: Any
    ) -> EvaluationResult:
        """
        Grades an answer for one item and stores it on the attempt.

        `answer` is either a typed Answer or the raw payload the client
        sent for the item.
        """
        attempt = await self.exercise_attempt_repository.get_by_id_for_update(
            attempt_id
        )
        if attempt is None:
            raise AttemptNotFound(attempt_id)
        if attempt.status.is_terminal:
            raise AttemptAlreadyTerminal(attempt_id, attempt.status.value)

        forced = await self.completion_controller.force_complete_if_expired(
            attempt
        )
        if forced is not None:
            raise AttemptTimeExpired(
                attempt_id, result=forced.completion_result()
            )

        snapshot = attempt.exercise_snapshot
        item = snapshot.get_item(item_id)
        if item is None:
            raise ItemNotFound(item_id, snapshot.exercise_id)
        if (
            not self.allow_answer_resubmission
            and attempt.get_answer(item_id) is not None
        ):
            raise ItemAlreadyAnswered(attempt_id, item_id)

        if not isinstance(answer, Answer):
            answer = create_answer_from_payload(snapshot.exercise_type, answer)

        exercise_type = snapshot.exercise_type.value
        with (
            BACKEND_ATTEMPT_METRICS['evaluation_time']
            .labels(exercise_type=exercise_type)
            .time()
        ):
            result = self.answer_evaluator.evaluate(
                exercise_type=snapshot.exercise_type,
                content=item.content,
                correct_answer=item.correct_answer,
                submitted=answer,
                points=item.points,
                explanation=item.explanation,
            )

        attempt.upsert_answer(
            AnswerRecord(
                item_id=item_id,
                answer=answer,
                is_correct=result.is_correct,
                points_earned=result.points_earned,
                submitted_at=datetime.now(timezone.utc),
            )
        )
        await self.exercise_attempt_repository.update(attempt)

        BACKEND_ATTEMPT_METRICS['answers'].labels(
            exercise_type=exercise_type
        ).inc()
        if not result.is_correct:
            BACKEND_ATTEMPT_METRICS['incorrect_answers'].labels(
                exercise_type=exercise_type
            ).inc()
        logger.debug(
            f'Attempt {attempt_id} item {item_id}: '
            f'is_correct={result.is_correct}, '
            f'points_earned={result.points_earned}'
        )
        return result

    async def get_attempt(self, attempt_id: int) -> ExerciseAttempt:
        attempt = await self.exercise_attempt_repository.get_by_id(attempt_id)
        if attempt is None:
            raise AttemptNotFound(attempt_id)
        return attempt

    async def list_student_attempts(
        self, student_id: int, exercise_id: Optional[int] = None
    ) -> List[ExerciseAttempt]:
        return await self.exercise_attempt_repository.get_by_student(
            student_id, exercise_id=exercise_id
        )

    def elapsed_seconds(self, attempt: ExerciseAttempt) -> float:
        return elapsed_seconds(attempt)
