import logging
from decimal import Decimal
from typing import Any, List, Optional, Tuple

from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.errors import AttemptNotFound, ExerciseNotFound, Unauthorized
from app.core.repositories.exercise import ExerciseRepository
from app.core.repositories.exercise_attempt import ExerciseAttemptRepository
from app.core.services.answer_evaluator import AnswerEvaluator
from app.core.services.attempt_manager import AttemptManager
from app.core.services.completion_controller import CompletionController
from app.core.services.score_aggregator import ScoreAggregator, round_half_up
from app.core.value_objects.completion import CompletionResult
from app.core.value_objects.evaluation import EvaluationResult
from app.core.value_objects.exercise_snapshot import ExerciseSnapshot
from app.core.value_objects.stats import ExerciseStats, StudentExerciseStats

logger = logging.getLogger(__name__)


def _rounded(value: Optional[float]) -> int:
    if value is None:
        return 0
    return round_half_up(Decimal(str(value)))


class ExerciseAttemptService:
    """Entry point for everything a student does with an exercise attempt.

    Every call that names an attempt checks that the requesting student
    owns it before anything else happens.
    """

    def __init__(
        self,
        exercise_repository: ExerciseRepository,
        exercise_attempt_repository: ExerciseAttemptRepository,
        answer_evaluator: Optional[AnswerEvaluator] = None,
        allow_answer_resubmission: Optional[bool] = None,
    ):
        self.exercise_repository = exercise_repository
        self.exercise_attempt_repository = exercise_attempt_repository
        self.completion_controller = CompletionController(
            exercise_attempt_repository=exercise_attempt_repository,
            score_aggregator=ScoreAggregator(),
        )
        self.attempt_manager = AttemptManager(
            exercise_repository=exercise_repository,
            exercise_attempt_repository=exercise_attempt_repository,
            completion_controller=self.completion_controller,
            answer_evaluator=answer_evaluator,
            allow_answer_resubmission=allow_answer_resubmission,
        )

    async def _check_owner(
        self, attempt_id: int, student_id: int, for_update: bool = True
    ) -> ExerciseAttempt:
        repository = self.exercise_attempt_repository
        if for_update:
            attempt = await repository.get_by_id_for_update(attempt_id)
        else:
            attempt = await repository.get_by_id(attempt_id)
        if attempt is None:
            raise AttemptNotFound(attempt_id)
        if attempt.student_id != student_id:
            logger.warning(
                f'Student {student_id} tried to access attempt {attempt_id} '
                f'owned by student {attempt.student_id}'
            )
            raise Unauthorized(attempt_id, student_id)
        return attempt

    async def start_attempt(
        self, exercise_id: int, student_id: int
    ) -> Tuple[ExerciseAttempt, ExerciseSnapshot]:
        attempt = await self.attempt_manager.start_or_resume(
            exercise_id, student_id
        )
        return attempt, attempt.exercise_snapshot

    async def submit_answer(
        self, attempt_id: int, student_id: int, item_id: int, answer: Any
    ) -> EvaluationResult:
        await self._check_owner(attempt_id, student_id)
        return await self.attempt_manager.record_answer(
            attempt_id, item_id, answer
        )

    async def complete_attempt(
        self, attempt_id: int, student_id: int
    ) -> CompletionResult:
        await self._check_owner(attempt_id, student_id)
        return await self.completion_controller.complete(attempt_id)

    async def abandon_attempt(
        self, attempt_id: int, student_id: int
    ) -> ExerciseAttempt:
        await self._check_owner(attempt_id, student_id)
        return await self.completion_controller.abandon(attempt_id)

    async def get_attempt(
        self, attempt_id: int, student_id: int
    ) -> ExerciseAttempt:
        return await self._check_owner(
            attempt_id, student_id, for_update=False
        )

    async def list_student_attempts(
        self, student_id: int, exercise_id: Optional[int] = None
    ) -> List[ExerciseAttempt]:
        return await self.attempt_manager.list_student_attempts(
            student_id, exercise_id=exercise_id
        )

    async def get_student_stats(
        self, student_id: int
    ) -> StudentExerciseStats:
        summary = await self.exercise_attempt_repository.get_student_summary(
            student_id
        )
        return StudentExerciseStats(
            total_attempts=summary.get('total_attempts') or 0,
            completed=summary.get('completed') or 0,
            avg_score=_rounded(summary.get('avg_percentage')),
        )

    async def get_exercise_stats(self, exercise_id: int) -> ExerciseStats:
        if not await self.exercise_repository.exists(exercise_id):
            raise ExerciseNotFound(exercise_id)
        repository = self.exercise_attempt_repository
        summary = await repository.get_exercise_summary(exercise_id)
        attempt_count = summary.get('attempt_count') or 0
        completed_count = summary.get('completed_count') or 0
        completion_rate = (
            round_half_up(Decimal(100 * completed_count) / attempt_count)
            if attempt_count
            else 0
        )
        return ExerciseStats(
            attempt_count=attempt_count,
            completed_count=completed_count,
            completion_rate=completion_rate,
            avg_score=_rounded(summary.get('avg_percentage')),
            avg_time_spent=_rounded(summary.get('avg_time_spent')),
        )
