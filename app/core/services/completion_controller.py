import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.enums import AttemptStatus
from app.core.errors import (
    AttemptAlreadyTerminal,
    AttemptNotFound,
    AttemptTimeExpired,
)
from app.core.repositories.exercise_attempt import ExerciseAttemptRepository
from app.core.services.score_aggregator import ScoreAggregator, round_half_up
from app.core.value_objects.completion import CompletionResult
from app.metrics import BACKEND_ATTEMPT_METRICS

logger = logging.getLogger(__name__)


def elapsed_seconds(
    attempt: ExerciseAttempt, now: Optional[datetime] = None
) -> float:
    now = now or datetime.now(timezone.utc)
    return (now - attempt.started_at).total_seconds()


def spent_seconds(attempt: ExerciseAttempt, now: datetime) -> int:
    elapsed = Decimal(str(elapsed_seconds(attempt, now)))
    return max(0, round_half_up(elapsed))


def is_expired(
    attempt: ExerciseAttempt, now: Optional[datetime] = None
) -> bool:
    snapshot = attempt.exercise_snapshot
    if attempt.status is not AttemptStatus.IN_PROGRESS:
        return False
    if not snapshot.has_time_limit or snapshot.time_limit_seconds is None:
        return False
    return elapsed_seconds(attempt, now) >= snapshot.time_limit_seconds


class CompletionController:
    """Moves attempts out of IN_PROGRESS.

    IN_PROGRESS -> COMPLETED happens on request or when the time limit is
    hit; IN_PROGRESS -> ABANDONED only on request. Terminal attempts never
    change again.
    """

    def __init__(
        self,
        exercise_attempt_repository: ExerciseAttemptRepository,
        score_aggregator: Optional[ScoreAggregator] = None,
    ):
        self.exercise_attempt_repository = exercise_attempt_repository
        self.score_aggregator = score_aggregator or ScoreAggregator()

    async def _load(self, attempt_id: int) -> ExerciseAttempt:
        attempt = await self.exercise_attempt_repository.get_by_id_for_update(
            attempt_id
        )
        if attempt is None:
            raise AttemptNotFound(attempt_id)
        return attempt

    async def _finalize(
        self, attempt: ExerciseAttempt, now: datetime, timed_out: bool
    ) -> ExerciseAttempt:
        snapshot = attempt.exercise_snapshot
        summary = self.score_aggregator.aggregate(attempt, snapshot)
        attempt.apply_score(summary)
        attempt.status = AttemptStatus.COMPLETED
        attempt.completed_at = now
        attempt.time_spent_seconds = spent_seconds(attempt, now)
        attempt.timed_out = timed_out
        updated = await self.exercise_attempt_repository.update(attempt)

        exercise_type = snapshot.exercise_type.value
        BACKEND_ATTEMPT_METRICS['completed'].labels(
            exercise_type=exercise_type,
            outcome='passed' if summary.passed else 'failed',
        ).inc()
        BACKEND_ATTEMPT_METRICS['percentage'].labels(
            exercise_type=exercise_type
        ).observe(summary.percentage)
        if timed_out:
            BACKEND_ATTEMPT_METRICS['timed_out'].labels(
                exercise_type=exercise_type
            ).inc()
        logger.info(
            f'Attempt {updated.attempt_id} completed: '
            f'{summary.score}/{summary.max_score} ({summary.percentage}%), '
            f'passed={summary.passed}, timed_out={timed_out}'
        )
        return updated

    async def force_complete_if_expired(
        self, attempt: ExerciseAttempt
    ) -> Optional[ExerciseAttempt]:
        """
        Completes an IN_PROGRESS attempt whose time limit has elapsed,
        scoring the answers recorded so far. Returns the completed attempt,
        or None when the attempt is still within its limit.
        """
        now = datetime.now(timezone.utc)
        if not is_expired(attempt, now):
            return None
        logger.info(
            f'Time limit of {attempt.exercise_snapshot.time_limit_seconds}s '
            f'elapsed for attempt {attempt.attempt_id}'
        )
        return await self._finalize(attempt, now, timed_out=True)

    async def complete(self, attempt_id: int) -> CompletionResult:
        attempt = await self._load(attempt_id)
        if attempt.status is AttemptStatus.COMPLETED:
            return attempt.completion_result()
        if attempt.status is AttemptStatus.ABANDONED:
            raise AttemptAlreadyTerminal(attempt_id, attempt.status.value)

        forced = await self.force_complete_if_expired(attempt)
        if forced is not None:
            return forced.completion_result()

        completed = await self._finalize(
            attempt, datetime.now(timezone.utc), timed_out=False
        )
        return completed.completion_result()

    async def abandon(self, attempt_id: int) -> ExerciseAttempt:
        attempt = await self._load(attempt_id)
        if attempt.status.is_terminal:
            raise AttemptAlreadyTerminal(attempt_id, attempt.status.value)

        forced = await self.force_complete_if_expired(attempt)
        if forced is not None:
            raise AttemptTimeExpired(
                attempt_id, result=forced.completion_result()
            )

        now = datetime.now(timezone.utc)
        attempt.status = AttemptStatus.ABANDONED
        attempt.completed_at = now
        attempt.time_spent_seconds = spent_seconds(attempt, now)
        updated = await self.exercise_attempt_repository.update(attempt)
        BACKEND_ATTEMPT_METRICS['abandoned'].labels(
            exercise_type=attempt.exercise_snapshot.exercise_type.value
        ).inc()
        logger.info(f'Attempt {attempt_id} abandoned')
        return updated
