from decimal import ROUND_HALF_UP, Decimal

from app.core.entities.exercise_attempt import ExerciseAttempt
from app.core.value_objects.completion import ScoreSummary
from app.core.value_objects.exercise_snapshot import ExerciseSnapshot


def round_half_up(value: Decimal) -> int:
    return int(value.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


class ScoreAggregator:
    def aggregate(
        self, attempt: ExerciseAttempt, snapshot: ExerciseSnapshot
    ) -> ScoreSummary:
        """
        Sums the points of an attempt's answer records.

        Records for items the snapshot does not contain are ignored, so
        the score can never exceed max_score.
        """
        item_ids = {item.item_id for item in snapshot.items}
        max_score = snapshot.max_score
        score = sum(
            record.points_earned
            for record in attempt.answers
            if record.item_id in item_ids
        )
        if max_score == 0:
            percentage = 0
        else:
            percentage = round_half_up(Decimal(100 * score) / max_score)
        return ScoreSummary(
            score=score,
            max_score=max_score,
            percentage=percentage,
            passed=percentage >= snapshot.passing_score_percent,
        )
