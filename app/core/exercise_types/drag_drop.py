from typing import Dict, FrozenSet, List

from app.core.interfaces.exercise_type import ExerciseTypeGrader
from app.core.value_objects.answer import DragDropAnswer
from app.core.value_objects.exercise import DragDropKey, ExerciseContent


def _zone_sets(zones: Dict[str, List[str]]) -> Dict[str, FrozenSet[str]]:
    # A zone left empty is the same as a zone left out.
    return {
        zone: frozenset(labels) for zone, labels in zones.items() if labels
    }


class DragDropGrader(ExerciseTypeGrader[DragDropAnswer, DragDropKey]):
    answer_class = DragDropAnswer
    key_class = DragDropKey

    def is_correct(
        self,
        content: ExerciseContent,
        answer: DragDropAnswer,
        correct_answer: DragDropKey,
    ) -> bool:
        return _zone_sets(answer.zones) == _zone_sets(correct_answer.zones)
