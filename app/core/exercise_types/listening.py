from app.core.interfaces.exercise_type import (
    ExerciseTypeGrader,
    normalize_text,
)
from app.core.value_objects.answer import ListeningAnswer
from app.core.value_objects.exercise import ExerciseContent, ListeningKey


class ListeningGrader(ExerciseTypeGrader[ListeningAnswer, ListeningKey]):
    answer_class = ListeningAnswer
    key_class = ListeningKey

    def is_correct(
        self,
        content: ExerciseContent,
        answer: ListeningAnswer,
        correct_answer: ListeningKey,
    ) -> bool:
        return normalize_text(answer.value) == normalize_text(
            correct_answer.value
        )
