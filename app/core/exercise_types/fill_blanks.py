from app.core.interfaces.exercise_type import (
    ExerciseTypeGrader,
    normalize_text,
)
from app.core.value_objects.answer import FillBlanksAnswer
from app.core.value_objects.exercise import ExerciseContent, FillBlanksKey


class FillBlanksGrader(ExerciseTypeGrader[FillBlanksAnswer, FillBlanksKey]):
    """Every blank must match; one wrong blank fails the whole item."""

    answer_class = FillBlanksAnswer
    key_class = FillBlanksKey

    def is_correct(
        self,
        content: ExerciseContent,
        answer: FillBlanksAnswer,
        correct_answer: FillBlanksKey,
    ) -> bool:
        if len(answer.blanks) != len(correct_answer.blanks):
            return False
        return all(
            normalize_text(given) == normalize_text(expected)
            for given, expected in zip(answer.blanks, correct_answer.blanks)
        )

    def generate_feedback(
        self, is_correct: bool, correct_answer: FillBlanksKey
    ) -> str:
        if is_correct:
            return 'Correct!'
        answers = ', '.join(correct_answer.blanks)
        return f'Incorrect. Correct answers: {answers}'
