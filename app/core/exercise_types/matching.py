from app.core.interfaces.exercise_type import ExerciseTypeGrader
from app.core.value_objects.answer import MatchingAnswer
from app.core.value_objects.exercise import ExerciseContent, MatchingKey


class MatchingGrader(ExerciseTypeGrader[MatchingAnswer, MatchingKey]):
    answer_class = MatchingAnswer
    key_class = MatchingKey

    def is_correct(
        self,
        content: ExerciseContent,
        answer: MatchingAnswer,
        correct_answer: MatchingKey,
    ) -> bool:
        expected = {(pair.left, pair.right) for pair in correct_answer.pairs}
        given = [(pair.left, pair.right) for pair in answer.pairs]
        # Repeated pairs count as extras.
        return len(given) == len(expected) and set(given) == expected
