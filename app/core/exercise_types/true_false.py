from app.core.interfaces.exercise_type import ExerciseTypeGrader
from app.core.value_objects.answer import TrueFalseAnswer
from app.core.value_objects.exercise import ExerciseContent, TrueFalseKey


class TrueFalseGrader(ExerciseTypeGrader[TrueFalseAnswer, TrueFalseKey]):
    answer_class = TrueFalseAnswer
    key_class = TrueFalseKey

    def is_correct(
        self,
        content: ExerciseContent,
        answer: TrueFalseAnswer,
        correct_answer: TrueFalseKey,
    ) -> bool:
        return answer.value is correct_answer.value
