from app.core.interfaces.exercise_type import ExerciseTypeGrader
from app.core.value_objects.answer import MultipleChoiceAnswer
from app.core.value_objects.exercise import ExerciseContent, MultipleChoiceKey


class MultipleChoiceGrader(
    ExerciseTypeGrader[MultipleChoiceAnswer, MultipleChoiceKey]
):
    answer_class = MultipleChoiceAnswer
    key_class = MultipleChoiceKey

    def is_correct(
        self,
        content: ExerciseContent,
        answer: MultipleChoiceAnswer,
        correct_answer: MultipleChoiceKey,
    ) -> bool:
        return answer.value == correct_answer.value
