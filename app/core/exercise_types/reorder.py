from app.core.interfaces.exercise_type import ExerciseTypeGrader
from app.core.value_objects.answer import ReorderAnswer
from app.core.value_objects.exercise import ExerciseContent, ReorderKey


class ReorderGrader(ExerciseTypeGrader[ReorderAnswer, ReorderKey]):
    answer_class = ReorderAnswer
    key_class = ReorderKey

    def is_correct(
        self,
        content: ExerciseContent,
        answer: ReorderAnswer,
        correct_answer: ReorderKey,
    ) -> bool:
        return answer.order == correct_answer.order

    def generate_feedback(
        self, is_correct: bool, correct_answer: ReorderKey
    ) -> str:
        if is_correct:
            return 'Correct!'
        order = ' → '.join(correct_answer.order)
        return f'Incorrect. Correct order: {order}'
