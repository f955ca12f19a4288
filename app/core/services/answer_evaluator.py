import logging
from typing import Dict, Optional

from app.core.enums import ExerciseType
from app.core.errors import InvalidAnswerShape
from app.core.exercise_types.drag_drop import DragDropGrader
from app.core.exercise_types.fill_blanks import FillBlanksGrader
from app.core.exercise_types.listening import ListeningGrader
from app.core.exercise_types.matching import MatchingGrader
from app.core.exercise_types.multiple_choice import MultipleChoiceGrader
from app.core.exercise_types.reorder import ReorderGrader
from app.core.exercise_types.true_false import TrueFalseGrader
from app.core.interfaces.exercise_type import ExerciseTypeGrader
from app.core.value_objects.answer import Answer
from app.core.value_objects.evaluation import EvaluationResult
from app.core.value_objects.exercise import AnswerKey, ExerciseContent

logger = logging.getLogger(__name__)

GRADERS: Dict[ExerciseType, ExerciseTypeGrader] = {
    grader.get_exercise_type(): grader
    for grader in (
        MultipleChoiceGrader(),
        TrueFalseGrader(),
        FillBlanksGrader(),
        MatchingGrader(),
        DragDropGrader(),
        ReorderGrader(),
        ListeningGrader(),
    )
}

_missing_graders = set(ExerciseType) - set(GRADERS)
if _missing_graders:
    raise RuntimeError(
        'No grader registered for exercise types: '
        f'{", ".join(sorted(t.value for t in _missing_graders))}'
    )


class AnswerEvaluator:
    """Grades a single submitted answer against an item's answer key.

    Grading is all-or-nothing and does not touch storage: the same inputs
    always give the same result.
    """

    def __init__(
        self,
        graders: Optional[Dict[ExerciseType, ExerciseTypeGrader]] = None,
    ):
        self.graders = graders if graders is not None else GRADERS

    def get_grader(self, exercise_type: ExerciseType) -> ExerciseTypeGrader:
        return self.graders[exercise_type]

    def evaluate(
        self,
        exercise_type: ExerciseType,
        content: ExerciseContent,
        correct_answer: AnswerKey,
        submitted: Answer,
        points: int,
        explanation: Optional[str] = None,
    ) -> EvaluationResult:
        grader = self.get_grader(exercise_type)
        if not isinstance(submitted, grader.answer_class):
            raise InvalidAnswerShape(
                exercise_type.value, detail=f'got {submitted.type}'
            )

        if submitted.is_empty():
            is_correct = False
        else:
            is_correct = grader.validate_answer(
                content, submitted, correct_answer
            )
        logger.debug(
            f'Evaluated {exercise_type.value} answer {submitted}: '
            f'is_correct={is_correct}'
        )
        return EvaluationResult(
            is_correct=is_correct,
            points_earned=points if is_correct else 0,
            explanation=explanation
            or grader.generate_feedback(is_correct, correct_answer),
        )
