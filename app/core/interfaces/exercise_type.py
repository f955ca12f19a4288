from abc import ABC, abstractmethod
from typing import Generic, Type, TypeVar

from app.core.enums import ExerciseType
from app.core.errors import InvalidAnswerShape
from app.core.value_objects.answer import Answer
from app.core.value_objects.exercise import AnswerKey, ExerciseContent

AnswerT = TypeVar('AnswerT', bound=Answer)
KeyT = TypeVar('KeyT', bound=AnswerKey)


def normalize_text(value: str) -> str:
    return value.strip().casefold()


class ExerciseTypeGrader(ABC, Generic[AnswerT, KeyT]):
    answer_class: Type[AnswerT]
    key_class: Type[KeyT]

    def get_exercise_type(self) -> ExerciseType:
        return self.answer_class.exercise_type

    def validate_answer(
        self,
        content: ExerciseContent,
        answer: Answer,
        correct_answer: AnswerKey,
    ) -> bool:
        if not isinstance(answer, self.answer_class):
            raise InvalidAnswerShape(
                self.get_exercise_type().value,
                detail=f'got {answer.type}',
            )
        if not isinstance(correct_answer, self.key_class):
            raise ValueError(
                f'Answer key must be {self.key_class.__name__}, '
                f'got {type(correct_answer).__name__}'
            )
        return self.is_correct(content, answer, correct_answer)

    @abstractmethod
    def is_correct(
        self, content: ExerciseContent, answer: AnswerT, correct_answer: KeyT
    ) -> bool:
        raise NotImplementedError

    def generate_feedback(self, is_correct: bool, correct_answer: KeyT) -> str:
        if is_correct:
            return 'Correct!'
        return f'Incorrect. Correct answer: {correct_answer.get_answer_text()}'
