from typing import Any, ClassVar, Dict, List, Optional, Type

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    ValidationError,
)

from app.core.enums import ExerciseType
from app.core.errors import InvalidAnswerShape


class Answer(BaseModel):
    model_config = ConfigDict(
        populate_by_name=True,
    )

    exercise_type: ClassVar[ExerciseType]
    payload_field: ClassVar[str]

    @property
    def type(self) -> str:
        return self.__class__.__name__

    @property
    def payload(self) -> Any:
        """The raw value as the client submitted it."""
        return self.model_dump()[self.payload_field]

    def model_dump(self, **kwargs):
        data = super().model_dump(**kwargs)
        data['type'] = self.type
        return data

    def is_empty(self) -> bool:
        raise NotImplementedError

    def get_answer_text(self) -> str:
        """
        Returns a string representation of the answer.
        """
        raise NotImplementedError

    def __str__(self) -> str:
        return self.model_dump_json()


class MultipleChoiceAnswer(Answer):
    exercise_type: ClassVar[ExerciseType] = ExerciseType.MULTIPLE_CHOICE
    payload_field: ClassVar[str] = 'value'

    value: StrictStr = Field(default='', description='Chosen option value')

    def is_empty(self) -> bool:
        return not self.value.strip()

    def get_answer_text(self) -> str:
        return self.value


class TrueFalseAnswer(Answer):
    exercise_type: ClassVar[ExerciseType] = ExerciseType.TRUE_FALSE
    payload_field: ClassVar[str] = 'value'

    value: Optional[StrictBool] = Field(
        default=None, description='Whether the statement is true'
    )

    def is_empty(self) -> bool:
        return self.value is None

    def get_answer_text(self) -> str:
        if self.value is None:
            return ''
        return 'true' if self.value else 'false'


class FillBlanksAnswer(Answer):
    exercise_type: ClassVar[ExerciseType] = ExerciseType.FILL_BLANKS
    payload_field: ClassVar[str] = 'blanks'

    blanks: List[StrictStr] = Field(
        default_factory=list, description='Words typed into the blanks'
    )

    def is_empty(self) -> bool:
        return not any(blank.strip() for blank in self.blanks)

    def get_answer_text(self) -> str:
        return ';'.join(self.blanks)


class SubmittedPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    left: StrictStr = Field(description='Left column entry')
    right: StrictStr = Field(description='Right column entry')


class MatchingAnswer(Answer):
    exercise_type: ClassVar[ExerciseType] = ExerciseType.MATCHING
    payload_field: ClassVar[str] = 'pairs'

    pairs: List[SubmittedPair] = Field(
        default_factory=list, description='Pairs matched by the student'
    )

    def is_empty(self) -> bool:
        return not self.pairs

    def get_answer_text(self) -> str:
        return ';'.join(f'{pair.left}={pair.right}' for pair in self.pairs)


class DragDropAnswer(Answer):
    exercise_type: ClassVar[ExerciseType] = ExerciseType.DRAG_DROP
    payload_field: ClassVar[str] = 'zones'

    zones: Dict[StrictStr, List[StrictStr]] = Field(
        default_factory=dict, description='Labels dropped into each zone'
    )

    def is_empty(self) -> bool:
        return not any(self.zones.values())

    def get_answer_text(self) -> str:
        return ';'.join(
            f'{zone}={",".join(sorted(labels))}'
            for zone, labels in sorted(self.zones.items())
        )


class ReorderAnswer(Answer):
    exercise_type: ClassVar[ExerciseType] = ExerciseType.REORDER
    payload_field: ClassVar[str] = 'order'

    order: List[StrictStr] = Field(
        default_factory=list, description='Labels in submitted order'
    )

    def is_empty(self) -> bool:
        return not self.order

    def get_answer_text(self) -> str:
        return ';'.join(self.order)


class ListeningAnswer(Answer):
    exercise_type: ClassVar[ExerciseType] = ExerciseType.LISTENING
    payload_field: ClassVar[str] = 'value'

    value: StrictStr = Field(
        default='', description='Chosen option or typed transcript'
    )

    def is_empty(self) -> bool:
        return not self.value.strip()

    def get_answer_text(self) -> str:
        return self.value


ANSWER_TYPES: Dict[str, Type[Answer]] = {
    answer_class.__name__: answer_class
    for answer_class in (
        MultipleChoiceAnswer,
        TrueFalseAnswer,
        FillBlanksAnswer,
        MatchingAnswer,
        DragDropAnswer,
        ReorderAnswer,
        ListeningAnswer,
    )
}

ANSWER_TYPE_BY_EXERCISE: Dict[ExerciseType, Type[Answer]] = {
    answer_class.exercise_type: answer_class
    for answer_class in ANSWER_TYPES.values()
}


def create_answer_from_payload(
    exercise_type: ExerciseType, payload: Any
) -> Answer:
    """
    Builds the typed answer for a raw client payload.

    A missing or empty payload (None, "", [], {}) gives an empty answer of
    the right type, whatever JSON kind the type normally takes. A payload of
    the wrong shape raises InvalidAnswerShape.
    """
    answer_class = ANSWER_TYPE_BY_EXERCISE[exercise_type]
    if payload is None or (
        isinstance(payload, (str, list, dict)) and not payload
    ):
        return answer_class()
    try:
        return answer_class.model_validate(
            {answer_class.payload_field: payload}
        )
    except ValidationError as e:
        raise InvalidAnswerShape(
            exercise_type.value,
            detail='; '.join(error['msg'] for error in e.errors()),
        ) from e


def create_answer_model_validate(data: Dict[str, Any]) -> Answer:
    answer_type = data.get('type')
    if not answer_type or not isinstance(answer_type, str):
        raise ValueError('Missing or invalid "type" key in Answer data')

    answer_class: Optional[Type[Answer]] = ANSWER_TYPES.get(answer_type)
    if answer_class is None:
        raise ValueError(f'Unknown Answer type: {answer_type}')

    return answer_class.model_validate(data)
