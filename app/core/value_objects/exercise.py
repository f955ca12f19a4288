from __future__ import annotations

from typing import Annotated, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.enums import ExerciseType


class ExerciseContent(BaseModel):
    """Question payload shown to the student. Never graded."""

    model_config = ConfigDict(
        populate_by_name=True,
    )

    @property
    def exercise_type(self) -> ExerciseType:
        return ExerciseType(getattr(self, 'type'))


class ChoiceOption(BaseModel):
    value: str = Field(description='Value submitted when chosen')
    label: str = Field(description='Text shown to the student')


class MultipleChoiceContent(ExerciseContent):
    type: Literal['multiple_choice'] = Field(
        default='multiple_choice', description='Type of exercise content'
    )
    options: List[ChoiceOption] = Field(description='Offered options')


class TrueFalseContent(ExerciseContent):
    type: Literal['true_false'] = Field(
        default='true_false', description='Type of exercise content'
    )
    statement: Optional[str] = Field(
        default=None, description='Statement to judge'
    )


class FillBlanksContent(ExerciseContent):
    type: Literal['fill_blanks'] = Field(
        default='fill_blanks', description='Type of exercise content'
    )
    text: str = Field(description='Text with blanks marked as ___')
    word_bank: List[str] = Field(
        default_factory=list, description='Optional words to pick from'
    )


class MatchingContent(ExerciseContent):
    type: Literal['matching'] = Field(
        default='matching', description='Type of exercise content'
    )
    left_items: List[str] = Field(description='Left column')
    right_items: List[str] = Field(description='Right column')


class DragDropContent(ExerciseContent):
    type: Literal['drag_drop'] = Field(
        default='drag_drop', description='Type of exercise content'
    )
    zones: List[str] = Field(description='Drop zone names')
    items: List[str] = Field(description='Draggable labels')


class ReorderContent(ExerciseContent):
    type: Literal['reorder'] = Field(
        default='reorder', description='Type of exercise content'
    )
    items: List[str] = Field(description='Labels in shuffled order')


class ListeningContent(ExerciseContent):
    type: Literal['listening'] = Field(
        default='listening', description='Type of exercise content'
    )
    prompt: Optional[str] = Field(
        default=None, description='What the student listens for'
    )
    options: List[ChoiceOption] = Field(
        default_factory=list,
        description='Options for choice-style listening items',
    )


ItemContent = Annotated[
    Union[
        MultipleChoiceContent,
        TrueFalseContent,
        FillBlanksContent,
        MatchingContent,
        DragDropContent,
        ReorderContent,
        ListeningContent,
    ],
    Field(discriminator='type'),
]


class AnswerKey(BaseModel):
    """Answer key of an item. Hidden from students."""

    model_config = ConfigDict(
        populate_by_name=True,
    )

    @property
    def exercise_type(self) -> ExerciseType:
        return ExerciseType(getattr(self, 'type'))

    def get_answer_text(self) -> str:
        raise NotImplementedError


class MultipleChoiceKey(AnswerKey):
    type: Literal['multiple_choice'] = Field(
        default='multiple_choice', description='Type of answer key'
    )
    value: str = Field(
        min_length=1, description='Value of the correct option'
    )

    def get_answer_text(self) -> str:
        return self.value


class TrueFalseKey(AnswerKey):
    type: Literal['true_false'] = Field(
        default='true_false', description='Type of answer key'
    )
    value: bool = Field(description='Whether the statement is true')

    def get_answer_text(self) -> str:
        return 'true' if self.value else 'false'


class FillBlanksKey(AnswerKey):
    type: Literal['fill_blanks'] = Field(
        default='fill_blanks', description='Type of answer key'
    )
    blanks: List[str] = Field(
        min_length=1, description='Expected word for each blank, in order'
    )

    def get_answer_text(self) -> str:
        return ';'.join(self.blanks)


class MatchingPair(BaseModel):
    model_config = ConfigDict(frozen=True)

    left: str = Field(description='Left column entry')
    right: str = Field(description='Right column entry')


class MatchingKey(AnswerKey):
    type: Literal['matching'] = Field(
        default='matching', description='Type of answer key'
    )
    pairs: List[MatchingPair] = Field(
        min_length=1, description='Correct left-right pairs'
    )

    def get_answer_text(self) -> str:
        return ';'.join(f'{pair.left}={pair.right}' for pair in self.pairs)


class DragDropKey(AnswerKey):
    type: Literal['drag_drop'] = Field(
        default='drag_drop', description='Type of answer key'
    )
    zones: Dict[str, List[str]] = Field(
        description='Labels expected in each zone'
    )

    @field_validator('zones')
    @classmethod
    def zones_not_empty(cls, zones: Dict[str, List[str]]):
        if not zones:
            raise ValueError('Drag and drop key must define zones')
        return zones

    def get_answer_text(self) -> str:
        return ';'.join(
            f'{zone}={",".join(sorted(labels))}'
            for zone, labels in sorted(self.zones.items())
        )


class ReorderKey(AnswerKey):
    type: Literal['reorder'] = Field(
        default='reorder', description='Type of answer key'
    )
    order: List[str] = Field(min_length=1, description='Correct order')

    def get_answer_text(self) -> str:
        return ';'.join(self.order)


class ListeningKey(AnswerKey):
    type: Literal['listening'] = Field(
        default='listening', description='Type of answer key'
    )
    value: str = Field(
        min_length=1, description='Expected option value or transcript'
    )

    def get_answer_text(self) -> str:
        return self.value


ItemAnswerKey = Annotated[
    Union[
        MultipleChoiceKey,
        TrueFalseKey,
        FillBlanksKey,
        MatchingKey,
        DragDropKey,
        ReorderKey,
        ListeningKey,
    ],
    Field(discriminator='type'),
]
