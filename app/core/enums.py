from enum import Enum


class ExerciseType(str, Enum):
    MULTIPLE_CHOICE = 'multiple_choice'
    TRUE_FALSE = 'true_false'
    FILL_BLANKS = 'fill_blanks'
    MATCHING = 'matching'
    DRAG_DROP = 'drag_drop'
    REORDER = 'reorder'
    LISTENING = 'listening'


class LanguageLevel(Enum):
    A1 = 'A1'
    A2 = 'A2'
    B1 = 'B1'
    B2 = 'B2'
    C1 = 'C1'
    C2 = 'C2'


class AttemptStatus(str, Enum):
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'
    ABANDONED = 'abandoned'

    @property
    def is_terminal(self) -> bool:
        return self is not AttemptStatus.IN_PROGRESS
