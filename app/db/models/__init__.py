from app.db.base import Base
from app.db.models.exercise import Exercise, ExerciseItem
from app.db.models.exercise_attempt import ExerciseAttempt

__all__ = [
    'Base',
    'Exercise',
    'ExerciseItem',
    'ExerciseAttempt',
]
