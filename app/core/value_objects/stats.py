from pydantic import BaseModel, Field


class StudentExerciseStats(BaseModel):
    total_attempts: int = Field(ge=0)
    completed: int = Field(ge=0)
    avg_score: int = Field(
        ge=0, le=100, description='Average percentage of completed attempts'
    )


class ExerciseStats(BaseModel):
    attempt_count: int = Field(ge=0)
    completed_count: int = Field(ge=0)
    completion_rate: int = Field(
        ge=0, le=100, description='Percent of attempts that were completed'
    )
    avg_score: int = Field(
        ge=0, le=100, description='Average percentage of completed attempts'
    )
    avg_time_spent: int = Field(
        ge=0, description='Average seconds spent on completed attempts'
    )
