from pydantic import BaseModel, Field


class StudentStatsSchema(BaseModel):
    total_attempts: int = Field(description='Attempts started')
    completed: int = Field(description='Attempts completed')
    avg_score: int = Field(description='Average percentage when completed')


class ExerciseStatsSchema(BaseModel):
    attempt_count: int = Field(description='Attempts started')
    completed_count: int = Field(description='Attempts completed')
    completion_rate: int = Field(description='Percent of attempts completed')
    avg_score: int = Field(description='Average percentage when completed')
    avg_time_spent: int = Field(description='Average seconds when completed')
