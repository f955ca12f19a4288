from pydantic import BaseModel, ConfigDict, Field


class ScoreSummary(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    max_score: int = Field(ge=0)
    percentage: int = Field(ge=0, le=100)
    passed: bool


class CompletionResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    score: int = Field(ge=0)
    max_score: int = Field(ge=0)
    percentage: int = Field(ge=0, le=100)
    passed: bool
    passing_score: int = Field(ge=0, le=100)
    time_spent: int = Field(ge=0, description='Seconds from start to finish')
    timed_out: bool = Field(
        default=False,
        description='Whether the time limit finalized the attempt',
    )
