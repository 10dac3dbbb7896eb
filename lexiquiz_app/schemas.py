"""Request models for the HTTP layer."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .modules.quiz.schemas import QuizMode
from .modules.srs.schemas import QuizDirection


class GenerateQuizRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(min_length=1, max_length=64)
    mode: QuizMode = QuizMode.DAILY_REVIEW
    count: int = Field(default=10, ge=1, le=50)
    cluster_id: Optional[int] = None

    @model_validator(mode="after")
    def _cluster_mode_needs_cluster(self):
        if self.mode is QuizMode.CLUSTER and self.cluster_id is None:
            raise ValueError("cluster_id is required for cluster mode")
        return self


class SubmitAnswerRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    user_id: str = Field(min_length=1, max_length=64)
    item_id: int
    selected_option_id: int
    confidence_level: Literal[1, 2, 3] = 2
    response_time_ms: Optional[int] = Field(default=None, ge=0)
    direction: Optional[QuizDirection] = None
    question_type: Optional[QuizDirection] = None
