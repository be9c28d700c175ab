from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import List, Optional, Union


class AnswerRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True, coerce_numbers_to_str=True)

    question_label: str = Field(alias="questionLabel")
    user_answer: Optional[str] = Field(default="", alias="userAnswer")
    correct: bool = False
    correct_answers: Optional[Union[str, List[str]]] = Field(default=None, alias="correctAnswers")

    @field_validator("user_answer", mode="after")
    @classmethod
    def unanswered_as_blank(cls, v: Optional[str]) -> str:
        return v or ""

    @property
    def accepted_answers(self) -> List[str]:
        if self.correct_answers is None:
            return []
        if isinstance(self.correct_answers, str):
            return [self.correct_answers]
        return list(self.correct_answers)


class Submission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    student_name: str = Field(min_length=1, alias="studentName")
    answers: List[AnswerRecord] = Field(min_length=1)
    score: Union[int, float]
    total: Union[int, float] = Field(gt=0)


class RelayResult(BaseModel):
    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class TelegramResult(BaseModel):
    model_config = ConfigDict(extra="ignore")

    ok: bool = False
    error_code: Optional[int] = None
    description: Optional[str] = None
