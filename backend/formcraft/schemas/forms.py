import uuid
from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

QuestionType = Literal["short_text", "long_text", "multiple_choice", "checkbox", "dropdown"]
AnswerPayload = str | list[str]


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class QuestionIn(BaseModel):
    """Question definition as sent by the form builder (camelCase accepted)."""

    model_config = ConfigDict(populate_by_name=True)

    question_text: str = Field(..., alias="questionText", max_length=1000)
    type: QuestionType
    is_required: bool = Field(False, alias="isRequired")
    options: list[str] | None = None
    points: int | None = Field(None, ge=0)
    correct_answer: AnswerPayload | None = Field(None, alias="correctAnswer")
    order: int | None = None

    @field_validator("type", mode="before")
    @classmethod
    def _lowercase_type(cls, value):
        # The builder sends SHORT_TEXT, MULTIPLE_CHOICE, ...
        if isinstance(value, str):
            return value.strip().lower()
        return value


class FormCreate(BaseModel):
    title: str = Field(..., max_length=255)
    description: str | None = None


class FormDefinition(BaseModel):
    """Full form graph used by both publish and edit (full replace)."""

    model_config = ConfigDict(populate_by_name=True)

    title: str = Field(..., max_length=255)
    description: str | None = None
    is_quiz: bool = Field(False, alias="isQuiz")
    questions: list[QuestionIn] = Field(default_factory=list)


class AnswerIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: uuid.UUID = Field(..., alias="questionId")
    value: AnswerPayload | None = None


class FormSubmission(BaseModel):
    answers: list[AnswerIn] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------


class MessageResponse(BaseModel):
    message: str


class PublishResponse(BaseModel):
    message: str = "Form published successfully"
    id: uuid.UUID


class SubmitResponse(BaseModel):
    message: str = "Success"
    score: int | None


class FormOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    creator_id: uuid.UUID
    title: str
    description: str | None
    is_quiz: bool
    is_published: bool
    created_at: datetime
    updated_at: datetime


class FormSummary(FormOut):
    response_count: int = 0


class PublicQuestionOut(BaseModel):
    id: uuid.UUID
    type: QuestionType
    text: str
    is_required: bool
    order: int
    options: list[str] | None
    points: int


class QuestionOut(PublicQuestionOut):
    form_id: uuid.UUID
    correct_answer: AnswerPayload | None


class FormWithQuestions(BaseModel):
    form: FormOut
    questions: list[QuestionOut]


class PublicFormInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    description: str | None
    is_quiz: bool


class PublicFormOut(BaseModel):
    form: PublicFormInfo
    questions: list[PublicQuestionOut]


class ResponseSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    submitted_at: datetime
    total_score: int


class AnswerOut(BaseModel):
    question_id: uuid.UUID | None
    value: AnswerPayload | None


class ResponseDetail(ResponseSummary):
    answers: list[AnswerOut]
