"""Form API — publish/edit, question authoring, submissions, and response export."""

import uuid

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import StreamingResponse
from sqlalchemy.orm import Session

from formcraft.core.auth import get_current_user
from formcraft.core.database import get_db
from formcraft.models.form import Form
from formcraft.models.question import Question
from formcraft.models.response import Response
from formcraft.models.user import User
from formcraft.schemas.forms import (
    AnswerOut,
    FormCreate,
    FormDefinition,
    FormOut,
    FormSubmission,
    FormSummary,
    FormWithQuestions,
    MessageResponse,
    PublicFormInfo,
    PublicFormOut,
    PublicQuestionOut,
    PublishResponse,
    QuestionIn,
    QuestionOut,
    ResponseDetail,
    ResponseSummary,
    SubmitResponse,
)
from formcraft.services import values
from formcraft.services.exceptions import (
    FormAuthorizationError,
    FormError,
    FormNotFoundError,
    FormStorageError,
    FormValidationError,
)
from formcraft.services.forms import (
    add_question,
    create_form,
    delete_form,
    delete_question,
    get_form_for_edit,
    get_public_form,
    list_forms,
    publish_form,
    update_form,
)
from formcraft.services.submissions import (
    export_responses_csv,
    get_response,
    list_responses,
    submit_response,
)

router = APIRouter()


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _http_error(exc: FormError) -> HTTPException:
    if isinstance(exc, FormValidationError):
        return HTTPException(status_code=400, detail=str(exc))
    if isinstance(exc, FormAuthorizationError):
        return HTTPException(status_code=403, detail=str(exc))
    if isinstance(exc, FormNotFoundError):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, FormStorageError):
        return HTTPException(status_code=500, detail={"error": exc.message, "details": exc.details})
    return HTTPException(status_code=500, detail=str(exc))


def _public_question_out(question: Question) -> PublicQuestionOut:
    return PublicQuestionOut(
        id=question.id,
        type=question.type,
        text=question.text,
        is_required=question.is_required,
        order=question.order,
        options=values.load_options(question.options),
        points=question.points,
    )


def _question_out(question: Question) -> QuestionOut:
    correct = values.loads(question.correct_answer)
    return QuestionOut(
        id=question.id,
        form_id=question.form_id,
        type=question.type,
        text=question.text,
        is_required=question.is_required,
        order=question.order,
        options=values.load_options(question.options),
        points=question.points,
        correct_answer=correct.to_json() if correct is not None else None,
    )


def _form_with_questions(form: Form) -> FormWithQuestions:
    return FormWithQuestions(
        form=FormOut.model_validate(form),
        questions=[_question_out(q) for q in form.questions],
    )


def _response_detail(response: Response) -> ResponseDetail:
    answers = []
    for answer in response.answers:
        value = values.loads(answer.value)
        answers.append(AnswerOut(question_id=answer.question_id, value=value.to_json() if value else None))
    return ResponseDetail(
        id=response.id,
        submitted_at=response.submitted_at,
        total_score=response.total_score,
        answers=answers,
    )


# ---------------------------------------------------------------------------
# Form CRUD
# ---------------------------------------------------------------------------


@router.get("/", response_model=list[FormSummary])
def list_my_forms(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return [
        FormSummary(**FormOut.model_validate(form).model_dump(), response_count=count)
        for form, count in list_forms(db, current_user.id)
    ]


@router.post("/", response_model=FormOut, status_code=201)
def create_draft_form(
    payload: FormCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return create_form(db, current_user.id, payload)
    except FormError as exc:
        raise _http_error(exc)


@router.post("/publish", response_model=PublishResponse, status_code=201)
def publish(
    payload: FormDefinition,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        form = publish_form(db, current_user.id, payload)
    except FormError as exc:
        raise _http_error(exc)
    return PublishResponse(id=form.id)


@router.get("/public/{form_id}", response_model=PublicFormOut)
def get_public(form_id: uuid.UUID, db: Session = Depends(get_db)):
    try:
        form = get_public_form(db, form_id)
    except FormError as exc:
        raise _http_error(exc)
    return PublicFormOut(
        form=PublicFormInfo.model_validate(form),
        questions=[_public_question_out(q) for q in form.questions],
    )


@router.get("/edit/{form_id}", response_model=FormWithQuestions)
def get_for_edit(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        form = get_form_for_edit(db, form_id, current_user.id)
    except FormError as exc:
        raise _http_error(exc)
    return _form_with_questions(form)


@router.put("/{form_id}", response_model=MessageResponse)
def update(
    form_id: uuid.UUID,
    payload: FormDefinition,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        update_form(db, form_id, current_user.id, payload)
    except FormError as exc:
        raise _http_error(exc)
    return MessageResponse(message="Form updated successfully")


@router.delete("/{form_id}", response_model=MessageResponse)
def delete(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        delete_form(db, form_id, current_user.id)
    except FormError as exc:
        raise _http_error(exc)
    return MessageResponse(message="Form deleted")


# ---------------------------------------------------------------------------
# Questions
# ---------------------------------------------------------------------------


@router.post("/{form_id}/questions", response_model=QuestionOut, status_code=201)
def create_question(
    form_id: uuid.UUID,
    payload: QuestionIn,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        question = add_question(db, form_id, current_user.id, payload)
    except FormError as exc:
        raise _http_error(exc)
    return _question_out(question)


@router.delete("/questions/{question_id}", response_model=MessageResponse)
def remove_question(
    question_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        delete_question(db, question_id, current_user.id)
    except FormError as exc:
        raise _http_error(exc)
    return MessageResponse(message="Question deleted successfully")


# ---------------------------------------------------------------------------
# Submissions & responses
# ---------------------------------------------------------------------------


@router.post("/{form_id}/submit", response_model=SubmitResponse, status_code=201)
def submit(form_id: uuid.UUID, payload: FormSubmission, db: Session = Depends(get_db)):
    try:
        result = submit_response(db, form_id, payload.answers)
    except FormError as exc:
        raise _http_error(exc)
    return SubmitResponse(score=result.score)


@router.get("/{form_id}/responses", response_model=list[ResponseSummary])
def get_responses(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        return list_responses(db, form_id, current_user.id)
    except FormError as exc:
        raise _http_error(exc)


@router.get("/{form_id}/responses/download")
def download_responses(
    form_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Export all form responses as CSV."""
    try:
        content = export_responses_csv(db, form_id, current_user.id)
    except FormError as exc:
        raise _http_error(exc)

    filename = f"form_{form_id}_responses.csv"
    return StreamingResponse(
        iter([content]),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/{form_id}/responses/{response_id}", response_model=ResponseDetail)
def get_response_detail(
    form_id: uuid.UUID,
    response_id: uuid.UUID,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    try:
        response = get_response(db, form_id, response_id, current_user.id)
    except FormError as exc:
        raise _http_error(exc)
    return _response_detail(response)
