"""Form service — transactional publish/edit of form graphs and owner-scoped CRUD."""

import logging
import uuid

from sqlalchemy import delete, func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formcraft.models.form import Form
from formcraft.models.question import Question
from formcraft.models.response import Response
from formcraft.schemas.forms import FormCreate, FormDefinition, QuestionIn
from formcraft.services import values
from formcraft.services.exceptions import (
    FormAuthorizationError,
    FormNotFoundError,
    FormStorageError,
    FormValidationError,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def _title_errors(title: str | None) -> list[str]:
    if not title or not title.strip():
        return ["Form title is required"]
    return []


def _question_errors(question: QuestionIn, index: int | None, *, is_quiz: bool) -> list[str]:
    label = "Question" if index is None else f"Question {index}"
    errors: list[str] = []
    if not question.question_text.strip():
        errors.append(f"{label}: question text is required")
    if is_quiz:
        correct = values.from_raw(question.correct_answer)
        if correct is None or correct.is_blank():
            errors.append(f"{label}: a correct answer is required in quiz mode")
    return errors


def _definition_errors(payload: FormDefinition) -> list[str]:
    """Validate a full form graph, return list of errors."""
    errors = _title_errors(payload.title)
    if not payload.questions:
        errors.append("At least one question is required")
    for i, question in enumerate(payload.questions):
        errors.extend(_question_errors(question, i, is_quiz=payload.is_quiz))
    return errors


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _build_question(form_id: uuid.UUID, question: QuestionIn, index: int) -> Question:
    correct = values.from_raw(question.correct_answer)
    return Question(
        form_id=form_id,
        type=question.type,
        text=question.question_text,
        is_required=question.is_required,
        order=question.order if question.order is not None else index,
        options=values.dump_options(question.options),
        points=question.points or 0,
        correct_answer=values.dumps(correct) if correct is not None else None,
    )


def _commit(db: Session, message: str) -> None:
    """Commit the session, rolling back and raising FormStorageError on failure."""
    try:
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception(message)
        raise FormStorageError(message, type(exc).__name__) from exc


def get_owned_form(db: Session, form_id: uuid.UUID, requester_id: uuid.UUID) -> Form:
    """Return the form if ``requester_id`` created it.

    Raises FormNotFoundError for unknown ids and FormAuthorizationError for
    forms owned by someone else.
    """
    form = db.get(Form, form_id)
    if form is None:
        raise FormNotFoundError("Form not found")
    if form.creator_id != requester_id:
        raise FormAuthorizationError("Unauthorized to edit this form")
    return form


# ---------------------------------------------------------------------------
# Publish / full-replace edit
# ---------------------------------------------------------------------------


def publish_form(db: Session, creator_id: uuid.UUID, payload: FormDefinition) -> Form:
    """Create a published form and all of its questions in one transaction."""
    errors = _definition_errors(payload)
    if errors:
        raise FormValidationError("; ".join(errors))

    form = Form(
        creator_id=creator_id,
        title=payload.title,
        description=payload.description,
        is_quiz=payload.is_quiz,
        is_published=True,
    )
    try:
        db.add(form)
        db.flush()
        db.add_all([_build_question(form.id, q, i) for i, q in enumerate(payload.questions)])
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Publish failed for creator %s", creator_id)
        raise FormStorageError("Could not publish form and questions.", type(exc).__name__) from exc

    db.refresh(form)
    logger.info(
        "Published form %s for creator %s (%d questions, quiz=%s)",
        form.id,
        creator_id,
        len(payload.questions),
        form.is_quiz,
    )
    return form


def update_form(
    db: Session,
    form_id: uuid.UUID,
    requester_id: uuid.UUID,
    payload: FormDefinition,
) -> Form:
    """Replace a form's fields and its entire question set in one transaction.

    Concurrent edits of the same form are not locked; the last commit wins.
    """
    form = get_owned_form(db, form_id, requester_id)

    errors = _definition_errors(payload)
    if errors:
        raise FormValidationError("; ".join(errors))

    try:
        form.title = payload.title
        form.description = payload.description
        form.is_quiz = payload.is_quiz
        db.execute(delete(Question).where(Question.form_id == form.id))
        db.add_all([_build_question(form.id, q, i) for i, q in enumerate(payload.questions)])
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Update failed for form %s", form_id)
        raise FormStorageError("Update failed", type(exc).__name__) from exc

    db.refresh(form)
    logger.info("Updated form %s (%d questions)", form.id, len(payload.questions))
    return form


# ---------------------------------------------------------------------------
# Draft authoring
# ---------------------------------------------------------------------------


def create_form(db: Session, creator_id: uuid.UUID, payload: FormCreate) -> Form:
    """Create an unpublished form with no questions."""
    errors = _title_errors(payload.title)
    if errors:
        raise FormValidationError("; ".join(errors))

    form = Form(
        creator_id=creator_id,
        title=payload.title,
        description=payload.description,
        is_published=False,
    )
    db.add(form)
    _commit(db, "The form could not be created")
    db.refresh(form)
    return form


def add_question(
    db: Session,
    form_id: uuid.UUID,
    requester_id: uuid.UUID,
    payload: QuestionIn,
) -> Question:
    """Append one question to a form the requester owns."""
    form = get_owned_form(db, form_id, requester_id)

    errors = _question_errors(payload, None, is_quiz=form.is_quiz)
    if errors:
        raise FormValidationError("; ".join(errors))

    next_order = db.execute(
        select(func.coalesce(func.max(Question.order) + 1, 0)).where(Question.form_id == form.id)
    ).scalar_one()
    question = _build_question(form.id, payload, next_order)

    db.add(question)
    _commit(db, "Question could not be added")
    db.refresh(question)
    return question


def delete_question(db: Session, question_id: uuid.UUID, requester_id: uuid.UUID) -> None:
    question = db.get(Question, question_id)
    if question is None:
        raise FormNotFoundError("Question not found")
    get_owned_form(db, question.form_id, requester_id)

    db.delete(question)
    _commit(db, "Question could not be deleted")


def delete_form(db: Session, form_id: uuid.UUID, requester_id: uuid.UUID) -> None:
    """Delete a form with its questions, responses and answers."""
    form = get_owned_form(db, form_id, requester_id)
    db.delete(form)
    _commit(db, "Deletion failed.")
    logger.info("Deleted form %s", form_id)


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------


def list_forms(db: Session, creator_id: uuid.UUID) -> list[tuple[Form, int]]:
    """Return the creator's forms, newest first, with their response counts."""
    query = (
        select(Form, func.count(Response.id))
        .outerjoin(Response, Response.form_id == Form.id)
        .where(Form.creator_id == creator_id)
        .group_by(Form.id)
        .order_by(Form.created_at.desc())
    )
    return [(form, count) for form, count in db.execute(query).all()]


def get_form_for_edit(db: Session, form_id: uuid.UUID, requester_id: uuid.UUID) -> Form:
    form = db.get(Form, form_id)
    if form is None or form.creator_id != requester_id:
        raise FormNotFoundError("Form not found")
    return form


def get_public_form(db: Session, form_id: uuid.UUID) -> Form:
    form = db.get(Form, form_id)
    if form is None:
        raise FormNotFoundError("Form not found")
    return form
