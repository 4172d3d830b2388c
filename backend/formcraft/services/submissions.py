"""Submission service — validate, score and persist form responses.

A submit call moves through ``validating -> (reject | scoring) -> persisting
-> (committed | rolled-back)``. Rejections happen before the session is
touched, so a failed submission never leaves a partial response behind.
"""

import csv
import io
import logging
import uuid
from dataclasses import dataclass

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from formcraft.models.answer import Answer
from formcraft.models.form import Form
from formcraft.models.question import Question
from formcraft.models.response import Response
from formcraft.schemas.forms import AnswerIn
from formcraft.services import values
from formcraft.services.exceptions import (
    FormNotFoundError,
    FormStorageError,
    FormValidationError,
)
from formcraft.services.forms import get_owned_form

logger = logging.getLogger(__name__)


@dataclass
class SubmissionResult:
    response: Response
    score: int | None


# ---------------------------------------------------------------------------
# Validation & scoring
# ---------------------------------------------------------------------------


def _decode_answers(answers: list[AnswerIn]) -> dict[uuid.UUID, values.AnswerValue | None]:
    decoded: dict[uuid.UUID, values.AnswerValue | None] = {}
    for answer in answers:
        if answer.question_id in decoded:
            raise FormValidationError(f"Question {answer.question_id} was answered more than once")
        try:
            decoded[answer.question_id] = values.from_raw(answer.value)
        except values.ValueDecodeError as exc:
            raise FormValidationError(f"Question {answer.question_id}: {exc}") from exc
    return decoded


def _validate_answers(
    questions: dict[uuid.UUID, Question],
    submitted: dict[uuid.UUID, values.AnswerValue | None],
) -> None:
    """Reject missing required answers and answers to foreign questions."""
    for question in questions.values():
        if not question.is_required:
            continue
        value = submitted.get(question.id)
        if value is None or value.is_blank():
            raise FormValidationError(f"Question {question.id} is required")

    for question_id in submitted:
        if question_id not in questions:
            raise FormValidationError(f"Question {question_id} does not belong to this form")


def score_answers(
    questions: dict[uuid.UUID, Question],
    submitted: dict[uuid.UUID, values.AnswerValue | None],
) -> int:
    """Sum the points of every question whose correct answer was given."""
    total = 0
    for question_id, value in submitted.items():
        question = questions.get(question_id)
        if question is None or value is None:
            continue
        correct = values.loads(question.correct_answer)
        if correct is None or correct.is_blank():
            continue
        if values.matches(value, correct):
            total += question.points
    return total


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------


def submit_response(db: Session, form_id: uuid.UUID, answers: list[AnswerIn]) -> SubmissionResult:
    """Record one submission. Returns the stored response and the quiz score.

    The score is ``None`` for non-quiz forms.
    """
    form = db.get(Form, form_id)
    if form is None:
        raise FormNotFoundError("Form not found")

    logger.debug("Submission for form %s: validating %d answers", form_id, len(answers))
    questions = {q.id: q for q in form.questions}
    submitted = _decode_answers(answers)
    _validate_answers(questions, submitted)

    score = score_answers(questions, submitted) if form.is_quiz else None

    response = Response(form_id=form.id, total_score=0)
    try:
        db.add(response)
        db.flush()
        db.add_all(
            [
                Answer(response_id=response.id, question_id=question_id, value=values.dumps(value))
                for question_id, value in submitted.items()
                if value is not None
            ]
        )
        if score is not None:
            db.flush()
            response.total_score = score
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception("Submission for form %s rolled back", form_id)
        raise FormStorageError("Submit failed", type(exc).__name__) from exc

    db.refresh(response)
    logger.info("Recorded response %s for form %s (score=%s)", response.id, form_id, score)
    return SubmissionResult(response=response, score=score)


# ---------------------------------------------------------------------------
# Owner views
# ---------------------------------------------------------------------------


def list_responses(db: Session, form_id: uuid.UUID, requester_id: uuid.UUID) -> list[Response]:
    form = get_owned_form(db, form_id, requester_id)
    return list(
        db.execute(
            select(Response).where(Response.form_id == form.id).order_by(Response.submitted_at.desc())
        )
        .scalars()
        .all()
    )


def get_response(
    db: Session,
    form_id: uuid.UUID,
    response_id: uuid.UUID,
    requester_id: uuid.UUID,
) -> Response:
    get_owned_form(db, form_id, requester_id)
    response = db.get(Response, response_id)
    if response is None or response.form_id != form_id:
        raise FormNotFoundError("Response not found")
    return response


def export_responses_csv(db: Session, form_id: uuid.UUID, requester_id: uuid.UUID) -> str:
    """Render every response to the form as CSV, one column per question."""
    form = get_owned_form(db, form_id, requester_id)
    questions = list(form.questions)

    responses = (
        db.execute(select(Response).where(Response.form_id == form.id).order_by(Response.submitted_at.asc()))
        .scalars()
        .all()
    )

    output = io.StringIO()
    writer = csv.writer(output)

    header = ["response_id", "submitted_at"]
    for i, q in enumerate(questions):
        header.append(f"Q{i + 1}: {q.text}")
    if form.is_quiz:
        header.append("total_score")
    writer.writerow(header)

    for resp in responses:
        by_question = {a.question_id: values.loads(a.value) for a in resp.answers}
        row = [str(resp.id), resp.submitted_at.isoformat() if resp.submitted_at else ""]
        for q in questions:
            value = by_question.get(q.id)
            row.append(value.as_text() if value is not None else "")
        if form.is_quiz:
            row.append(str(resp.total_score))
        writer.writerow(row)

    return output.getvalue()
