import uuid

from sqlalchemy import ForeignKey, Index, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formcraft.core.database import Base


class Answer(Base):
    """A respondent's value for one question, JSON-encoded in ``value``.

    ``question_id`` is nulled when the question is later removed by an edit,
    so past responses survive a full question-set replace.
    """

    __tablename__ = "answers"
    __table_args__ = (
        Index("ix_answers_response_id", "response_id"),
        Index("ix_answers_question_id", "question_id"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    response_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("responses.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[uuid.UUID | None] = mapped_column(
        UUID(as_uuid=True), ForeignKey("questions.id", ondelete="SET NULL")
    )
    value: Mapped[str] = mapped_column(Text, nullable=False)

    response: Mapped["Response"] = relationship(back_populates="answers")

    def __repr__(self) -> str:
        return f"<Answer question={self.question_id} value={self.value}>"
