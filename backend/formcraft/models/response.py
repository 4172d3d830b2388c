import uuid
from datetime import datetime

from sqlalchemy import ForeignKey, Index, Integer, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formcraft.core.database import Base


class Response(Base):
    """One respondent's submission to a form.

    ``total_score`` stays 0 for non-quiz forms and is backfilled after
    scoring for quizzes.
    """

    __tablename__ = "responses"
    __table_args__ = (
        Index("ix_responses_form_id", "form_id"),
        Index("ix_responses_form_submitted", "form_id", "submitted_at"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False
    )
    submitted_at: Mapped[datetime] = mapped_column(server_default=func.now())
    total_score: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)

    form: Mapped["Form"] = relationship(back_populates="responses")
    answers: Mapped[list["Answer"]] = relationship(back_populates="response", cascade="all, delete-orphan")

    def __repr__(self) -> str:
        return f"<Response form={self.form_id} score={self.total_score}>"
