import uuid
from datetime import datetime

from sqlalchemy import Boolean, Enum, ForeignKey, Index, Integer, Text, func
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from formcraft.core.database import Base

QUESTION_TYPES = ("short_text", "long_text", "multiple_choice", "checkbox", "dropdown")


class Question(Base):
    """One prompt within a form.

    ``options`` and ``correct_answer`` are JSON-encoded text; use
    ``formcraft.services.values`` to read and write them:
        options:        '["Red", "Green"]'
        correct_answer: '"4"' or '["a", "c"]'
    """

    __tablename__ = "questions"
    __table_args__ = (
        Index("ix_questions_form_id", "form_id"),
        Index("ix_questions_form_order", "form_id", "order"),
    )

    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    form_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("forms.id", ondelete="CASCADE"), nullable=False
    )
    type: Mapped[str] = mapped_column(
        Enum(*QUESTION_TYPES, name="question_type"),
        nullable=False,
        server_default="short_text",
    )
    text: Mapped[str] = mapped_column(Text, nullable=False)
    is_required: Mapped[bool] = mapped_column(Boolean, default=False, server_default="false", nullable=False)
    order: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    options: Mapped[str | None] = mapped_column(Text)
    points: Mapped[int] = mapped_column(Integer, default=0, server_default="0", nullable=False)
    correct_answer: Mapped[str | None] = mapped_column(Text)
    created_at: Mapped[datetime] = mapped_column(server_default=func.now())

    form: Mapped["Form"] = relationship(back_populates="questions")

    def __repr__(self) -> str:
        return f"<Question {self.order}: {self.text[:30]} ({self.type})>"
