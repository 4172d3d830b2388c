from formcraft.models.answer import Answer
from formcraft.models.form import Form
from formcraft.models.question import Question
from formcraft.models.response import Response
from formcraft.models.user import User

__all__ = [
    "Answer",
    "Form",
    "Question",
    "Response",
    "User",
]
