"""Seed the database with a demo account, a sample survey and a sample quiz."""

from formcraft.core.config import settings
from formcraft.core.database import SessionLocal
from formcraft.models import Form, User
from formcraft.schemas.forms import FormDefinition
from formcraft.services.auth import create_user, get_user_by_email
from formcraft.services.forms import publish_form

SEED_FORMS = [
    {
        "title": "Event Feedback",
        "description": "Tell us how the meetup went.",
        "isQuiz": False,
        "questions": [
            {"questionText": "Your name", "type": "SHORT_TEXT", "isRequired": False},
            {
                "questionText": "How would you rate the event?",
                "type": "DROPDOWN",
                "isRequired": True,
                "options": ["Poor", "Okay", "Good", "Great"],
            },
            {
                "questionText": "Which talks did you attend?",
                "type": "CHECKBOX",
                "isRequired": False,
                "options": ["Keynote", "Workshops", "Lightning talks"],
            },
            {"questionText": "Anything else?", "type": "LONG_TEXT", "isRequired": False},
        ],
    },
    {
        "title": "Arithmetic Quiz",
        "description": "Warm-up questions.",
        "isQuiz": True,
        "questions": [
            {
                "questionText": "2 + 2 = ?",
                "type": "SHORT_TEXT",
                "isRequired": True,
                "points": 10,
                "correctAnswer": "4",
            },
            {
                "questionText": "Which of these is a prime number?",
                "type": "MULTIPLE_CHOICE",
                "isRequired": True,
                "options": ["4", "6", "7", "9"],
                "points": 5,
                "correctAnswer": "7",
            },
        ],
    },
]


def _get_or_create_seed_user(db) -> User:
    user = get_user_by_email(db, settings.SEED_USER_EMAIL)
    if user is None:
        user = create_user(
            db,
            email=settings.SEED_USER_EMAIL,
            password=settings.SEED_USER_PASSWORD,
            name="Demo Creator",
        )
    return user


def seed_forms() -> list[Form]:
    """Publish the seed forms for the demo account. Returns created forms."""
    db = SessionLocal()
    try:
        user = _get_or_create_seed_user(db)
        created = [
            publish_form(db, user.id, FormDefinition.model_validate(data))
            for data in SEED_FORMS
        ]
        for f in created:
            db.refresh(f)
        return created
    finally:
        db.close()


if __name__ == "__main__":
    forms = seed_forms()
    for f in forms:
        print(f"Created: {f.title} (id={f.id}, quiz={f.is_quiz})")
    print(f"\nSeeded {len(forms)} forms for {settings.SEED_USER_EMAIL}.")
