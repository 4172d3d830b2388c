"""Answer values and their JSON text encoding.

Submitted answers and stored correct answers are either a single string
(short/long text, multiple choice, dropdown) or a list of strings (checkbox).
Both are kept as JSON text in the database; everything above the storage
boundary works with ``ScalarAnswer`` / ``MultiAnswer`` instead of raw JSON.
"""

import json
from dataclasses import dataclass
from typing import Any


class ValueDecodeError(ValueError):
    """Raised when a stored or submitted value has an unsupported shape."""


@dataclass(frozen=True)
class ScalarAnswer:
    text: str

    def as_text(self) -> str:
        return self.text

    def is_blank(self) -> bool:
        return not self.text.strip()

    def to_json(self) -> Any:
        return self.text


@dataclass(frozen=True)
class MultiAnswer:
    items: tuple[str, ...]

    def as_text(self) -> str:
        return ",".join(self.items)

    def is_blank(self) -> bool:
        return not any(item.strip() for item in self.items)

    def to_json(self) -> Any:
        return list(self.items)


AnswerValue = ScalarAnswer | MultiAnswer


def _scalar_text(raw: Any) -> str:
    if isinstance(raw, bool):
        return "true" if raw else "false"
    if isinstance(raw, (str, int, float)):
        return str(raw)
    raise ValueDecodeError(f"Unsupported answer value: {raw!r}")


def from_raw(raw: Any) -> AnswerValue | None:
    """Build an answer value from request/JSON data. ``None`` stays ``None``."""
    if raw is None:
        return None
    if isinstance(raw, (list, tuple)):
        return MultiAnswer(tuple(_scalar_text(item) for item in raw))
    return ScalarAnswer(_scalar_text(raw))


def dumps(value: AnswerValue) -> str:
    return json.dumps(value.to_json(), ensure_ascii=False)


def loads(text: str | None) -> AnswerValue | None:
    """Decode a stored value. Non-JSON legacy text is treated as a plain string."""
    if text is None:
        return None
    try:
        raw = json.loads(text)
    except json.JSONDecodeError:
        return ScalarAnswer(text)
    return from_raw(raw)


def matches(submitted: AnswerValue, correct: AnswerValue) -> bool:
    """Case-insensitive comparison of the two values' text forms."""
    return submitted.as_text().lower() == correct.as_text().lower()


def dump_options(options: list[str] | None) -> str | None:
    if options is None:
        return None
    return json.dumps(list(options), ensure_ascii=False)


def load_options(text: str | None) -> list[str] | None:
    if text is None:
        return None
    try:
        raw = json.loads(text)
    except json.JSONDecodeError:
        return [text]
    if not isinstance(raw, list):
        return [_scalar_text(raw)]
    return [_scalar_text(item) for item in raw]
