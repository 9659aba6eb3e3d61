"""Question records and the parse-and-validate boundary for raw drafts."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

__all__ = [
    "LABEL_DELIMITER",
    "Question",
    "ValidationError",
    "format_question_draft",
    "option_label",
    "parse_question",
    "parse_question_draft",
]

LABEL_DELIMITER = "."

_REQUIRED_FIELDS = ("id", "question", "answer")


class ValidationError(ValueError):
    """Raised when raw question data cannot become a :class:`Question`."""


@dataclass(frozen=True)
class Question:
    """A single multiple-choice item.

    ``options`` keep their display prefix (``"A. ..."``); ``answer`` holds the
    labels of every correct option, so multi-answer questions are supported.
    """

    id: int
    question: str
    options: tuple[str, ...]
    answer: tuple[str, ...]
    vocabulary: str = ""
    concept: str = ""

    @property
    def labels(self) -> tuple[str, ...]:
        return tuple(option_label(option) for option in self.options)

    def is_correct(self, label: str) -> bool:
        return label in self.answer

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "question": self.question,
            "options": list(self.options),
            "answer": list(self.answer),
            "vocabulary": self.vocabulary,
            "concept": self.concept,
        }


def option_label(option: str, delimiter: str = LABEL_DELIMITER) -> str:
    """Return the label prefix of ``option`` (``"A. Paris"`` -> ``"A"``)."""

    return option.split(delimiter, 1)[0].strip()


def format_question_draft(question: Question) -> str:
    return json.dumps(question.to_dict(), indent=2, ensure_ascii=False)


def parse_question_draft(text: str) -> Question:
    """Parse an edited JSON draft into a :class:`Question`.

    Raises :class:`ValidationError` when the text is not JSON, is not a JSON
    object, or fails :func:`parse_question`.
    """

    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ValidationError(f"Draft is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise ValidationError("Draft is nested too deeply to parse.") from exc
    return parse_question(data)


def parse_question(data: object) -> Question:
    """Validate a decoded mapping and build a :class:`Question`.

    ``id``, ``question`` and ``answer`` must be present and non-empty; an id
    of ``0`` counts as missing.
    """

    if not isinstance(data, Mapping):
        raise ValidationError(
            "Question data must be a JSON object, got "
            f"{type(data).__name__}."
        )

    missing = [name for name in _REQUIRED_FIELDS if not data.get(name)]
    if missing:
        raise ValidationError(
            "Missing required field(s): {0}. Every question needs id, "
            "question and answer.".format(", ".join(missing))
        )

    identifier = data["id"]
    if isinstance(identifier, bool) or not isinstance(identifier, int):
        raise ValidationError("Field 'id' must be an integer.")

    return Question(
        id=identifier,
        question=_require_text(data, "question"),
        options=_require_text_list(data.get("options", []), "options"),
        answer=_parse_answer(data["answer"]),
        vocabulary=_optional_text(data, "vocabulary"),
        concept=_optional_text(data, "concept"),
    )


def _parse_answer(value: object) -> tuple[str, ...]:
    if isinstance(value, str):
        value = [value]
    labels = _require_text_list(value, "answer")
    if not labels:
        raise ValidationError("Field 'answer' must list at least one label.")
    return labels


def _require_text(data: Mapping[str, object], name: str) -> str:
    value = data[name]
    if not isinstance(value, str):
        raise ValidationError(f"Field '{name}' must be a string.")
    return value


def _optional_text(data: Mapping[str, object], name: str) -> str:
    value = data.get(name)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ValidationError(f"Field '{name}' must be a string.")
    return value


def _require_text_list(value: object, name: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(
        isinstance(item, str) for item in value
    ):
        raise ValidationError(f"Field '{name}' must be a list of strings.")
    return tuple(value)
