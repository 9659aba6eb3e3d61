"""In-memory drill session state and its read-only render projection.

`QuizSession` keeps every piece of interaction state in one object: the
shuffled question list, the active position, the selection for the active
question, the submitted flag, the global answer-visibility toggle and the raw
edit sub-state. Front ends (the Rich console loop and the Textual app) only
call the intent methods and render :meth:`QuizSession.view`.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any, Literal

from .models import (
    Question,
    ValidationError,
    format_question_draft,
    option_label,
    parse_question_draft,
)

OptionState = Literal["correct", "wrong", "selected", "neutral"]

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class OptionView:
    """An option as rendered: its label, full text and visual state."""

    label: str
    text: str
    state: OptionState


@dataclass(frozen=True)
class SessionView:
    """Read-only snapshot handed to front ends for one render."""

    index: int
    total: int
    question: Question
    options: tuple[OptionView, ...]
    selected: tuple[str, ...]
    is_submitted: bool
    hide_answers: bool
    is_editing: bool
    draft: str
    edit_error: str | None
    can_go_previous: bool
    can_go_next: bool
    can_submit: bool

    @property
    def show_feedback(self) -> bool:
        return self.is_submitted

    @property
    def position(self) -> int:
        return self.index + 1


class QuizSession:
    """Mutable drill state driven by discrete user intents.

    ``hide_answers`` survives navigation; everything scoped to the active
    question (selection, submission, edit draft) is reset whenever the index
    actually changes.
    """

    def __init__(
        self,
        questions: Sequence[Question],
        *,
        hide_answers: bool = True,
        logger: logging.Logger | None = None,
    ) -> None:
        if not questions:
            raise ValueError("A drill session needs at least one question.")
        self.questions: list[Question] = list(questions)
        self.current_index = 0
        self.selected_options: list[str] = []
        self.hide_answers = hide_answers
        self.is_submitted = not hide_answers
        self.is_editing = False
        self.edit_draft = ""
        self.edit_error: str | None = None
        self._logger = logger or _LOGGER

    @property
    def total(self) -> int:
        return len(self.questions)

    @property
    def current(self) -> Question:
        return self.questions[self.current_index]

    # Navigation -------------------------------------------------------

    def go_previous(self) -> int:
        return self.go_to(max(0, self.current_index - 1))

    def go_next(self) -> int:
        return self.go_to(min(self.total - 1, self.current_index + 1))

    def go_to(self, index: int) -> int:
        if not 0 <= index < self.total:
            raise IndexError(
                f"Question index {index} out of range 0..{self.total - 1}."
            )
        if index == self.current_index:
            return index
        self.current_index = index
        self.selected_options = []
        self.is_editing = False
        self.edit_draft = ""
        self.edit_error = None
        self.is_submitted = not self.hide_answers
        self._logger.debug(
            "Moved to question",
            extra={"index": index, "question_id": self.current.id},
        )
        return index

    # Answering --------------------------------------------------------

    def toggle_option(self, label: str) -> bool:
        """Add or remove ``label`` from the selection; locked once submitted."""

        if self.is_submitted:
            return False
        if label in self.selected_options:
            self.selected_options.remove(label)
        else:
            self.selected_options.append(label)
        return True

    def toggle_option_text(self, option: str) -> bool:
        return self.toggle_option(option_label(option))

    def submit(self) -> None:
        self.is_submitted = True
        self._logger.info(
            "Submitted answer",
            extra={
                "question_id": self.current.id,
                "selected": list(self.selected_options),
                "correct": self.selection_is_correct(),
            },
        )

    def toggle_hide_answers(self) -> bool:
        self.hide_answers = not self.hide_answers
        if not self.hide_answers:
            self.is_submitted = True
        self._logger.debug(
            "Toggled answer visibility",
            extra={"hide_answers": self.hide_answers},
        )
        return self.hide_answers

    # Evaluation -------------------------------------------------------

    def is_correct(self, label: str) -> bool:
        return self.current.is_correct(label)

    def is_selected(self, label: str) -> bool:
        return label in self.selected_options

    def classify(self, label: str) -> OptionState:
        correct = self.is_correct(label)
        selected = self.is_selected(label)
        if not self.hide_answers and correct:
            return "correct"
        if self.hide_answers and self.is_submitted:
            if correct:
                return "correct"
            if selected:
                return "wrong"
        if selected:
            return "selected"
        return "neutral"

    def selection_is_correct(self) -> bool:
        return set(self.selected_options) == set(self.current.answer)

    # Raw edit workflow ------------------------------------------------

    def begin_edit(self) -> str:
        self.edit_draft = format_question_draft(self.current)
        self.edit_error = None
        self.is_editing = True
        return self.edit_draft

    def update_draft(self, text: str) -> None:
        self.edit_draft = text

    def save_edit(self) -> bool:
        """Replace the active question with the parsed draft.

        On a :class:`ValidationError` the session stays in edit mode with the
        message in ``edit_error`` and the question list untouched.
        """

        if not self.is_editing:
            return False
        try:
            replacement = parse_question_draft(self.edit_draft)
        except ValidationError as exc:
            self.edit_error = str(exc)
            self._logger.warning(
                "Rejected question edit",
                extra={"question_id": self.current.id, "error": str(exc)},
            )
            return False
        previous_id = self.current.id
        self.questions[self.current_index] = replacement
        self.is_editing = False
        self.edit_draft = ""
        self.edit_error = None
        self._logger.info(
            "Saved question edit",
            extra={"question_id": replacement.id, "previous_id": previous_id},
        )
        return True

    def cancel_edit(self) -> None:
        self.is_editing = False
        self.edit_draft = ""
        self.edit_error = None

    # Projection -------------------------------------------------------

    def view(self) -> SessionView:
        question = self.current
        options = tuple(
            OptionView(label=label, text=text, state=self.classify(label))
            for text, label in zip(question.options, question.labels)
        )
        return SessionView(
            index=self.current_index,
            total=self.total,
            question=question,
            options=options,
            selected=tuple(self.selected_options),
            is_submitted=self.is_submitted,
            hide_answers=self.hide_answers,
            is_editing=self.is_editing,
            draft=self.edit_draft,
            edit_error=self.edit_error,
            can_go_previous=self.current_index > 0,
            can_go_next=self.current_index < self.total - 1,
            can_submit=not self.is_submitted and bool(self.selected_options),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "questions": [question.to_dict() for question in self.questions],
            "current_index": self.current_index,
            "selected_options": list(self.selected_options),
            "is_submitted": self.is_submitted,
            "hide_answers": self.hide_answers,
            "is_editing": self.is_editing,
            "edit_draft": self.edit_draft,
            "edit_error": self.edit_error,
        }
