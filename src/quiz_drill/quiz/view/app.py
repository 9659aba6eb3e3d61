from __future__ import annotations

from rich.text import Text
from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.containers import Container, Horizontal, Vertical
from textual.widget import Widget
from textual.widgets import Button, Static, TextArea

from ..session import QuizSession, SessionView

OPTION_ID_PREFIX = "option-"


class DrillApp(App):
    """Full-screen drill over a :class:`QuizSession`.

    The stage holds either the active question or the JSON editor and is
    remounted after every intent; the footer mirrors the session flags.
    """

    CSS = """
#stage { height: 1fr; padding: 1 2; }
#question { text-style: bold; margin-bottom: 1; }
#options Button { width: 100%; margin-bottom: 1; }
#options Button.selected { background: $accent; }
#options Button.correct { background: $success; }
#options Button.wrong { background: $error; }
#notes { border: round $primary; padding: 0 1; }
#draft { height: 1fr; }
#edit-error { color: $error; }
#footer { height: auto; dock: bottom; }
"""
    BINDINGS = [
        Binding("n,right", "next", "Next"),
        Binding("p,left", "prev", "Prev"),
        Binding("s", "submit", "Submit"),
        Binding("h", "toggle_answers", "Answers"),
        Binding("e", "edit", "Edit"),
        Binding("ctrl+s", "save_edit", "Save", priority=True),
        Binding("escape", "cancel_edit", "Cancel", priority=True),
        Binding("q", "quit", "Quit"),
    ] + [
        Binding(str(position), f"toggle_nth({position - 1})", show=False)
        for position in range(1, 10)
    ]

    def __init__(self, session: QuizSession):
        super().__init__()
        self.session = session

    def compose(self) -> ComposeResult:
        with Container(id="stage"):
            yield self._stage_widget()
        with Horizontal(id="footer"):
            yield Button("Prev", id="prev")
            yield Button("Next", id="next")
            yield Button("Submit", id="submit")
            yield Button(self._answers_label(), id="answers")
            yield Button("Edit", id="edit")
            yield Static(self._progress_text(), id="progress")

    def on_mount(self) -> None:
        self._sync_footer()

    # Pure helpers: usable without a running app, refresh only when mounted.
    def next_question(self) -> int:
        index = self.session.go_next()
        self._refresh_stage()
        return index

    def prev_question(self) -> int:
        index = self.session.go_previous()
        self._refresh_stage()
        return index

    def toggle_option(self, label: str) -> bool:
        changed = self.session.toggle_option(label)
        if changed:
            self._refresh_stage()
        return changed

    def submit_answer(self) -> bool:
        if not self.session.view().can_submit:
            return False
        self.session.submit()
        self._refresh_stage()
        return True

    def toggle_answers(self) -> bool:
        hidden = self.session.toggle_hide_answers()
        self._refresh_stage()
        return hidden

    def begin_edit(self) -> None:
        self.session.begin_edit()
        self._refresh_stage()

    def save_edit(self) -> bool:
        saved = self.session.save_edit()
        self._refresh_stage()
        return saved

    def cancel_edit(self) -> None:
        self.session.cancel_edit()
        self._refresh_stage()

    def _stage_widget(self) -> Widget:
        view = self.session.view()
        if view.is_editing:
            return EditorView(view)
        return QuestionView(view)

    def _refresh_stage(self) -> None:
        if not self.is_running:
            return
        stage = self.query_one("#stage", Container)
        stage.remove_children()
        stage.mount(self._stage_widget())
        self._sync_footer()

    def _sync_footer(self) -> None:
        view = self.session.view()
        self.query_one("#prev", Button).disabled = not view.can_go_previous
        self.query_one("#next", Button).disabled = not view.can_go_next
        self.query_one("#submit", Button).disabled = not view.can_submit
        self.query_one("#edit", Button).disabled = view.is_editing
        self.query_one("#answers", Button).label = self._answers_label()
        self.query_one("#progress", Static).update(self._progress_text())

    def _answers_label(self) -> str:
        state = "ON" if self.session.hide_answers else "OFF"
        return f"Hide answers: {state}"

    def _progress_text(self) -> str:
        view = self.session.view()
        return f"Question {view.position} / {view.total}"

    def action_next(self) -> None:
        self.next_question()

    def action_prev(self) -> None:
        self.prev_question()

    def action_submit(self) -> None:
        self.submit_answer()

    def action_toggle_answers(self) -> None:
        self.toggle_answers()

    def action_edit(self) -> None:
        if not self.session.is_editing:
            self.begin_edit()

    def action_save_edit(self) -> None:
        if self.session.is_editing:
            self.save_edit()

    def action_cancel_edit(self) -> None:
        if self.session.is_editing:
            self.cancel_edit()

    def action_toggle_nth(self, position: int) -> None:
        labels = self.session.current.labels
        if self.session.is_editing or not 0 <= position < len(labels):
            return
        self.toggle_option(labels[position])

    def on_button_pressed(self, event: Button.Pressed) -> None:
        bid = getattr(event.button, "id", "") or ""
        if bid.startswith(OPTION_ID_PREFIX):
            self.action_toggle_nth(int(bid[len(OPTION_ID_PREFIX):]))
        elif bid == "submit":
            self.action_submit()
        elif bid == "next":
            self.action_next()
        elif bid == "prev":
            self.action_prev()
        elif bid == "answers":
            self.action_toggle_answers()
        elif bid == "edit":
            self.action_edit()
        elif bid == "save":
            self.action_save_edit()
        elif bid == "cancel":
            self.action_cancel_edit()

    def on_text_area_changed(self, event: TextArea.Changed) -> None:
        if self.session.is_editing:
            self.session.update_draft(event.text_area.text)


class QuestionView(Widget):
    """Renders the active question with one button per option."""

    def __init__(self, view: SessionView) -> None:
        super().__init__()
        self.snapshot = view

    def compose(self) -> ComposeResult:
        question = self.snapshot.question
        yield Static(Text(f"Q{question.id}", style="bold magenta"), id="qid")
        yield Static(Text(question.question), id="question")
        with Vertical(id="options"):
            for position, option in enumerate(self.snapshot.options):
                yield Button(
                    Text(option.text),
                    id=f"{OPTION_ID_PREFIX}{position}",
                    classes=f"option {option.state}",
                )
        if self.snapshot.show_feedback:
            yield Static(self.notes_text(), id="notes")

    def notes_text(self) -> Text:
        question = self.snapshot.question
        return Text.assemble(
            ("Vocabulary: ", "bold"),
            question.vocabulary or "-",
            "\n",
            ("Concept: ", "bold"),
            question.concept or "-",
        )


class EditorView(Widget):
    """Raw JSON editor for the active question."""

    def __init__(self, view: SessionView) -> None:
        super().__init__()
        self.snapshot = view

    def compose(self) -> ComposeResult:
        yield Static(
            Text(f"Editing Q{self.snapshot.question.id} (ctrl+s saves)"),
            id="editor-title",
        )
        yield TextArea(self.snapshot.draft, id="draft")
        yield Static(Text(self.snapshot.edit_error or ""), id="edit-error")
        with Horizontal(id="editor-actions"):
            yield Button("Save", id="save")
            yield Button("Cancel", id="cancel")
