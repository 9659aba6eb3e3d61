"""Rich-powered console loop driving a :class:`QuizSession`.

Each iteration renders the session projection, reads one line from an input
provider and applies it as a single intent. While the session is in edit mode
lines accumulate into the draft until ``:save`` or ``:cancel``.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Callable, Literal

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.syntax import Syntax
from rich.table import Table
from rich.text import Text

from .models import Question
from .session import OptionState, QuizSession, SessionView

InputProvider = Callable[[], str]
ExitAction = Literal["quit", "empty"]
CommandType = Literal[
    "next", "prev", "submit", "toggle_answers", "edit", "quit", "select"
]

SAVE_COMMAND = ":save"
CANCEL_COMMAND = ":cancel"

_OPTION_STYLES: dict[OptionState, str] = {
    "correct": "bold green",
    "wrong": "bold red",
    "selected": "bold cyan",
    "neutral": "",
}
_OPTION_MARKERS: dict[OptionState, str] = {
    "correct": "✓",
    "wrong": "✗",
    "selected": "•",
    "neutral": " ",
}

_LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionCommand:
    """Normalized user command parsed from console input."""

    type: CommandType
    label: str | None = None


@dataclass(frozen=True)
class DrillSessionResult:
    """Return value from ``run_drill_session``."""

    session: QuizSession | None
    exit_action: ExitAction


_KEYWORDS: dict[str, CommandType] = {
    "n": "next",
    "next": "next",
    "p": "prev",
    "prev": "prev",
    "previous": "prev",
    "s": "submit",
    "submit": "submit",
    "h": "toggle_answers",
    "hide": "toggle_answers",
    "toggle": "toggle_answers",
    "e": "edit",
    "edit": "edit",
    "q": "quit",
    "quit": "quit",
    "exit": "quit",
}


def parse_session_command(
    raw: str | None, labels: Sequence[str] = ()
) -> SessionCommand | None:
    """Parse a browsing-mode input line.

    A token naming one of ``labels`` (case-insensitive) selects that option,
    so a question with an option "E" shadows the ``e`` shortcut and the long
    keyword must be used instead. Other tokens are keywords or, failing that,
    treated as an unknown label.
    """

    if raw is None:
        return None
    text = raw.strip()
    if not text or len(text.split()) > 1:
        return None
    if text.upper() in {label.upper() for label in labels}:
        return SessionCommand("select", text)
    keyword = _KEYWORDS.get(text.lower())
    if keyword is not None:
        return SessionCommand(keyword)
    return SessionCommand("select", text)


def run_drill_session(
    questions: Sequence[Question],
    console: Console,
    input_provider: InputProvider,
    *,
    hide_answers: bool = True,
    logger: logging.Logger | None = None,
) -> DrillSessionResult:
    """Run an interactive drill over ``questions`` until the user quits."""

    log = logger or _LOGGER
    if not questions:
        console.print(
            Panel(
                "Question bank is empty.",
                title="Quiz Drill",
                border_style="yellow",
            )
        )
        return DrillSessionResult(None, "empty")

    session = QuizSession(questions, hide_answers=hide_answers, logger=log)
    draft_lines: list[str] = []
    log.info("Drill started", extra={"count": session.total})

    while True:
        if session.is_editing:
            _render_editor(console, session.view(), pending=draft_lines)
        else:
            _render_question(console, session.view())
        try:
            raw = input_provider()
        except (EOFError, KeyboardInterrupt, StopIteration):
            console.print("\n[bold yellow]Session interrupted.[/]")
            break

        if session.is_editing:
            _apply_edit_line(raw, session, console, draft_lines)
            continue

        command = parse_session_command(raw, session.current.labels)
        if command is None:
            console.print("[red]Unrecognized command. Try again.[/]")
            continue
        if command.type == "quit":
            console.print("\n[bold yellow]Ending drill.[/]")
            break
        if command.type == "edit":
            draft_lines.clear()
        _apply_command(command, session, console)

    log.info("Drill finished", extra={"index": session.current_index})
    return DrillSessionResult(session, "quit")


def _apply_command(
    command: SessionCommand,
    session: QuizSession,
    console: Console,
) -> None:
    if command.type == "next":
        session.go_next()
    elif command.type == "prev":
        session.go_previous()
    elif command.type == "submit":
        if session.view().can_submit:
            session.submit()
        elif session.is_submitted:
            console.print("[yellow]Already submitted.[/]")
        else:
            console.print("[red]Select at least one option first.[/]")
    elif command.type == "toggle_answers":
        session.toggle_hide_answers()
    elif command.type == "edit":
        session.begin_edit()
    elif command.type == "select" and command.label:
        _select(command.label, session, console)


def _select(raw_label: str, session: QuizSession, console: Console) -> None:
    labels = {label.upper(): label for label in session.current.labels}
    label = labels.get(raw_label.upper())
    if label is None:
        console.print(
            "[red]'%s' is not an option for this question.[/red]"
            % escape(raw_label)
        )
        return
    if not session.toggle_option(label):
        console.print("[yellow]Answer already submitted.[/]")


def _apply_edit_line(
    raw: str,
    session: QuizSession,
    console: Console,
    draft_lines: list[str],
) -> None:
    command = raw.strip().lower()
    if command == CANCEL_COMMAND:
        session.cancel_edit()
        draft_lines.clear()
        console.print("[yellow]Edit cancelled.[/]")
        return
    if command == SAVE_COMMAND:
        if draft_lines:
            session.update_draft("\n".join(draft_lines))
        if session.save_edit():
            console.print("[green]Question updated.[/]")
        draft_lines.clear()
        return
    draft_lines.append(raw)


def _render_question(console: Console, view: SessionView) -> None:
    question = view.question
    header = Text.assemble(
        (f"Question {view.position}", "bold cyan"),
        (f" / {view.total}", "dim"),
        (f"  Q{question.id}", "magenta"),
    )
    console.print()
    console.rule(header)
    console.print(Text(question.question, style="bold"))

    table = Table(show_header=False, box=box.SIMPLE, expand=True)
    table.add_column("Mark", justify="center", width=3)
    table.add_column("Option")
    for option in view.options:
        table.add_row(
            _OPTION_MARKERS[option.state],
            Text(option.text, style=_OPTION_STYLES[option.state]),
        )
    console.print(table)

    if view.show_feedback:
        notes = Table.grid(padding=(0, 1))
        notes.add_column(style="bold")
        notes.add_column()
        notes.add_row("Vocabulary:", Text(question.vocabulary or "-"))
        notes.add_row("Concept:", Text(question.concept or "-"))
        console.print(Panel(notes, title="Notes", border_style="blue"))

    visibility = "hidden" if view.hide_answers else "shown"
    console.print(
        Text(
            f"Answers {visibility} | Commands: option label, n/next, p/prev, "
            "s/submit, h/hide, e/edit, q/quit",
            style="dim",
        )
    )


def _render_editor(
    console: Console, view: SessionView, *, pending: Sequence[str]
) -> None:
    if pending:
        return
    console.print()
    console.rule(Text(f"Editing Q{view.question.id}", style="bold yellow"))
    console.print(Syntax(view.draft, "json", line_numbers=True))
    console.print(
        Text(
            f"Enter the replacement JSON, then {SAVE_COMMAND} to apply or "
            f"{CANCEL_COMMAND} to discard. {SAVE_COMMAND} with no input "
            "keeps the draft shown above.",
            style="dim",
        )
    )
    if view.edit_error:
        console.print(
            Panel(view.edit_error, title="Invalid draft", border_style="red")
        )
