"""CLI entry points for running and checking drills."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from rich import box
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from quiz_drill.core import config_templates
from quiz_drill.core import workspace as workspace_mod
from quiz_drill.core.config_templates import ConfigTemplateError
from quiz_drill.core.logging import configure_logger
from quiz_drill.core.workspace import WorkspaceError

from .bank import (
    QuestionBankError,
    load_question_bank,
    resolve_bank_path,
    shuffle_questions,
)
from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    DrillConfig,
    DrillConfigError,
    InterfaceMode,
    load_config,
)
from .console import run_drill_session
from .models import Question
from .session import QuizSession
from .view.app import DrillApp

LOGGER_NAME = "quiz_drill"
LOG_FILENAME = "drill.log"


def _build_start_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drill start",
        description="Run a multiple-choice drill over a question bank.",
        epilog=(
            "BANK is a path to a .json/.jsonl file or the name of a bank in "
            "the workspace banks directory."
        ),
    )
    parser.add_argument("bank", help="Question bank path or workspace name.")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument(
        "--console",
        dest="interface",
        action="store_const",
        const=InterfaceMode.CONSOLE,
        help="Use the line-based Rich console instead of the TUI.",
    )
    mode.add_argument(
        "--tui",
        dest="interface",
        action="store_const",
        const=InterfaceMode.TUI,
        help="Use the full-screen Textual interface.",
    )
    parser.add_argument(
        "--show-answers",
        dest="hide_answers",
        action="store_false",
        help="Reveal correct options from the start.",
    )
    parser.add_argument(
        "--hide-answers",
        dest="hide_answers",
        action="store_true",
        help="Hide correct options until a question is submitted.",
    )
    parser.add_argument(
        "--shuffle", dest="shuffle", action="store_true", help="Shuffle once."
    )
    parser.add_argument(
        "--no-shuffle",
        dest="shuffle",
        action="store_false",
        help="Keep the bank order.",
    )
    parser.add_argument("--seed", type=int, help="Seed for the shuffle.")
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to a drill.toml (defaults to the workspace config dir).",
    )
    parser.add_argument(
        "--workspace", type=Path, help="Override the workspace root."
    )
    parser.add_argument(
        "--log-level", help="Logging level for the run (defaults to INFO)."
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        default=None,
        help="Mirror log records to stderr.",
    )
    parser.set_defaults(interface=None, hide_answers=None, shuffle=None)
    return parser


def start_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_start_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    overrides = ConfigOverrides(
        hide_answers=args.hide_answers,
        shuffle=args.shuffle,
        seed=args.seed,
        interface=args.interface,
        log_level=args.log_level,
        verbose=args.verbose,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            workspace_path=args.workspace,
        )
    except (DrillConfigError, WorkspaceError) as exc:
        parser.error(str(exc))

    config = load_result.config
    logger, log_path = configure_logger(
        LOGGER_NAME,
        log_dir=load_result.layout.path_for("logs"),
        level=config.log_level,
        verbose=config.verbose,
        filename=LOG_FILENAME,
    )
    logger.debug(
        "drill start invoked",
        extra={"bank": args.bank, "interface": config.interface.value},
    )

    try:
        bank_path = resolve_bank_path(
            args.bank, banks_dir=load_result.layout.path_for("banks")
        )
        questions = load_question_bank(bank_path)
    except QuestionBankError as exc:
        logger.error("Unable to load question bank", extra={"error": str(exc)})
        sys.stderr.write(f"{exc}\n")
        return 1

    if not questions:
        sys.stderr.write(f"Question bank is empty: {bank_path}\n")
        return 1
    if config.shuffle:
        questions = shuffle_questions(questions, seed=config.seed)

    if config.interface is InterfaceMode.CONSOLE:
        _run_console(questions, config, logger)
    else:
        _run_tui(questions, config, logger)
    sys.stdout.write(f"Log file: {log_path}\n")
    return 0


def _run_console(
    questions: List[Question], config: DrillConfig, logger: logging.Logger
) -> None:
    console = Console()
    run_drill_session(
        questions,
        console,
        lambda: console.input("[bold]> [/]"),
        hide_answers=config.hide_answers,
        logger=logger,
    )


def _run_tui(
    questions: List[Question], config: DrillConfig, logger: logging.Logger
) -> None:
    session = QuizSession(
        questions, hide_answers=config.hide_answers, logger=logger
    )
    DrillApp(session).run()


def _build_check_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="drill check",
        description="Validate a question bank and list its questions.",
    )
    parser.add_argument("bank", help="Question bank path or workspace name.")
    parser.add_argument(
        "--workspace", type=Path, help="Override the workspace root."
    )
    return parser


def check_main(
    argv: Optional[Sequence[str]] = None, *, console: Optional[Console] = None
) -> int:
    parser = _build_check_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    console = console or Console()

    try:
        layout = workspace_mod.ensure_workspace(
            path=args.workspace, create=False
        )
        bank_path = resolve_bank_path(
            args.bank, banks_dir=layout.path_for("banks")
        )
        questions = load_question_bank(bank_path)
    except (QuestionBankError, WorkspaceError) as exc:
        console.print(f"[red]{escape(str(exc))}[/]")
        return 1

    table = Table(title=str(bank_path), box=box.SIMPLE, expand=True)
    table.add_column("ID", justify="right")
    table.add_column("Question", overflow="fold")
    table.add_column("Options", justify="right")
    table.add_column("Answer")
    for question in questions:
        table.add_row(
            str(question.id),
            question.question,
            str(len(question.options)),
            ", ".join(question.answer),
        )
    console.print(table)

    warnings = _unmatched_answers(questions)
    for message in warnings:
        console.print(f"[yellow]{escape(message)}[/]")
    console.print(f"{len(questions)} question(s) OK.")
    return 0


def _unmatched_answers(questions: Sequence[Question]) -> List[str]:
    messages: List[str] = []
    for question in questions:
        missing = [
            label for label in question.answer if label not in question.labels
        ]
        if missing:
            messages.append(
                "Q{0}: answer label(s) {1} match no option.".format(
                    question.id, ", ".join(missing)
                )
            )
    return messages


def config_main(argv: Optional[Sequence[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="drill config",
        description="Manage drill configuration files.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)
    init_parser = subparsers.add_parser(
        "init", help=f"Write the default {CONFIG_FILENAME} template."
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help="Destination (defaults to the workspace config directory).",
    )
    init_parser.add_argument(
        "--workspace", type=Path, help="Override the workspace root."
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite an existing config.",
    )
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        target = _resolve_config_target(args)
    except WorkspaceError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1

    template = config_templates.get_template("drill")
    try:
        written = template.write(target, overwrite=args.force)
    except ConfigTemplateError as exc:
        sys.stderr.write(f"{exc}\n")
        return 1
    sys.stdout.write(f"Wrote drill config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate
    layout = workspace_mod.ensure_workspace(path=args.workspace)
    return layout.path_for("config") / CONFIG_FILENAME
