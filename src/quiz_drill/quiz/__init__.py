from .bank import (
    QuestionBankError,
    load_question_bank,
    resolve_bank_path,
    shuffle_questions,
)
from .console import DrillSessionResult, parse_session_command, run_drill_session
from .models import (
    Question,
    ValidationError,
    format_question_draft,
    option_label,
    parse_question,
    parse_question_draft,
)
from .session import OptionView, QuizSession, SessionView
from .view.app import DrillApp, QuestionView

__all__ = [
    "QuestionBankError",
    "load_question_bank",
    "resolve_bank_path",
    "shuffle_questions",
    "DrillSessionResult",
    "parse_session_command",
    "run_drill_session",
    "Question",
    "ValidationError",
    "format_question_draft",
    "option_label",
    "parse_question",
    "parse_question_draft",
    "OptionView",
    "QuizSession",
    "SessionView",
    "DrillApp",
    "QuestionView",
]
