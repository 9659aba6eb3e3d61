"""Loading and shuffling of question banks."""

from __future__ import annotations

import json
import logging
import random
from pathlib import Path
from typing import List, Optional, Sequence

from .models import Question, ValidationError, parse_question

BANK_SUFFIXES = (".json", ".jsonl")

_LOGGER = logging.getLogger(__name__)


class QuestionBankError(RuntimeError):
    """Raised when a question bank cannot be located, read or validated."""


def resolve_bank_path(name: str, *, banks_dir: Optional[Path] = None) -> Path:
    """Find a bank by explicit path or by name inside the workspace.

    ``name`` is tried as given first; inside ``banks_dir`` the bare name and
    then each of :data:`BANK_SUFFIXES` appended to it are tried in order.
    """

    direct = Path(name).expanduser()
    if direct.is_file():
        return direct.resolve()
    if banks_dir is not None:
        for candidate in _bank_candidates(banks_dir, name):
            if candidate.is_file():
                return candidate.resolve()
    raise QuestionBankError(f"Question bank not found: {name}")


def _bank_candidates(banks_dir: Path, name: str) -> List[Path]:
    base = banks_dir / name
    return [base] + [base.with_name(base.name + ext) for ext in BANK_SUFFIXES]


def load_question_bank(path: Path) -> List[Question]:
    """Read and validate every question stored at ``path``.

    ``.jsonl`` files hold one record per line. Anything else is read as JSON:
    either ``{"questions": [...]}`` or a bare array of records.
    """

    path = Path(path)
    if path.suffix.lower() == ".jsonl":
        records = _read_jsonl(path)
    else:
        records = _read_json(path)

    questions: List[Question] = []
    for position, record in enumerate(records, start=1):
        try:
            questions.append(parse_question(record))
        except ValidationError as exc:
            raise QuestionBankError(
                f"{path}: record #{position} is invalid: {exc}"
            ) from exc
    _LOGGER.info(
        "Loaded question bank",
        extra={"path": str(path), "count": len(questions)},
    )
    return questions


def shuffle_questions(
    questions: Sequence[Question], *, seed: Optional[int] = None
) -> List[Question]:
    """Return a shuffled copy; ``seed`` makes the order reproducible."""

    shuffled = list(questions)
    random.Random(seed).shuffle(shuffled)
    return shuffled


def _read_text(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise QuestionBankError(f"Question bank not found: {path}") from exc
    except UnicodeDecodeError as exc:
        raise QuestionBankError(f"{path} is not UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise QuestionBankError(f"Cannot read question bank {path}: {exc}") from exc


def _read_json(path: Path) -> List[object]:
    try:
        data = json.loads(_read_text(path))
    except json.JSONDecodeError as exc:
        raise QuestionBankError(f"{path} is not valid JSON: {exc}") from exc
    except RecursionError as exc:
        raise QuestionBankError(f"{path} is nested too deeply to parse.") from exc
    if isinstance(data, dict):
        data = data.get("questions")
    if not isinstance(data, list):
        raise QuestionBankError(
            f"{path} must hold a list of questions or an object with a "
            "'questions' list."
        )
    return data


def _read_jsonl(path: Path) -> List[object]:
    records: List[object] = []
    for lineno, line in enumerate(_read_text(path).splitlines(), start=1):
        line = line.strip()
        if not line:
            continue
        try:
            records.append(json.loads(line))
        except json.JSONDecodeError as exc:
            raise QuestionBankError(
                f"{path}:{lineno} is not valid JSON: {exc}"
            ) from exc
        except RecursionError as exc:
            raise QuestionBankError(
                f"{path}:{lineno} is nested too deeply to parse."
            ) from exc
    return records
