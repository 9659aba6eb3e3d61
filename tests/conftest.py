from __future__ import annotations

import sys
from pathlib import Path

import pytest

TESTS_DIR = Path(__file__).resolve().parent
ROOT = TESTS_DIR.parent
for extra in (TESTS_DIR, ROOT / "src"):
    path_str = str(extra)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from fixtures import WorkspaceBuilder, make_question  # noqa: E402

from quiz_drill.quiz.models import Question  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep every test away from the real ~/.quiz-drill and QUIZ_DRILL_* env."""

    home = tmp_path / "drill-home"
    for name in (
        "QUIZ_DRILL_CONFIG",
        "QUIZ_DRILL_HIDE_ANSWERS",
        "QUIZ_DRILL_SHUFFLE",
        "QUIZ_DRILL_SEED",
        "QUIZ_DRILL_INTERFACE",
        "QUIZ_DRILL_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("QUIZ_DRILL_HOME", str(home))
    return home


@pytest.fixture
def workspace(tmp_path: Path) -> WorkspaceBuilder:
    """Provide a helper bound to pytest's per-test tmp directory."""

    return WorkspaceBuilder(tmp_path)


@pytest.fixture
def questions() -> list[Question]:
    """Three questions; Q1 answers B, Q2 answers C and D, Q3 answers A."""

    return [
        make_question(1, answer=("B",)),
        make_question(2, answer=("C", "D")),
        make_question(3, answer=("A",)),
    ]
