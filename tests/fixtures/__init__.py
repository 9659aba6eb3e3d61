"""Shared testing fixtures for the quiz_drill test suite."""

from .questions import make_question, sample_records, write_bank  # noqa: F401
from .workspace import WorkspaceBuilder  # noqa: F401

__all__ = [
    "WorkspaceBuilder",
    "make_question",
    "sample_records",
    "write_bank",
]
