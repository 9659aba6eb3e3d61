from __future__ import annotations

import json

import pytest

from fixtures import sample_records, write_bank

from quiz_drill.quiz import bank
from quiz_drill.quiz.bank import QuestionBankError


def test_load_question_bank_reads_wrapped_json(tmp_path):
    path = write_bank(tmp_path / "oracle.json")

    questions = bank.load_question_bank(path)

    assert [q.id for q in questions] == [1, 2, 3]
    assert questions[1].answer == ("C", "D")


def test_load_question_bank_reads_bare_list(workspace):
    path = workspace.write("bare.json", json.dumps(sample_records()))

    questions = bank.load_question_bank(path)

    assert len(questions) == 3


def test_load_question_bank_reads_jsonl(workspace):
    path = workspace.write_jsonl("bank.jsonl", sample_records())

    questions = bank.load_question_bank(path)

    assert [q.id for q in questions] == [1, 2, 3]


def test_load_question_bank_reports_invalid_record_position(tmp_path):
    records = sample_records()
    del records[1]["answer"]
    path = write_bank(tmp_path / "broken.json", records)

    with pytest.raises(QuestionBankError) as exc_info:
        bank.load_question_bank(path)

    message = str(exc_info.value)
    assert "record #2" in message
    assert "answer" in message


def test_load_question_bank_reports_bad_json(workspace):
    path = workspace.write("bad.json", "{nope")
    with pytest.raises(QuestionBankError) as exc_info:
        bank.load_question_bank(path)
    assert "not valid JSON" in str(exc_info.value)


def test_load_question_bank_reports_bad_jsonl_line(workspace):
    path = workspace.write("bad.jsonl", '{"id": 1}\n{nope\n')
    with pytest.raises(QuestionBankError) as exc_info:
        bank.load_question_bank(path)
    assert "bad.jsonl:2" in str(exc_info.value)


def test_load_question_bank_rejects_unexpected_shape(workspace):
    path = workspace.write("shape.json", json.dumps({"items": []}))
    with pytest.raises(QuestionBankError):
        bank.load_question_bank(path)


def test_load_question_bank_missing_file(tmp_path):
    with pytest.raises(QuestionBankError) as exc_info:
        bank.load_question_bank(tmp_path / "missing.json")
    assert "not found" in str(exc_info.value)


def test_shuffle_questions_is_seeded_copy(questions):
    first = bank.shuffle_questions(questions, seed=7)
    second = bank.shuffle_questions(questions, seed=7)

    assert first == second
    assert sorted(q.id for q in first) == [1, 2, 3]
    assert [q.id for q in questions] == [1, 2, 3]
    assert first is not questions


def test_resolve_bank_path_prefers_direct_path(tmp_path):
    path = write_bank(tmp_path / "direct.json")
    assert bank.resolve_bank_path(str(path)) == path.resolve()


@pytest.mark.parametrize("filename", ["oracle", "oracle.json", "oracle.jsonl"])
def test_resolve_bank_path_searches_banks_dir(tmp_path, monkeypatch, filename):
    banks_dir = tmp_path / "banks"
    target = banks_dir / filename
    target.parent.mkdir(parents=True)
    target.write_text("[]", encoding="utf-8")
    monkeypatch.chdir(tmp_path)

    resolved = bank.resolve_bank_path("oracle", banks_dir=banks_dir)

    assert resolved == target.resolve()


def test_resolve_bank_path_not_found(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    with pytest.raises(QuestionBankError):
        bank.resolve_bank_path("ghost", banks_dir=tmp_path / "banks")


def test_load_question_bank_skips_blank_jsonl_lines(workspace):
    record = json.dumps(sample_records()[0])
    path = workspace.write("gaps.jsonl", f"\n{record}\n\n   \n")

    questions = bank.load_question_bank(path)

    assert [q.id for q in questions] == [1]


def test_load_question_bank_rejects_non_utf8_bytes(workspace):
    path = workspace.write(
        "latin.json", b'[{"id": 1, "question": "\xff", "answer": ["A"]}]'
    )

    with pytest.raises(QuestionBankError) as exc_info:
        bank.load_question_bank(path)

    assert "not UTF-8" in str(exc_info.value)


@pytest.mark.parametrize("filename", ["deep.json", "deep.jsonl"])
def test_load_question_bank_rejects_deeply_nested_json(workspace, filename):
    path = workspace.write(filename, "[" * 200_000 + "\n")

    with pytest.raises(QuestionBankError) as exc_info:
        bank.load_question_bank(path)

    assert "nested too deeply" in str(exc_info.value)
