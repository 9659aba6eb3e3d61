from __future__ import annotations

from types import SimpleNamespace

import pytest

from quiz_drill.quiz.session import QuizSession
from quiz_drill.quiz.view import app as va


class StubContainer:
    def __init__(self, *_, **kwargs):
        self.id = kwargs.get("id")
        self.children = []

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> bool:
        return False

    def remove_children(self) -> None:
        self.children.clear()

    def mount(self, widget) -> None:
        self.children.append(widget)


class StubStatic:
    def __init__(self, content="", id: str | None = None):
        self.content = content
        self.id = id

    def update(self, new) -> None:
        self.content = new


class StubButton:
    def __init__(self, label, id: str | None = None, classes: str = ""):
        self.label = label
        self.id = id
        self.classes = classes
        self.disabled = False


class StubTextArea:
    def __init__(self, text: str = "", id: str | None = None):
        self.text = text
        self.id = id


@pytest.fixture
def stub_widgets(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(va, "Container", StubContainer)
    monkeypatch.setattr(va, "Horizontal", StubContainer)
    monkeypatch.setattr(va, "Vertical", StubContainer)
    monkeypatch.setattr(va, "Static", StubStatic)
    monkeypatch.setattr(va, "Button", StubButton)
    monkeypatch.setattr(va, "TextArea", StubTextArea)


class StubEvent:
    def __init__(self, button_id: str):
        self.button = SimpleNamespace(id=button_id)


def test_helpers_work_without_running_app(questions) -> None:
    app = va.DrillApp(QuizSession(questions))

    assert app.toggle_option("A") is True
    assert app.submit_answer() is True
    assert app.session.classify("A") == "wrong"
    assert app.next_question() == 1
    assert app.session.selected_options == []
    assert app.prev_question() == 0


def test_submit_answer_requires_selection(questions) -> None:
    app = va.DrillApp(QuizSession(questions))
    assert app.submit_answer() is False
    assert app.session.is_submitted is False


def test_toggle_nth_maps_positions_to_labels(questions) -> None:
    app = va.DrillApp(QuizSession(questions))

    app.action_toggle_nth(1)
    app.action_toggle_nth(8)

    assert app.session.selected_options == ["B"]


def test_edit_actions_round_trip(questions) -> None:
    app = va.DrillApp(QuizSession(questions))

    app.action_edit()
    assert app.session.is_editing is True
    app.action_toggle_nth(0)
    assert app.session.selected_options == []

    app.on_text_area_changed(
        SimpleNamespace(text_area=SimpleNamespace(text="{bad"))
    )
    app.action_save_edit()
    assert app.session.is_editing is True
    assert app.session.edit_error

    app.action_cancel_edit()
    assert app.session.is_editing is False
    assert app.session.questions == questions


def test_text_area_changes_ignored_outside_edit_mode(questions) -> None:
    app = va.DrillApp(QuizSession(questions))
    app.on_text_area_changed(
        SimpleNamespace(text_area=SimpleNamespace(text="late"))
    )
    assert app.session.edit_draft == ""


def test_on_button_pressed_routes_ids(questions) -> None:
    app = va.DrillApp(QuizSession(questions))

    app.on_button_pressed(StubEvent("option-1"))
    assert app.session.selected_options == ["B"]
    app.on_button_pressed(StubEvent("submit"))
    assert app.session.is_submitted is True
    app.on_button_pressed(StubEvent("next"))
    assert app.session.current_index == 1
    app.on_button_pressed(StubEvent("prev"))
    assert app.session.current_index == 0
    app.on_button_pressed(StubEvent("answers"))
    assert app.session.hide_answers is False
    app.on_button_pressed(StubEvent("edit"))
    assert app.session.is_editing is True
    app.on_button_pressed(StubEvent("save"))
    assert app.session.is_editing is False
    app.on_button_pressed(StubEvent("edit"))
    app.on_button_pressed(StubEvent("cancel"))
    assert app.session.is_editing is False
    app.on_button_pressed(StubEvent(""))


def test_compose_renders_question_and_footer(questions, stub_widgets) -> None:
    app = va.DrillApp(QuizSession(questions))

    rendered = list(app.compose())

    ids = [getattr(widget, "id", None) for widget in rendered]
    assert ids[:1] == [None]
    assert isinstance(rendered[0], va.QuestionView)
    assert {"prev", "next", "submit", "answers", "edit", "progress"} <= set(ids)
    progress = next(w for w in rendered if getattr(w, "id", None) == "progress")
    assert progress.content == "Question 1 / 3"


def test_question_view_classes_follow_state(questions, stub_widgets) -> None:
    session = QuizSession(questions)
    session.toggle_option("A")
    session.submit()

    elements = list(va.QuestionView(session.view()).compose())

    buttons = [e for e in elements if isinstance(e, StubButton)]
    assert [b.id for b in buttons] == [
        "option-0",
        "option-1",
        "option-2",
        "option-3",
    ]
    assert buttons[0].classes == "option wrong"
    assert buttons[1].classes == "option correct"
    assert buttons[2].classes == "option neutral"
    notes = [e for e in elements if getattr(e, "id", None) == "notes"]
    assert notes
    assert "Vocabulary" in notes[0].content.plain


def test_question_view_hides_notes_before_submit(questions, stub_widgets):
    session = QuizSession(questions)

    elements = list(va.QuestionView(session.view()).compose())

    assert not [e for e in elements if getattr(e, "id", None) == "notes"]


def test_editor_view_shows_draft_and_error(questions, stub_widgets) -> None:
    session = QuizSession(questions)
    session.begin_edit()
    session.update_draft("{")
    session.save_edit()

    elements = list(va.EditorView(session.view()).compose())

    draft = next(e for e in elements if isinstance(e, StubTextArea))
    assert draft.text == "{"
    error = next(e for e in elements if getattr(e, "id", None) == "edit-error")
    assert "not valid JSON" in error.content.plain
    assert {"save", "cancel"} <= {getattr(e, "id", None) for e in elements}


def test_refresh_stage_remounts_and_syncs_footer(
    questions, stub_widgets, monkeypatch
) -> None:
    app = va.DrillApp(QuizSession(questions))
    widgets = {
        "#stage": StubContainer(id="stage"),
        "#prev": StubButton("Prev", id="prev"),
        "#next": StubButton("Next", id="next"),
        "#submit": StubButton("Submit", id="submit"),
        "#answers": StubButton("", id="answers"),
        "#edit": StubButton("Edit", id="edit"),
        "#progress": StubStatic("", id="progress"),
    }
    monkeypatch.setattr(
        va.DrillApp, "is_running", property(lambda self: True)
    )
    monkeypatch.setattr(app, "query_one", lambda selector, _type: widgets[selector])

    app.next_question()

    stage = widgets["#stage"]
    assert len(stage.children) == 1
    assert isinstance(stage.children[0], va.QuestionView)
    assert widgets["#prev"].disabled is False
    assert widgets["#submit"].disabled is True
    assert widgets["#progress"].content == "Question 2 / 3"
    assert widgets["#answers"].label == "Hide answers: ON"

    app.begin_edit()
    assert isinstance(stage.children[0], va.EditorView)
    assert widgets["#edit"].disabled is True
