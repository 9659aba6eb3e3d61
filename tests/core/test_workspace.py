from __future__ import annotations

from pathlib import Path

import pytest

from quiz_drill.core import workspace


def test_ensure_workspace_creates_drill_directories(tmp_path, monkeypatch):
    root = tmp_path / "drills"
    monkeypatch.setenv(workspace.WORKSPACE_ENV, str(root))

    layout = workspace.ensure_workspace()

    assert layout.home == root.resolve()
    assert [name for name, _ in layout.items()] == ["config", "logs", "banks"]
    for name, path in layout.items():
        assert path.is_dir()
        assert layout.created[name] is True
    assert layout.created["home"] is True


def test_second_call_reports_existing(tmp_path):
    first = workspace.ensure_workspace(path=tmp_path / "again")
    second = workspace.ensure_workspace(path=tmp_path / "again")

    assert first.home == second.home
    assert not any(second.created.values())


def test_path_argument_beats_environment(tmp_path):
    env = {workspace.WORKSPACE_ENV: str(tmp_path / "from-env")}

    layout = workspace.ensure_workspace(env=env, path=tmp_path / "explicit")

    assert layout.home == (tmp_path / "explicit").resolve()
    assert not (tmp_path / "from-env").exists()


def test_blank_environment_value_uses_default(monkeypatch, tmp_path):
    home = tmp_path / "default-home"
    monkeypatch.setattr(workspace, "DEFAULT_WORKSPACE", home)

    layout = workspace.ensure_workspace(
        env={workspace.WORKSPACE_ENV: "   "}, create=False
    )

    assert layout.home == home.resolve()


def test_create_false_touches_nothing(tmp_path):
    root = tmp_path / "deferred"

    layout = workspace.ensure_workspace(path=root, create=False)

    assert not root.exists()
    assert layout.path_for("banks") == root.resolve() / "banks"
    assert not any(layout.created.values())


def test_describe_layout_includes_home(tmp_path):
    mapping = workspace.describe_layout(path=tmp_path / "layout")

    assert mapping["home"] == (tmp_path / "layout").resolve()
    assert set(mapping) == {"home", "config", "logs", "banks"}


def test_workspace_path_that_is_a_file_errors(tmp_path):
    root = tmp_path / "file"
    root.write_text("not a dir", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=root)


def test_subdirectory_that_is_a_file_errors_without_create(tmp_path):
    root = tmp_path / "ws"
    root.mkdir()
    (root / "banks").write_text("oops", encoding="utf-8")

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=root, create=False)


def test_path_for_unknown_key(tmp_path):
    layout = workspace.ensure_workspace(path=tmp_path, create=False)

    with pytest.raises(KeyError):
        layout.path_for("converted")


def test_default_location_falls_back_to_tempdir(tmp_path, monkeypatch):
    fallback = tmp_path / "fallback"
    monkeypatch.setattr(workspace, "_fallback_base", lambda: fallback)
    real_ensure_dir = workspace._ensure_dir

    def deny_default(path: Path) -> bool:
        if path == workspace.DEFAULT_WORKSPACE.resolve():
            raise PermissionError("denied")
        return real_ensure_dir(path)

    monkeypatch.setattr(workspace, "_ensure_dir", deny_default)

    layout = workspace.ensure_workspace(env={})

    assert layout.home == fallback
    assert layout.created["home"] is True


def test_explicit_location_does_not_fall_back(tmp_path, monkeypatch):
    monkeypatch.setattr(workspace, "_fallback_base", lambda: tmp_path / "fb")

    def deny(path: Path) -> bool:
        raise PermissionError("nope")

    monkeypatch.setattr(workspace, "_ensure_dir", deny)

    with pytest.raises(workspace.WorkspaceError):
        workspace.ensure_workspace(path=tmp_path / "explicit")
    assert not (tmp_path / "fb").exists()
