from __future__ import annotations

from quiz_drill.core import workspace as workspace_mod
from quiz_drill.workspace import cli


def test_drill_init_creates_workspace_from_env(_isolated_home, capsys):
    code = cli.main([])

    captured = capsys.readouterr()
    assert code == 0
    assert "Workspace ready" in captured.out
    assert "(created)" in captured.out
    assert "Put question banks" in captured.out
    for name in ("config", "logs", "banks"):
        assert (_isolated_home / name).is_dir()


def test_drill_init_reports_existing_directories(tmp_path, capsys):
    target = tmp_path / "again"
    cli.main(["--path", str(target)])
    capsys.readouterr()

    code = cli.main(["--path", str(target)])

    out = capsys.readouterr().out
    assert code == 0
    assert "(exists)" in out
    assert "(created)" not in out
    assert str(target.resolve()) in out


def test_drill_init_quiet_mode(capsys):
    code = cli.main(["--quiet"])

    captured = capsys.readouterr()
    assert code == 0
    assert captured.out == ""


def test_drill_init_reports_workspace_errors(monkeypatch, capsys):
    def fail(**_kwargs):
        raise workspace_mod.WorkspaceError("cannot prepare")

    monkeypatch.setattr(cli.workspace_mod, "ensure_workspace", fail)

    code = cli.main([])

    assert code == 1
    assert "cannot prepare" in capsys.readouterr().err
