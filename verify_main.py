from unittest.mock import MagicMock
import pytest
from typer.testing import CliRunner
import main
import storage
from models import Task, TaskStatus
from session import Session


@pytest.fixture
def console(monkeypatch):
    mock = MagicMock()
    monkeypatch.setattr(main, "console", mock)
    return mock


def script(monkeypatch, answers, confirms=()):
    monkeypatch.setattr(main.Prompt, "ask", MagicMock(side_effect=list(answers)))
    monkeypatch.setattr(main.Confirm, "ask", MagicMock(side_effect=list(confirms)))


def printed(console):
    return " ".join(str(c.args[0]) for c in console.print.call_args_list if c.args)


def test_menu_add_toggle_and_undo_past_start(data_dir, console, monkeypatch):
    session = Session.open("alice")
    script(monkeypatch, ["1", "Buy milk", "5", "1", "13", "13", "13", "0"], confirms=[False])

    main.run_menu(session)

    assert session.tasks == []
    assert storage.load_tasks("alice") == []
    output = printed(console)
    assert 'Undone: Mark task "Buy milk" as Completed' in output
    assert "Nothing to undo." in output


def test_menu_add_with_due_date_then_redo(data_dir, console, monkeypatch):
    session = Session.open("alice")
    script(monkeypatch, ["1", "Pay rent", "2030-02-01", "13", "14", "14", "0"], confirms=[True])

    main.run_menu(session)

    [task] = session.tasks
    assert (task.name, task.due_date, task.status) == ("Pay rent", "2030-02-01", TaskStatus.PENDING)
    assert "Nothing to redo." in printed(console)


def test_menu_reports_missing_task(data_dir, console, monkeypatch):
    storage.save_tasks("alice", [Task(id=1, name="a"), Task(id=2, name="b")])
    session = Session.open("alice")
    script(monkeypatch, ["6", "99", "0"])

    main.run_menu(session)

    assert [t.id for t in session.tasks] == [1, 2]
    assert len(session.history.entries) == 1
    assert "Task with ID 99 not found." in printed(console)


def test_menu_reprompts_invalid_input(data_dir, console, monkeypatch):
    session = Session.open("alice")
    script(monkeypatch, ["1", "", "ok", "7", "abc", "1", "renamed", "0"], confirms=[False])

    main.run_menu(session)

    assert [t.name for t in session.tasks] == ["renamed"]


def test_menu_restore_without_backup(data_dir, console, monkeypatch):
    session = Session.open("alice")
    script(monkeypatch, ["11", "12", "0"])

    main.run_menu(session)

    output = printed(console)
    assert "No backup found for user 'alice'." in output
    assert session.tasks == []


def test_interactive_command_exits_cleanly(data_dir, console, monkeypatch):
    monkeypatch.setattr(main.config, "setup_logging", MagicMock())
    monkeypatch.setattr(main.auth, "authenticate", MagicMock(return_value="alice"))
    script(monkeypatch, ["0"])

    result = CliRunner().invoke(main.app, ["interactive", "--data-dir", str(data_dir)])

    assert result.exit_code == 0
    assert (data_dir / "tasks-alice.json").exists()


def test_list_command_filters(data_dir, console, monkeypatch):
    monkeypatch.setattr(main.config, "setup_logging", MagicMock())
    monkeypatch.setattr(main.auth, "authenticate", MagicMock(return_value="alice"))
    render = MagicMock()
    monkeypatch.setattr(main.display, "render_tasks", render)
    storage.save_tasks("alice", [
        Task(id=1, name="Buy milk", timestamp="2024-01-01T00:00:00"),
        Task(id=2, name="Milk the cow", status=TaskStatus.COMPLETED, timestamp="2024-01-02T00:00:00"),
        Task(id=3, name="Walk", timestamp="2024-01-03T00:00:00"),
    ])

    result = CliRunner().invoke(main.app, ["list", "--search", "milk", "--sort", "desc", "--data-dir", str(data_dir)])

    assert result.exit_code == 0
    shown = render.call_args.args[1]
    assert [t.id for t in shown] == [2, 1]


def test_list_command_rejects_bad_sort(data_dir, console):
    result = CliRunner().invoke(main.app, ["list", "--sort", "sideways"])
    assert result.exit_code == 2


def test_list_command_rejects_blank_search(data_dir, console, monkeypatch):
    authenticate = MagicMock(return_value="alice")
    monkeypatch.setattr(main.auth, "authenticate", authenticate)

    result = CliRunner().invoke(main.app, ["list", "--search", "   "])

    assert result.exit_code == 2
    authenticate.assert_not_called()


def test_list_command_strips_search_keyword(data_dir, console, monkeypatch):
    monkeypatch.setattr(main.config, "setup_logging", MagicMock())
    monkeypatch.setattr(main.auth, "authenticate", MagicMock(return_value="alice"))
    render = MagicMock()
    monkeypatch.setattr(main.display, "render_tasks", render)
    storage.save_tasks("alice", [Task(id=1, name="Buy milk"), Task(id=2, name="Walk")])

    result = CliRunner().invoke(main.app, ["list", "--search", "  milk ", "--data-dir", str(data_dir)])

    assert result.exit_code == 0
    assert [t.id for t in render.call_args.args[1]] == [1]


if __name__ == "__main__":
    pytest.main([__file__])
