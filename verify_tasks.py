import json
from datetime import date
from unittest.mock import MagicMock
import pytest
import storage
import tasks as task_ops
from history import TaskHistory
from models import Task, TaskStatus
from session import Session


@pytest.fixture
def session(data_dir):
    return Session.open("alice", history_limit=5)


def saved_names(data_dir, username="alice"):
    data = json.loads((data_dir / f"tasks-{username}.json").read_text(encoding="utf-8"))
    return [t["name"] for t in data]


def test_next_task_id():
    assert task_ops.next_task_id([]) == 1
    assert task_ops.next_task_id([Task(id=3, name="c"), Task(id=7, name="g")]) == 8


def test_add_assigns_ids_without_reuse(session, data_dir):
    for name in ["a", "b", "c"]:
        session.apply(task_ops.add_task(session.tasks, session.history, session.username, name))
    assert [t.id for t in session.tasks] == [1, 2, 3]

    session.apply(task_ops.delete_task(session.tasks, session.history, session.username, 2))
    session.apply(task_ops.add_task(session.tasks, session.history, session.username, "d"))

    assert [t.id for t in session.tasks] == [1, 3, 4]
    assert saved_names(data_dir) == ["a", "c", "d"]


def test_add_does_not_mutate_input(session):
    original = session.tasks
    updated = task_ops.add_task(original, session.history, session.username, "Buy milk", "2030-01-01")

    assert original == []
    assert updated[0].status == TaskStatus.PENDING
    assert updated[0].due_date == "2030-01-01"


def test_add_rejects_invalid_name_before_history(session):
    with pytest.raises(task_ops.TaskValidationError):
        task_ops.add_task(session.tasks, session.history, session.username, "   ")
    with pytest.raises(task_ops.TaskValidationError):
        task_ops.add_task(session.tasks, session.history, session.username, "x" * 101)
    assert len(session.history.entries) == 1


def test_buy_milk_scenario(session, data_dir):
    session.apply(task_ops.add_task(session.tasks, session.history, session.username, "Buy milk"))
    task = session.tasks[0]
    assert (task.id, task.status) == (1, TaskStatus.PENDING)

    session.apply(task_ops.toggle_task_status(session.tasks, session.history, session.username, 1))
    assert session.tasks[0].status == TaskStatus.COMPLETED

    assert session.undo() is not None
    assert session.tasks[0].status == TaskStatus.PENDING

    assert session.undo() is not None
    assert session.tasks == []
    assert saved_names(data_dir) == []

    assert session.undo() is None
    assert session.tasks == []


def test_toggle_is_its_own_inverse(session):
    session.apply(task_ops.add_task(session.tasks, session.history, session.username, "a"))
    entries = len(session.history.entries)

    session.apply(task_ops.toggle_task_status(session.tasks, session.history, session.username, 1))
    session.apply(task_ops.toggle_task_status(session.tasks, session.history, session.username, 1))

    assert session.tasks[0].status == TaskStatus.PENDING
    assert len(session.history.entries) == entries + 2


def test_missing_id_is_a_no_op(data_dir, monkeypatch):
    history = TaskHistory(limit=5, save=MagicMock())
    current = [Task(id=1, name="a"), Task(id=2, name="b")]
    history.initialize(current)
    save_tasks = MagicMock(return_value=True)
    monkeypatch.setattr(storage, "save_tasks", save_tasks)

    for op in (task_ops.delete_task, task_ops.toggle_task_status):
        with pytest.raises(task_ops.TaskNotFoundError):
            op(current, history, "alice", 99)
    with pytest.raises(task_ops.TaskNotFoundError):
        task_ops.edit_task_name(current, history, "alice", 99, "new")

    assert [t.id for t in current] == [1, 2]
    assert len(history.entries) == 1
    save_tasks.assert_not_called()


def test_edit_task_name_records_label(session):
    session.apply(task_ops.add_task(session.tasks, session.history, session.username, "old"))
    session.apply(task_ops.edit_task_name(session.tasks, session.history, session.username, 1, "  new  "))

    assert session.tasks[0].name == "new"
    assert session.history.entries[-1].label == 'Edit task "old" to "new"'


def test_save_failure_keeps_new_state(session, monkeypatch):
    monkeypatch.setattr(storage, "save_tasks", MagicMock(return_value=False))

    updated = task_ops.add_task(session.tasks, session.history, session.username, "a")

    assert [t.name for t in updated] == ["a"]
    assert len(session.history.entries) == 2


def test_mutate_mutate_undo_mutate_redo(session):
    for name in ["a", "b"]:
        session.apply(task_ops.add_task(session.tasks, session.history, session.username, name))
    session.undo()
    session.apply(task_ops.add_task(session.tasks, session.history, session.username, "c"))

    assert session.redo() is None
    assert [t.name for t in session.tasks] == ["a", "c"]


def test_backup_and_restore(session, data_dir):
    for name in ["a", "b"]:
        session.apply(task_ops.add_task(session.tasks, session.history, session.username, name))
    path = task_ops.backup_tasks(session.tasks, session.username)
    assert path == data_dir / "backups" / "tasks-alice-backup.json"

    session.apply(task_ops.delete_task(session.tasks, session.history, session.username, 1))
    session.apply(task_ops.restore_from_backup(session.history, session.username))

    assert [t.name for t in session.tasks] == ["a", "b"]
    assert saved_names(data_dir) == ["a", "b"]
    assert session.history.entries[-1].label == "Restore from backup"

    session.undo()
    assert [t.name for t in session.tasks] == ["b"]


def test_restore_without_backup(session):
    with pytest.raises(task_ops.BackupNotFoundError):
        task_ops.restore_from_backup(session.history, session.username)
    assert len(session.history.entries) == 1


@pytest.mark.parametrize("value,expected", [
    ("2024-02-29", "2024-02-29"),
    ("today", "2024-05-10"),
    ("Tomorrow", "2024-05-11"),
    (" 2024-12-31 ", "2024-12-31"),
])
def test_parse_due_date(value, expected):
    assert task_ops.parse_due_date(value, today=date(2024, 5, 10)) == expected


@pytest.mark.parametrize("value", ["", "2023-02-29", "31-12-2024", "next week", "2024-1-5"])
def test_parse_due_date_rejects(value):
    with pytest.raises(task_ops.TaskValidationError):
        task_ops.parse_due_date(value)


def test_parse_task_id():
    assert task_ops.parse_task_id(" 12 ") == 12
    for bad in ["0", "-3", "abc", ""]:
        with pytest.raises(task_ops.TaskValidationError):
            task_ops.parse_task_id(bad)


if __name__ == "__main__":
    pytest.main([__file__])
