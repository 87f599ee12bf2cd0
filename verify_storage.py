import json
from unittest.mock import MagicMock
import pytest
import storage
from models import Task, TaskStatus


def test_load_creates_empty_document(data_dir):
    assert storage.load_tasks("carol") == []

    path = data_dir / "tasks-carol.json"
    assert path.exists()
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_save_writes_pretty_camel_case_json(data_dir):
    tasks = [
        Task(id=1, name="Café run", status=TaskStatus.COMPLETED, timestamp="2024-01-01T10:00:00", due_date="2024-01-02"),
        Task(id=2, name="No date", timestamp="2024-01-01T11:00:00"),
    ]
    assert storage.save_tasks("carol", tasks) is True

    text = (data_dir / "tasks-carol.json").read_text(encoding="utf-8")
    assert '\n  {\n    "id": 1,' in text
    assert "Café run" in text
    data = json.loads(text)
    assert data[0] == {
        "id": 1,
        "name": "Café run",
        "status": "Completed",
        "timestamp": "2024-01-01T10:00:00",
        "dueDate": "2024-01-02",
    }
    assert data[1]["dueDate"] is None
    assert storage.load_tasks("carol") == tasks


def test_load_tolerates_missing_due_date_key(data_dir):
    (data_dir / "tasks-dave.json").write_text(
        json.dumps([{"id": 4, "name": "old", "status": "Pending", "timestamp": "2024-01-01T00:00:00.000Z"}]),
        encoding="utf-8",
    )
    [task] = storage.load_tasks("dave")
    assert task.id == 4
    assert task.due_date is None


def test_corrupt_file_logs_and_returns_empty(data_dir, caplog):
    (data_dir / "tasks-erin.json").write_text("{not json", encoding="utf-8")

    assert storage.load_tasks("erin") == []
    assert "Error reading" in caplog.text


def test_save_failure_returns_false(data_dir, monkeypatch, caplog):
    monkeypatch.setattr(storage, "_save_json", MagicMock(side_effect=PermissionError("denied")))

    assert storage.save_tasks("frank", [Task(id=1, name="a")]) is False
    assert "Error writing tasks file" in caplog.text


def test_backup_round_trip_and_info(data_dir):
    assert storage.load_backup("gina") is None
    assert storage.backup_info("gina") is None

    path = storage.save_backup("gina", [Task(id=1, name="a", timestamp="2024-01-01T00:00:00")])

    assert path == data_dir / "backups" / "tasks-gina-backup.json"
    assert [t.name for t in storage.load_backup("gina")] == ["a"]
    info = storage.backup_info("gina")
    assert info.path == path
    assert info.size_bytes == path.stat().st_size


def test_users_file(data_dir):
    assert storage.load_users() == []
    assert storage.save_users([{"username": "hal", "passwordHash": "x"}])
    assert storage.load_users() == [{"username": "hal", "passwordHash": "x"}]


if __name__ == "__main__":
    pytest.main([__file__])
