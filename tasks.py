"""
Task identity, input validation and the mutation operations.

Every mutation builds a fresh list from the current one, records the
(before, after) pair in the history and then persists the new list. The
caller installs the returned list as the live collection.
"""
import logging
import re
from dataclasses import replace
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import List, Optional
from models import Task, TaskStatus, clone_tasks
from history import TaskHistory
import storage

logger = logging.getLogger(__name__)

MAX_NAME_LENGTH = 100
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

class TaskNotFoundError(LookupError):
    def __init__(self, task_id: int):
        super().__init__(f"Task with ID {task_id} not found.")
        self.task_id = task_id

class TaskValidationError(ValueError):
    pass

class BackupNotFoundError(LookupError):
    def __init__(self, username: str):
        super().__init__(f"No backup found for user '{username}'.")
        self.username = username

# --- identity ---

def next_task_id(tasks: List[Task]) -> int:
    return max((t.id for t in tasks), default=0) + 1

def find_task(tasks: List[Task], task_id: int) -> Optional[Task]:
    return next((t for t in tasks if t.id == task_id), None)

def _require_task(tasks: List[Task], task_id: int) -> Task:
    task = find_task(tasks, task_id)
    if task is None:
        raise TaskNotFoundError(task_id)
    return task

# --- input validation ---

def validate_task_name(name: str) -> str:
    name = (name or "").strip()
    if not name:
        raise TaskValidationError("Task name cannot be empty!")
    if len(name) > MAX_NAME_LENGTH:
        raise TaskValidationError(f"Task name too long! Maximum {MAX_NAME_LENGTH} characters.")
    return name

def parse_due_date(value: str, today: Optional[date] = None) -> str:
    """
    Accepts YYYY-MM-DD, 'today' or 'tomorrow' and returns a YYYY-MM-DD string.
    """
    today = today or date.today()
    text = (value or "").strip().lower()
    if text == "today":
        return today.isoformat()
    if text == "tomorrow":
        return (today + timedelta(days=1)).isoformat()
    if DATE_PATTERN.match(text):
        try:
            return date.fromisoformat(text).isoformat()
        except ValueError:
            pass
    raise TaskValidationError("Invalid date format! Use YYYY-MM-DD, 'today', or 'tomorrow'")

def parse_task_id(value: str) -> int:
    try:
        task_id = int(str(value).strip())
    except ValueError:
        raise TaskValidationError("Please enter a valid task ID (positive number)!") from None
    if task_id <= 0:
        raise TaskValidationError("Please enter a valid task ID (positive number)!")
    return task_id

# --- mutations ---

def _commit(history: TaskHistory, username: str, before: List[Task], after: List[Task], label: str) -> List[Task]:
    history.record_state(before, after, label)
    if not storage.save_tasks(username, after):
        logger.error(f"'{label}' applied in memory but could not be saved for {username}")
    return after

def add_task(tasks: List[Task], history: TaskHistory, username: str, name: str,
             due_date: Optional[str] = None) -> List[Task]:
    name = validate_task_name(name)
    new_task = Task(
        id=next_task_id(tasks),
        name=name,
        status=TaskStatus.PENDING,
        timestamp=datetime.now().isoformat(),
        due_date=due_date,
    )
    updated = clone_tasks(tasks) + [new_task]
    return _commit(history, username, tasks, updated, f'Add task "{name}"')

def edit_task_name(tasks: List[Task], history: TaskHistory, username: str, task_id: int,
                   new_name: str) -> List[Task]:
    task = _require_task(tasks, task_id)
    new_name = validate_task_name(new_name)
    updated = [replace(t, name=new_name) if t.id == task_id else replace(t) for t in tasks]
    return _commit(history, username, tasks, updated, f'Edit task "{task.name}" to "{new_name}"')

def toggle_task_status(tasks: List[Task], history: TaskHistory, username: str, task_id: int) -> List[Task]:
    task = _require_task(tasks, task_id)
    new_status = task.status.toggled()
    updated = [replace(t, status=new_status) if t.id == task_id else replace(t) for t in tasks]
    return _commit(history, username, tasks, updated, f'Mark task "{task.name}" as {new_status.value}')

def delete_task(tasks: List[Task], history: TaskHistory, username: str, task_id: int) -> List[Task]:
    task = _require_task(tasks, task_id)
    updated = [replace(t) for t in tasks if t.id != task_id]
    return _commit(history, username, tasks, updated, f'Delete task "{task.name}"')

def restore_from_backup(history: TaskHistory, username: str) -> List[Task]:
    """
    Replaces the user's tasks with their backup. The on-disk collection just
    before the restore is recorded as the `before` image.
    """
    restored = storage.load_backup(username)
    if restored is None:
        raise BackupNotFoundError(username)
    current = storage.load_tasks(username)
    return _commit(history, username, current, restored, "Restore from backup")

def backup_tasks(tasks: List[Task], username: str) -> Optional[Path]:
    """
    Writes the user's single backup slot. Not a history event.
    """
    return storage.save_backup(username, tasks)
