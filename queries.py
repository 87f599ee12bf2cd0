from dataclasses import dataclass
from datetime import date, datetime
from typing import List, Optional
from models import Task, TaskStatus

@dataclass
class TaskSummary:
    total: int
    completed: int
    overdue: int

def is_overdue(task: Task, today: Optional[date] = None) -> bool:
    """
    A task is overdue when it has a due date strictly before today and is not completed.
    """
    if not task.due_date or task.status == TaskStatus.COMPLETED:
        return False
    today = today or date.today()
    try:
        return date.fromisoformat(task.due_date) < today
    except ValueError:
        return False

def filter_by_status(tasks: List[Task], status: TaskStatus) -> List[Task]:
    return [t for t in tasks if t.status == status]

def search_tasks(tasks: List[Task], keyword: str) -> List[Task]:
    needle = keyword.strip().lower()
    return [t for t in tasks if needle in t.name.lower()]

def overdue_tasks(tasks: List[Task], today: Optional[date] = None) -> List[Task]:
    today = today or date.today()
    return [t for t in tasks if is_overdue(t, today)]

def _timestamp_key(task: Task) -> datetime:
    try:
        stamp = datetime.fromisoformat(task.timestamp)
    except (TypeError, ValueError):
        return datetime.min
    # Compare everything as naive local time
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone().replace(tzinfo=None)
    return stamp

def sort_by_timestamp(tasks: List[Task], descending: bool = False) -> List[Task]:
    # sorted() stays stable with reverse=True
    return sorted(tasks, key=_timestamp_key, reverse=descending)

def summarize(tasks: List[Task], today: Optional[date] = None) -> TaskSummary:
    return TaskSummary(
        total=len(tasks),
        completed=len(filter_by_status(tasks, TaskStatus.COMPLETED)),
        overdue=len(overdue_tasks(tasks, today)),
    )
