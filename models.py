from dataclasses import dataclass, field, asdict
from typing import List, Optional, Iterable
from enum import Enum
from datetime import datetime

class TaskStatus(str, Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"

    def toggled(self) -> "TaskStatus":
        return TaskStatus.PENDING if self == TaskStatus.COMPLETED else TaskStatus.COMPLETED

@dataclass
class Task:
    id: int
    name: str
    status: TaskStatus = TaskStatus.PENDING
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())
    due_date: Optional[str] = None

    def to_dict(self):
        data = asdict(self)
        data['status'] = self.status.value
        # Stored documents use camelCase for the due date
        data['dueDate'] = data.pop('due_date')
        return data

    @classmethod
    def from_dict(cls, data):
        data = dict(data)
        if 'dueDate' in data:
            data['due_date'] = data.pop('dueDate')
        if 'status' in data:
            data['status'] = TaskStatus(data['status'])
        return cls(**data)

def clone_tasks(tasks: Iterable[Task]) -> List[Task]:
    """
    Returns a structurally independent copy of a task collection.
    """
    return [Task.from_dict(t.to_dict()) for t in tasks]
