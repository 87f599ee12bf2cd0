import logging
from dataclasses import dataclass, field
from typing import List, Optional
from models import Task
from history import TaskHistory, HistoryStep
from config import get_history_limit
import storage

logger = logging.getLogger(__name__)

@dataclass
class Session:
    """
    Everything that belongs to one logged-in user: the live task list and
    the history that can roll it back.
    """
    username: str
    tasks: List[Task] = field(default_factory=list)
    history: TaskHistory = field(default_factory=TaskHistory)

    @classmethod
    def open(cls, username: str, history_limit: Optional[int] = None) -> "Session":
        tasks = storage.load_tasks(username)
        history = TaskHistory(limit=history_limit or get_history_limit())
        history.initialize(tasks)
        logger.debug(f"Opened session for {username} with {len(tasks)} tasks")
        return cls(username=username, tasks=tasks, history=history)

    def apply(self, tasks: List[Task]):
        self.tasks = tasks

    def undo(self) -> Optional[HistoryStep]:
        step = self.history.undo(self.username)
        if step is not None:
            self.tasks = step.tasks
        return step

    def redo(self) -> Optional[HistoryStep]:
        step = self.history.redo(self.username)
        if step is not None:
            self.tasks = step.tasks
        return step
