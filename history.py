"""
Bounded undo/redo history for a user's task collection.

Every mutation is recorded as a (before, after) pair of snapshots. Undo
installs the `before` image of the entry under the cursor, redo the `after`
image of the entry past it. Both write the restored collection straight to
storage without recording a new entry.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List, Optional, Tuple
from models import Task, clone_tasks
from config import DEFAULT_HISTORY_LIMIT
import storage

logger = logging.getLogger(__name__)

INITIAL_LABEL = "Initial state"

Snapshot = Tuple[Task, ...]

@dataclass(frozen=True)
class HistoryEntry:
    before: Snapshot
    after: Snapshot
    label: str
    recorded_at: str = field(default_factory=lambda: datetime.now().isoformat())
    initial: bool = False

@dataclass(frozen=True)
class HistoryStep:
    """
    Result of a successful undo or redo.
    """
    tasks: List[Task]
    label: str

def _freeze(tasks) -> Snapshot:
    return tuple(clone_tasks(tasks))

class TaskHistory:
    def __init__(self, limit: int = DEFAULT_HISTORY_LIMIT, save: Callable[[str, List[Task]], bool] = None):
        if limit < 1:
            raise ValueError("History limit must be at least 1")
        self.limit = limit
        self.entries: List[HistoryEntry] = []
        self.cursor = -1
        self._save = save or storage.save_tasks

    def initialize(self, tasks: List[Task]):
        """
        Resets the log to a single entry whose before and after are both `tasks`.
        """
        snapshot = _freeze(tasks)
        self.entries = [HistoryEntry(before=snapshot, after=snapshot, label=INITIAL_LABEL, initial=True)]
        self.cursor = 0

    def record_state(self, before: List[Task], after: List[Task], label: str):
        # A new action discards anything that was undone
        self.entries = self.entries[:self.cursor + 1]
        self.entries.append(HistoryEntry(before=_freeze(before), after=_freeze(after), label=label))

        if len(self.entries) > self.limit:
            self.entries.pop(0)
        else:
            self.cursor += 1

        self.cursor = min(self.cursor, len(self.entries) - 1)
        logger.debug(f"Recorded '{label}' (cursor={self.cursor}, entries={len(self.entries)})")

    def can_undo(self) -> bool:
        # The seed entry has nothing before it; once evicted, the oldest
        # retained entry can still be undone down to cursor -1.
        return self.cursor >= 0 and not self.entries[self.cursor].initial

    def can_redo(self) -> bool:
        return self.cursor < len(self.entries) - 1

    def undo(self, username: str) -> Optional[HistoryStep]:
        """
        Restores the state before the current entry and persists it.
        Returns None when there is nothing to undo.
        """
        if not self.can_undo():
            logger.debug("Nothing to undo")
            return None

        entry = self.entries[self.cursor]
        self.cursor -= 1
        restored = list(entry.before)
        self._save(username, restored)
        logger.debug(f"Undone '{entry.label}' (cursor={self.cursor})")
        return HistoryStep(tasks=clone_tasks(restored), label=entry.label)

    def redo(self, username: str) -> Optional[HistoryStep]:
        """
        Re-applies the entry after the cursor and persists it.
        Returns None when there is nothing to redo.
        """
        if not self.can_redo():
            logger.debug("Nothing to redo")
            return None

        self.cursor += 1
        entry = self.entries[self.cursor]
        restored = list(entry.after)
        self._save(username, restored)
        logger.debug(f"Redone '{entry.label}' (cursor={self.cursor})")
        return HistoryStep(tasks=clone_tasks(restored), label=entry.label)
