import json
import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Any, Optional
from config import DATA_DIR
from models import Task

logger = logging.getLogger(__name__)

BACKUP_DIRNAME = "backups"
USERS_FILENAME = "users.json"

@dataclass
class BackupInfo:
    path: Path
    modified: datetime
    size_bytes: int

def tasks_file(username: str) -> Path:
    return DATA_DIR / f"tasks-{username}.json"

def backup_file(username: str) -> Path:
    return DATA_DIR / BACKUP_DIRNAME / f"tasks-{username}-backup.json"

def users_file() -> Path:
    return DATA_DIR / USERS_FILENAME

def _ensure_dir(path: Path):
    path.mkdir(parents=True, exist_ok=True)

def _load_json(filepath: Path, default: Any) -> Any:
    """
    Reads a JSON document, writing `default` to it first if it does not exist.
    Read or parse errors are logged and `default` is returned.
    """
    try:
        if not filepath.exists():
            _save_json(filepath, default)
        with open(filepath, 'r', encoding='utf-8') as f:
            return json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading {filepath}: {e}")
        return default

def _save_json(filepath: Path, data: Any):
    _ensure_dir(filepath.parent)
    with open(filepath, 'w', encoding='utf-8') as f:
        json.dump(data, f, indent=2, ensure_ascii=False)

def _tasks_from_json(data: Any, filepath: Path) -> List[Task]:
    if not isinstance(data, list):
        logger.error(f"Expected a list of tasks in {filepath}, got {type(data).__name__}")
        return []
    tasks = []
    for raw in data:
        try:
            tasks.append(Task.from_dict(raw))
        except (TypeError, ValueError) as e:
            logger.error(f"Skipping malformed task in {filepath}: {e}")
    return tasks

def load_tasks(username: str) -> List[Task]:
    """
    Loads a user's task collection, creating an empty document if absent.
    """
    filepath = tasks_file(username)
    return _tasks_from_json(_load_json(filepath, []), filepath)

def save_tasks(username: str, tasks: List[Task]) -> bool:
    """
    Overwrites the user's task document. Returns False (after logging) on I/O failure.
    """
    filepath = tasks_file(username)
    try:
        _save_json(filepath, [t.to_dict() for t in tasks])
    except OSError as e:
        logger.error(f"Error writing tasks file {filepath}: {e}")
        return False
    logger.debug(f"Saved {len(tasks)} tasks to {filepath}")
    return True

def save_backup(username: str, tasks: List[Task]) -> Optional[Path]:
    filepath = backup_file(username)
    try:
        _save_json(filepath, [t.to_dict() for t in tasks])
    except OSError as e:
        logger.error(f"Error creating backup {filepath}: {e}")
        return None
    return filepath

def load_backup(username: str) -> Optional[List[Task]]:
    """
    Returns the user's backup collection, or None if no backup exists or it
    cannot be read.
    """
    filepath = backup_file(username)
    if not filepath.exists():
        return None
    try:
        with open(filepath, 'r', encoding='utf-8') as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading backup {filepath}: {e}")
        return None
    return _tasks_from_json(data, filepath)

def backup_info(username: str) -> Optional[BackupInfo]:
    filepath = backup_file(username)
    if not filepath.exists():
        return None
    stat = filepath.stat()
    return BackupInfo(
        path=filepath,
        modified=datetime.fromtimestamp(stat.st_mtime),
        size_bytes=stat.st_size,
    )

def load_users() -> List[dict]:
    data = _load_json(users_file(), [])
    return data if isinstance(data, list) else []

def save_users(users: List[dict]) -> bool:
    filepath = users_file()
    try:
        _save_json(filepath, users)
    except OSError as e:
        logger.error(f"Error writing users file {filepath}: {e}")
        return False
    return True
