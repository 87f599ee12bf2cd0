from datetime import date, datetime
from typing import List, Optional
from rich.console import Console
from rich.markup import escape
from rich.table import Table
from models import Task, TaskStatus
from queries import is_overdue, summarize
from storage import BackupInfo

NAME_WIDTH = 45

STATUS_ICONS = {
    TaskStatus.PENDING: "⏳",
    TaskStatus.COMPLETED: "✅",
}

def _truncate(name: str, width: int = NAME_WIDTH) -> str:
    return name if len(name) <= width else name[:width - 3] + "..."

def format_created(timestamp: str) -> str:
    try:
        stamp = datetime.fromisoformat(timestamp)
    except (TypeError, ValueError):
        return timestamp or ""
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone()
    return stamp.strftime("%Y-%m-%d %H:%M")

def row_style(task: Task, today: Optional[date] = None) -> str:
    if is_overdue(task, today):
        return "bold red"
    if task.status == TaskStatus.COMPLETED:
        return "green"
    return "yellow"

def render_tasks(console: Console, tasks: List[Task], title: str = "Your Tasks",
                 today: Optional[date] = None):
    if not tasks:
        console.print("[yellow]No tasks found! Add your first task to get started.[/yellow]")
        return

    table = Table(title=title)
    table.add_column("ID", style="bold white")
    table.add_column("Task Name", max_width=NAME_WIDTH)
    table.add_column("Status")
    table.add_column("Due Date")
    table.add_column("Created", style="dim")

    for t in tasks:
        table.add_row(
            f"{t.id:03d}",
            escape(_truncate(t.name)),
            f"{STATUS_ICONS[t.status]} {t.status.value}",
            t.due_date or "No due date",
            format_created(t.timestamp),
            style=row_style(t, today),
        )

    console.print(table)
    summary = summarize(tasks, today)
    console.print(
        f"Total: {summary.total} tasks | "
        f"[green]{summary.completed} completed[/green] | "
        f"[red]{summary.overdue} overdue[/red]"
    )

def render_backup_info(console: Console, username: str, info: Optional[BackupInfo]):
    if info is None:
        console.print(f"[yellow]No backup found for user '{username}'.[/yellow]")
        return
    console.print(f"[bold]Backup exists for user '{username}'[/bold]")
    console.print(f"Location: {info.path}")
    console.print(f"Last modified: {info.modified:%Y-%m-%d %H:%M:%S}")
    console.print(f"File size: {info.size_bytes / 1024:.2f} KB")
