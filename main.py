import typer
import sys
from pathlib import Path
from datetime import date
from typing import Optional, Annotated, Callable, Dict, Tuple
from rich.console import Console
from rich.markup import escape
from rich.prompt import Prompt, Confirm
import auth
import config
import display
import queries
import storage
import tasks as task_ops
from models import TaskStatus
from session import Session

app = typer.Typer()
console = Console()

# --- prompts ---

def ask_task_name(label: str = "Task name") -> str:
    while True:
        try:
            return task_ops.validate_task_name(Prompt.ask(label))
        except task_ops.TaskValidationError as e:
            console.print(f"[red]{e}[/red]")

def ask_due_date() -> Optional[str]:
    if not Confirm.ask("Does this task have a due date?", default=False):
        return None
    while True:
        try:
            return task_ops.parse_due_date(Prompt.ask("Enter due date (YYYY-MM-DD or 'today', 'tomorrow')"))
        except task_ops.TaskValidationError as e:
            console.print(f"[red]{e}[/red]")

def ask_task_id(session: Session, action: str) -> Optional[int]:
    """
    Shows the current tasks and asks for the id to act on.
    Returns None when there are no tasks to choose from.
    """
    if not session.tasks:
        console.print(f"[yellow]No tasks available to {action}![/yellow]")
        return None
    display.render_tasks(console, session.tasks, f"Select task to {action}")
    while True:
        try:
            return task_ops.parse_task_id(Prompt.ask("Enter task ID"))
        except task_ops.TaskValidationError as e:
            console.print(f"[red]{e}[/red]")

# --- menu actions ---

def add_action(session: Session):
    name = ask_task_name()
    due_date = ask_due_date()
    session.apply(task_ops.add_task(session.tasks, session.history, session.username, name, due_date))
    new_task = session.tasks[-1]
    due_info = f"Due: {due_date}" if due_date else "No due date"
    console.print(f"[bold green]Task \"{escape(name)}\" added successfully! (ID: {new_task.id}, {due_info})[/bold green]")

def show_action(session: Session):
    display.render_tasks(console, session.tasks, "Your Tasks")

def sort_action(session: Session):
    if not session.tasks:
        console.print("[yellow]No tasks found![/yellow]")
        return
    order = Prompt.ask("Sort order: [n]ewest first or [o]ldest first", choices=["n", "o"], default="n")
    descending = order == "n"
    title = "Tasks sorted by date (newest first)" if descending else "Tasks sorted by date (oldest first)"
    display.render_tasks(console, queries.sort_by_timestamp(session.tasks, descending), title)

def overdue_action(session: Session):
    overdue = queries.overdue_tasks(session.tasks)
    if not overdue:
        console.print("[green]No overdue tasks! You're all caught up![/green]")
        return
    display.render_tasks(console, overdue, "Overdue Tasks")
    console.print("[bold red]These tasks need your attention![/bold red]")

def toggle_action(session: Session):
    task_id = ask_task_id(session, "mark as completed/pending")
    if task_id is None:
        return
    session.apply(task_ops.toggle_task_status(session.tasks, session.history, session.username, task_id))
    task = task_ops.find_task(session.tasks, task_id)
    console.print(f"[bold green]Task \"{escape(task.name)}\" marked as {task.status.value}![/bold green]")

def delete_action(session: Session):
    task_id = ask_task_id(session, "delete")
    if task_id is None:
        return
    task = task_ops.find_task(session.tasks, task_id)
    session.apply(task_ops.delete_task(session.tasks, session.history, session.username, task_id))
    console.print(f"[bold green]Task \"{escape(task.name)}\" deleted successfully![/bold green]")

def edit_action(session: Session):
    task_id = ask_task_id(session, "edit")
    if task_id is None:
        return
    task = task_ops.find_task(session.tasks, task_id)
    if task is None:
        raise task_ops.TaskNotFoundError(task_id)
    console.print(f"Current name: \"{escape(task.name)}\"")
    new_name = ask_task_name("New task name")
    session.apply(task_ops.edit_task_name(session.tasks, session.history, session.username, task_id, new_name))
    console.print("[bold green]Task updated successfully![/bold green]")
    console.print(f"   Old: \"{escape(task.name)}\"")
    console.print(f"   New: \"{escape(new_name)}\"")

def status_action(session: Session):
    if not session.tasks:
        console.print("[yellow]No tasks available to filter![/yellow]")
        return
    choice = Prompt.ask("Filter by status: [p]ending or [c]ompleted", choices=["p", "c"], default="p")
    status = TaskStatus.PENDING if choice == "p" else TaskStatus.COMPLETED
    filtered = queries.filter_by_status(session.tasks, status)
    if not filtered:
        console.print(f"[yellow]No {status.value.lower()} tasks found![/yellow]")
        return
    display.render_tasks(console, filtered, f"{display.STATUS_ICONS[status]} {status.value} Tasks")

def search_action(session: Session):
    if not session.tasks:
        console.print("[yellow]No tasks available to search![/yellow]")
        return
    keyword = ""
    while not keyword:
        keyword = Prompt.ask("Search keyword").strip()
    matches = queries.search_tasks(session.tasks, keyword)
    if not matches:
        console.print(f"[yellow]No tasks found containing \"{escape(keyword)}\"[/yellow]")
        return
    display.render_tasks(console, matches, f"Search results for \"{escape(keyword)}\"")

def backup_action(session: Session):
    path = task_ops.backup_tasks(session.tasks, session.username)
    if path is None:
        console.print("[bold red]Error creating backup.[/bold red]")
        return
    console.print("[bold green]Backup created successfully![/bold green]")
    console.print(f"Location: {path}")
    console.print(f"Backed up: {len(session.tasks)} tasks")

def restore_action(session: Session):
    session.apply(task_ops.restore_from_backup(session.history, session.username))
    console.print("[bold green]Tasks restored from backup successfully![/bold green]")
    console.print(f"Restored: {len(session.tasks)} tasks")

def check_backup_action(session: Session):
    display.render_backup_info(console, session.username, storage.backup_info(session.username))

def undo_action(session: Session):
    step = session.undo()
    if step is None:
        console.print("[yellow]Nothing to undo.[/yellow]")
        return
    console.print(f"[cyan]Undone: {escape(step.label)}[/cyan]")

def redo_action(session: Session):
    step = session.redo()
    if step is None:
        console.print("[yellow]Nothing to redo.[/yellow]")
        return
    console.print(f"[cyan]Redone: {escape(step.label)}[/cyan]")

EXIT_CHOICE = "0"

MENU: Dict[str, Tuple[str, Callable[[Session], None]]] = {
    "1": ("[cyan]Add a new task[/cyan]", add_action),
    "2": ("[cyan]Show all tasks[/cyan]", show_action),
    "3": ("[cyan]Show tasks by date[/cyan]", sort_action),
    "4": ("[red]Show overdue tasks[/red]", overdue_action),
    "5": ("[cyan]Mark task completed/pending[/cyan]", toggle_action),
    "6": ("[red]Delete a task[/red]", delete_action),
    "7": ("[yellow]Edit task name[/yellow]", edit_action),
    "8": ("[cyan]Filter tasks by status[/cyan]", status_action),
    "9": ("[cyan]Search tasks[/cyan]", search_action),
    "10": ("[magenta]Backup tasks[/magenta]", backup_action),
    "11": ("[magenta]Restore from backup[/magenta]", restore_action),
    "12": ("[magenta]Check backup[/magenta]", check_backup_action),
    "13": ("[blue]Undo last action[/blue]", undo_action),
    "14": ("[blue]Redo last action[/blue]", redo_action),
}

def run_menu(session: Session):
    """
    Main menu loop. Returns when the user picks Exit.
    """
    while True:
        console.print(f"\n[bold]Main Menu[/bold] [dim]({session.username})[/dim]")
        for key, (label, _) in MENU.items():
            console.print(f"{key}. {label}")
        console.print(f"{EXIT_CHOICE}. [red]Exit[/red]")

        choice = Prompt.ask("What would you like to do?", choices=list(MENU) + [EXIT_CHOICE], default="2")
        if choice == EXIT_CHOICE:
            console.print("[bold blue]Goodbye![/bold blue]")
            return

        _, action = MENU[choice]
        try:
            action(session)
        except (task_ops.TaskNotFoundError, task_ops.BackupNotFoundError, task_ops.TaskValidationError) as e:
            console.print(f"[bold red]{escape(str(e))}[/bold red]")

def _configure(data_dir: Optional[Path]):
    config.setup_logging()
    if data_dir is not None:
        storage.DATA_DIR = data_dir

@app.command()
def interactive(
    data_dir: Annotated[Optional[Path], typer.Option(help="Directory holding users and task files")] = None
):
    """
    Log in and start the interactive session.
    """
    _configure(data_dir)
    username = auth.authenticate(console)
    if username is None:
        console.print("[bold blue]Goodbye![/bold blue]")
        return

    session = Session.open(username)

    overdue = queries.overdue_tasks(session.tasks)
    if overdue:
        console.print(f"🚨 [bold red]You have {len(overdue)} OVERDUE task(s)![/bold red]")

    run_menu(session)

@app.command(name="list")
def list_tasks(
    status: Annotated[Optional[TaskStatus], typer.Option(help="Only show tasks with this status")] = None,
    search: Annotated[Optional[str], typer.Option(help="Case-insensitive keyword in the task name")] = None,
    sort: Annotated[Optional[str], typer.Option(help="Sort by creation time: 'asc' or 'desc'")] = None,
    overdue: Annotated[bool, typer.Option(help="Only show overdue tasks")] = False,
    data_dir: Annotated[Optional[Path], typer.Option(help="Directory holding users and task files")] = None
):
    """
    Log in, print a filtered task table and exit.
    """
    if sort is not None and sort not in ("asc", "desc"):
        console.print("[bold red]--sort must be 'asc' or 'desc'.[/bold red]")
        raise typer.Exit(code=2)
    if search is not None:
        search = search.strip()
        if not search:
            console.print("[bold red]--search needs a non-blank keyword.[/bold red]")
            raise typer.Exit(code=2)

    _configure(data_dir)
    username = auth.authenticate(console)
    if username is None:
        return

    tasks = storage.load_tasks(username)
    title = "Your Tasks"
    if status is not None:
        tasks = queries.filter_by_status(tasks, status)
        title += f" | Status: {status.value}"
    if search:
        tasks = queries.search_tasks(tasks, search)
        title += f" | Search: {escape(search)}"
    if overdue:
        tasks = queries.overdue_tasks(tasks, date.today())
        title += " | Overdue"
    if sort:
        tasks = queries.sort_by_timestamp(tasks, descending=sort == "desc")

    display.render_tasks(console, tasks, title)

if __name__ == "__main__":
    if len(sys.argv) == 1:
        # Default to interactive mode if no arguments provided
        sys.argv.append("interactive")
    app()
