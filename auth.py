import logging
import re
from typing import Optional
import bcrypt
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
import storage

logger = logging.getLogger(__name__)

USERNAME_PATTERN = re.compile(r"^[a-zA-Z0-9]{3,20}$")
MIN_PASSWORD_LENGTH = 4
MAX_PASSWORD_LENGTH = 50
# bcrypt only looks at the first 72 bytes
MAX_PASSWORD_BYTES = 72
BCRYPT_ROUNDS = 10

class AuthError(Exception):
    pass

def hash_password(password: str, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("ascii")

def verify_password(password: str, password_hash: str) -> bool:
    """
    Checks a password against a stored bcrypt hash ($2a$/$2b$/$2y$).
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("ascii"))
    except (ValueError, TypeError):
        logger.warning("Unreadable password hash in users file")
        return False

def validate_username(username: str) -> str:
    username = (username or "").strip()
    if not USERNAME_PATTERN.match(username):
        raise AuthError("Username must be 3-20 characters, letters and numbers only!")
    return username

def validate_password(password: str):
    if not password or len(password) < MIN_PASSWORD_LENGTH:
        raise AuthError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long!")
    if len(password) > MAX_PASSWORD_LENGTH or len(password.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise AuthError(f"Password cannot exceed {MAX_PASSWORD_LENGTH} characters!")

def register_user(username: str, password: str) -> str:
    username = validate_username(username)
    validate_password(password)
    users = storage.load_users()
    if any(u.get("username") == username for u in users):
        raise AuthError("Username already exists. Please try a different name.")
    users.append({"username": username, "passwordHash": hash_password(password)})
    if not storage.save_users(users):
        raise AuthError("Could not save the new account.")
    return username

def login_user(username: str, password: str) -> str:
    username = (username or "").strip()
    user = next((u for u in storage.load_users() if u.get("username") == username), None)
    if user is None:
        raise AuthError("User not found. Please check your username or create a new account.")
    if not verify_password(password, user.get("passwordHash", "")):
        raise AuthError("Invalid password. Please try again.")
    return username

def authenticate(console: Console) -> Optional[str]:
    """
    Runs the login / create-account menu until it yields a username.
    Returns None if the user chooses to exit.
    """
    console.print(Panel.fit("[bold blue]Task Manager[/bold blue]\nYour personal CLI todo list", border_style="blue"))
    console.print("[bold]Authentication Required[/bold]")

    while True:
        console.print("1. [cyan]Login to existing account[/cyan]")
        console.print("2. [cyan]Create new account[/cyan]")
        console.print("3. [red]Exit application[/red]")
        choice = Prompt.ask("Please choose an option", choices=["1", "2", "3"], default="1")

        if choice == "3":
            return None

        username = Prompt.ask("Username")
        password = Prompt.ask("Password", password=True)
        try:
            if choice == "2":
                username = register_user(username, password)
                console.print(f"[bold green]Account created successfully! Welcome, {username}![/bold green]")
            else:
                username = login_user(username, password)
                console.print(f"[bold green]Login successful! Welcome back, {username}![/bold green]")
            return username
        except AuthError as e:
            console.print(f"[red]{e}[/red]")
