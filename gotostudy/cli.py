#!/usr/bin/env python3
"""GoToStudy CLI.

Command-line interface for the user and task backend. Provides commands for
database setup, running the HTTP server, and managing users and tasks
directly against the configured database.
"""

from collections.abc import Generator
from contextlib import contextmanager
from uuid import UUID

import typer
import uvicorn
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from .config import get_settings
from .container import AppContainer, sql_container
from .core.errors import GoToStudyError, NoTasksFoundError
from .database import create_db_and_tables, get_engine, verify_database
from .observability import setup_logging
from .schemas.models import Task, User


# Initialize CLI and console
app = typer.Typer(help="GoToStudy user and task backend CLI")
users_app = typer.Typer(help="Manage users")
tasks_app = typer.Typer(help="Manage a user's tasks")
app.add_typer(users_app, name="users")
app.add_typer(tasks_app, name="tasks")
console = Console()


@contextmanager
def _services() -> Generator[AppContainer, None, None]:
    """Yield a SQL-backed container; domain errors end the command."""
    engine = get_engine()
    create_db_and_tables(engine)
    try:
        with sql_container(engine) as container:
            yield container
    except GoToStudyError as e:
        console.print(f"[bold red]✗ {e.message}[/bold red]")
        raise typer.Exit(code=1) from e


def _user_table(users: list[User], title: str = "Users") -> Table:
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("ID", style="dim")
    table.add_column("Username", style="cyan")
    table.add_column("Email", style="green")
    table.add_column("Created", style="yellow")
    for user in users:
        table.add_row(
            str(user.id), user.username, user.email, f"{user.created_at:%Y-%m-%d %H:%M}"
        )
    return table


def _task_table(tasks: list[Task], title: str = "Tasks") -> Table:
    table = Table(title=title, show_header=True, header_style="bold blue")
    table.add_column("ID", style="dim")
    table.add_column("Title", style="cyan")
    table.add_column("Done", style="green")
    table.add_column("Updated", style="yellow")
    for task in tasks:
        table.add_row(
            str(task.id),
            task.title,
            "✓" if task.completed else "",
            f"{task.updated_at:%Y-%m-%d %H:%M}",
        )
    return table


@app.command("init-db")
def init_db():
    """Create the database tables and check they are reachable."""
    engine = get_engine()
    create_db_and_tables(engine)
    if not verify_database(engine):
        console.print("[bold red]✗ Database verification failed[/bold red]")
        raise typer.Exit(code=1)
    console.print(f"[bold green]✓ Database ready at {engine.url}[/bold green]")


@app.command()
def serve(
    host: str | None = typer.Option(None, "--host", help="Interface to bind"),
    port: int | None = typer.Option(None, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
):
    """Run the HTTP API."""
    settings = get_settings()
    uvicorn.run(
        "gotostudy.api.app:create_app",
        factory=True,
        host=host or settings.server.host,
        port=port or settings.server.port,
        reload=reload,
        proxy_headers=True,
        forwarded_allow_ips=",".join(settings.server.trusted_proxies),
        log_level=settings.effective_log_level.lower(),
    )


@users_app.command("list")
def list_users():
    """List every user."""
    with _services() as services:
        users = services.user_service.get_all_users()

    if not users:
        console.print("[yellow]No users registered[/yellow]")
        return
    console.print(_user_table(users))


@users_app.command("add")
def add_user(
    username: str = typer.Argument(..., help="Display name"),
    email: str = typer.Argument(..., help="Unique email address"),
):
    """Register a new user."""
    with _services() as services:
        user = services.user_service.register_user(
            User(username=username, email=email)
        )
    console.print(f"[bold green]✓ Registered {user.username}[/bold green] ({user.id})")


@users_app.command("show")
def show_user(user_id: UUID = typer.Argument(..., help="User ID")):
    """Show a user and the tasks it owns."""
    with _services() as services:
        user = services.user_service.get_user_by_id(user_id)

    completed = sum(1 for task in user.tasks if task.completed)
    console.print(
        Panel.fit(
            f"[bold cyan]{user.username}[/bold cyan] <{user.email}>\n"
            f"ID: {user.id}\n"
            f"Created: {user.created_at:%Y-%m-%d %H:%M}\n"
            f"Updated: {user.updated_at:%Y-%m-%d %H:%M}\n"
            f"Tasks: {len(user.tasks)} ({completed} completed)",
            title="User",
        )
    )
    if user.tasks:
        console.print(_task_table(user.tasks))


@users_app.command("update")
def update_user(
    user_id: UUID = typer.Argument(..., help="User ID"),
    username: str | None = typer.Option(None, "--username", "-u", help="New username"),
    email: str | None = typer.Option(None, "--email", "-e", help="New email"),
):
    """Change a user's username and/or email."""
    fields = {}
    if username is not None:
        fields["username"] = username
    if email is not None:
        fields["email"] = email

    with _services() as services:
        user = services.user_service.update_user_fields(user_id, fields)
    console.print(
        f"[bold green]✓ Updated {user.username}[/bold green] <{user.email}>"
    )


@users_app.command("delete")
def delete_user(
    user_id: UUID = typer.Argument(..., help="User ID"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Skip confirmation"),
):
    """Delete a user and all of its tasks."""
    if not yes:
        typer.confirm(f"Delete user {user_id} and all of its tasks?", abort=True)

    with _services() as services:
        services.user_service.delete_user(user_id)
    console.print(f"[bold green]✓ Deleted user {user_id}[/bold green]")


@tasks_app.command("list")
def list_tasks(user_id: UUID = typer.Argument(..., help="Owner's user ID")):
    """List the tasks a user owns."""
    with _services() as services:
        try:
            tasks = services.task_service.find_user_tasks(user_id)
        except NoTasksFoundError:
            tasks = []

    if not tasks:
        console.print("[yellow]No tasks for this user yet[/yellow]")
        return
    console.print(_task_table(tasks))


@tasks_app.command("add")
def add_task(
    user_id: UUID = typer.Argument(..., help="Owner's user ID"),
    title: str = typer.Argument(..., help="Task title"),
    description: str = typer.Option(
        ..., "--description", "-d", help="What needs doing"
    ),
):
    """Create a task for a user."""
    with _services() as services:
        task = services.task_service.create_task(
            user_id, Task(title=title, description=description)
        )
    console.print(f"[bold green]✓ Created task {task.title}[/bold green] ({task.id})")


@tasks_app.command("done")
def complete_task(
    user_id: UUID = typer.Argument(..., help="Owner's user ID"),
    task_id: UUID = typer.Argument(..., help="Task ID"),
    undo: bool = typer.Option(False, "--undo", help="Mark as not completed"),
):
    """Mark a task as completed."""
    with _services() as services:
        task = services.task_service.find_task_by_id(user_id, task_id)
        services.task_service.update_task(
            user_id, task_id, task.model_copy(update={"completed": not undo})
        )

    state = "open" if undo else "completed"
    console.print(f"[bold green]✓ Task {task.title} marked {state}[/bold green]")


@tasks_app.command("delete")
def delete_task(
    user_id: UUID = typer.Argument(..., help="Owner's user ID"),
    task_id: UUID = typer.Argument(..., help="Task ID"),
):
    """Delete a task."""
    with _services() as services:
        services.task_service.delete_task(user_id, task_id)
    console.print(f"[bold green]✓ Deleted task {task_id}[/bold green]")


@app.callback()
def main(
    log_level: str | None = typer.Option(
        None, "--log-level", help="Override the configured logging level"
    ),
):
    """GoToStudy backend CLI.

    Manage users and their tasks, initialise the database, and run the HTTP
    API.
    """
    settings = get_settings()
    setup_logging(log_level or settings.effective_log_level, settings.log_format)


if __name__ == "__main__":
    app()
