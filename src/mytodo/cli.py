"""Command-line interface for mytodo"""

from __future__ import annotations

import sys
from typing import Annotated

import typer
from prompt_toolkit import PromptSession
from prompt_toolkit.enums import EditingMode

from mytodo.app import TodoApp, build_app
from mytodo.commands import handle_slash_command
from mytodo.conf import settings
from mytodo.log import setup_logging
from mytodo.todo.models import Task
from mytodo.todo.render import print_tasks
from mytodo.todo.store import find_sub_task

app = typer.Typer(add_completion=False, no_args_is_help=False)


def _get_app(ctx: typer.Context) -> TodoApp:
    todo_app = ctx.obj
    if not isinstance(todo_app, TodoApp):
        raise RuntimeError("mytodo commands must run through the mytodo app callback")
    return todo_app


def _finish(todo_app: TodoApp, ok: bool) -> None:
    """Exit with status 1 and the binding's error message if the operation failed."""
    if not ok:
        print(todo_app.binding.error_message or "Operation failed.", file=sys.stderr)
        raise typer.Exit(code=1)


def _require_task(todo_app: TodoApp, ref: str) -> Task:
    task = todo_app.store.find_task(ref)
    if task is None:
        # Unknown references are not errors.
        print(f"No task matches '{ref}'.")
        raise typer.Exit(code=0)
    return task


def interactive_loop(todo_app: TodoApp, prompt_text: str = "todo> ") -> None:
    """Run interactive prompt loop driven by slash commands."""
    binding = todo_app.binding
    print_tasks(binding.tasks)
    print("Type /help for commands.")

    prompt_session: PromptSession[str] = PromptSession(editing_mode=EditingMode.EMACS)
    while True:
        try:
            user_input: str = prompt_session.prompt(prompt_text)
        except (EOFError, KeyboardInterrupt):
            # Exit cleanly on Ctrl+D (EOF) or Ctrl+C.
            return

        if not user_input.strip():
            continue

        if handle_slash_command(user_input, binding):
            continue

        # Plain text adds a task.
        if not binding.add_task(user_input.strip()) and binding.error_message:
            print(f"Error: {binding.error_message}")


@app.callback(invoke_without_command=True)
def run(
    ctx: typer.Context,
    memory: Annotated[
        bool,
        typer.Option(
            "--memory",
            help="Keep tasks in memory only (nothing is written to disk).",
        ),
    ] = False,
) -> None:
    """Manage a task list with sub-tasks."""
    setup_logging(settings.LOG_LEVEL, settings.log_file)
    todo_app = build_app(settings, in_memory=memory)
    ctx.obj = todo_app

    # Typer always invokes the callback, even when a subcommand is given.
    if ctx.invoked_subcommand is not None:
        return

    interactive_loop(todo_app)


@app.command("list")
def list_cmd(
    ctx: typer.Context,
    show_all: Annotated[
        bool,
        typer.Option("--all", "-a", help="Show sub-tasks of collapsed tasks too."),
    ] = False,
) -> None:
    """Show all tasks."""
    todo_app = _get_app(ctx)
    ok = todo_app.binding.load()
    _finish(todo_app, ok)
    print_tasks(todo_app.binding.tasks, show_all=show_all)


@app.command()
def add(
    ctx: typer.Context,
    title: Annotated[list[str], typer.Argument(help="Task title.")],
) -> None:
    """Add a task."""
    todo_app = _get_app(ctx)
    text = " ".join(title).strip()
    if not text:
        print("Title must not be empty.")
        return
    _finish(todo_app, todo_app.binding.add_task(text))
    print(f"Added: {text}")


@app.command()
def toggle(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Task position (1-based) or id prefix.")],
) -> None:
    """Mark a task done (and all its sub-tasks) or not done."""
    todo_app = _get_app(ctx)
    task = _require_task(todo_app, ref)
    _finish(todo_app, todo_app.binding.toggle_task_completion(task.id))
    state = "done" if task.is_completed else "not done"
    print(f"{task.title}: {state}")


@app.command()
def delete(
    ctx: typer.Context,
    refs: Annotated[list[str], typer.Argument(help="Task positions (1-based) or id prefixes.")],
) -> None:
    """Delete tasks together with their sub-tasks."""
    todo_app = _get_app(ctx)
    tasks: list[Task] = []
    for ref in refs:
        task = todo_app.store.find_task(ref)
        if task is None:
            print(f"No task matches '{ref}'.")
        else:
            tasks.append(task)
    if not tasks:
        return
    _finish(todo_app, todo_app.binding.delete_tasks(t.id for t in tasks))
    print(f"Deleted {len(tasks)} task(s).")


@app.command()
def expand(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Task position (1-based) or id prefix.")],
) -> None:
    """Expand or collapse a task's sub-tasks."""
    todo_app = _get_app(ctx)
    task = _require_task(todo_app, ref)
    _finish(todo_app, todo_app.binding.toggle_task_expanded(task.id))
    print(f"{task.title}: {'expanded' if task.is_expanded else 'collapsed'}")


@app.command("sub-add")
def sub_add(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Parent task position or id prefix.")],
    title: Annotated[list[str], typer.Argument(help="Sub-task title.")],
) -> None:
    """Add a sub-task to a task."""
    todo_app = _get_app(ctx)
    task = _require_task(todo_app, ref)
    text = " ".join(title).strip()
    if not text:
        print("Title must not be empty.")
        return
    _finish(todo_app, todo_app.binding.add_sub_task(task.id, text))
    print(f"Added to {task.title}: {text}")


@app.command("sub-toggle")
def sub_toggle(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Parent task position or id prefix.")],
    sub_ref: Annotated[str, typer.Argument(help="Sub-task position or id prefix.")],
) -> None:
    """Mark a sub-task done or not done; the parent follows its sub-tasks."""
    todo_app = _get_app(ctx)
    task = _require_task(todo_app, ref)
    sub = find_sub_task(task, sub_ref)
    if sub is None:
        print(f"No sub-task matches '{sub_ref}' in '{task.title}'.")
        return
    _finish(todo_app, todo_app.binding.toggle_sub_task_completion(task.id, sub.id))
    print(f"{sub.title}: {'done' if sub.is_completed else 'not done'}")


@app.command("sub-delete")
def sub_delete(
    ctx: typer.Context,
    ref: Annotated[str, typer.Argument(help="Parent task position or id prefix.")],
    sub_ref: Annotated[str, typer.Argument(help="Sub-task position or id prefix.")],
) -> None:
    """Delete a sub-task."""
    todo_app = _get_app(ctx)
    task = _require_task(todo_app, ref)
    sub = find_sub_task(task, sub_ref)
    if sub is None:
        print(f"No sub-task matches '{sub_ref}' in '{task.title}'.")
        return
    _finish(todo_app, todo_app.binding.delete_sub_task(task.id, sub.id))
    print(f"Deleted sub-task: {sub.title}")


def main() -> None:
    app()
