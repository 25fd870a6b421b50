"""Slash commands for the interactive shell.

Built-in commands are registered in the COMMANDS dict. Task and sub-task
references are 1-based positions (as shown by /list) or id prefixes.

    /add Buy milk
    /sub add 1 2% milk
    /sub toggle 1 1
"""

from __future__ import annotations

import dataclasses
import shlex
from collections.abc import Callable

import typer

from mytodo.todo.binding import TaskListBinding
from mytodo.todo.models import Task
from mytodo.todo.render import print_tasks
from mytodo.todo.store import find_sub_task

SlashCommandHandler = Callable[[list[str], TaskListBinding], None]


@dataclasses.dataclass(frozen=True, slots=True)
class SlashCommandSpec:
    handler: SlashCommandHandler
    description: str
    usage: str | None = None


def _parse_slash_command_argv(text: str) -> list[str]:
    """Parse a slash command into argv tokens.

    Quotes group tokens (e.g. /add "buy milk"); `#` is not a comment.
    """
    lexer = shlex.shlex(text, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    return list(lexer)


def _report(binding: TaskListBinding, ok: bool) -> None:
    if not ok and binding.error_message:
        print(f"Error: {binding.error_message}")


def _resolve_task(binding: TaskListBinding, ref: str) -> Task | None:
    task = binding.store.find_task(ref)
    if task is None:
        print(f"No task matches '{ref}'.")
    return task


def _cmd_list(args: list[str], binding: TaskListBinding) -> None:
    """Reload from storage and show the task list."""
    show_all = "--all" in args
    ok = binding.load()
    _report(binding, ok)
    print_tasks(binding.tasks, show_all=show_all)


def _cmd_add(args: list[str], binding: TaskListBinding) -> None:
    title = " ".join(args)
    if not title:
        print("Usage: /add <title>")
        return
    _report(binding, binding.add_task(title))


def _cmd_toggle(args: list[str], binding: TaskListBinding) -> None:
    if len(args) != 1:
        print("Usage: /toggle <task>")
        return
    task = _resolve_task(binding, args[0])
    if task is not None:
        _report(binding, binding.toggle_task_completion(task.id))


def _cmd_expand(args: list[str], binding: TaskListBinding) -> None:
    if len(args) != 1:
        print("Usage: /expand <task>")
        return
    task = _resolve_task(binding, args[0])
    if task is not None:
        _report(binding, binding.toggle_task_expanded(task.id))


def _cmd_delete(args: list[str], binding: TaskListBinding) -> None:
    if not args:
        print("Usage: /delete <task> [<task> ...]")
        return
    # Resolve everything first so positions refer to the list as shown.
    tasks = [task for ref in args if (task := _resolve_task(binding, ref)) is not None]
    if tasks:
        _report(binding, binding.delete_tasks(t.id for t in tasks))


def _cmd_sub(args: list[str], binding: TaskListBinding) -> None:
    usage = "Usage: /sub add <task> <title> | /sub toggle <task> <sub> | /sub delete <task> <sub>"
    if len(args) < 3:
        print(usage)
        return

    action, task_ref, rest = args[0].lower(), args[1], args[2:]
    task = _resolve_task(binding, task_ref)
    if task is None:
        return

    if action == "add":
        _report(binding, binding.add_sub_task(task.id, " ".join(rest)))
        return

    if action not in ("toggle", "delete") or len(rest) != 1:
        print(usage)
        return

    sub = find_sub_task(task, rest[0])
    if sub is None:
        print(f"No sub-task matches '{rest[0]}' in '{task.title}'.")
        return
    if action == "toggle":
        _report(binding, binding.toggle_sub_task_completion(task.id, sub.id))
    else:
        _report(binding, binding.delete_sub_task(task.id, sub.id))


def _cmd_help(args: list[str], binding: TaskListBinding) -> None:
    """Show help for available commands."""
    del args, binding
    print("Commands:")
    for name in sorted(COMMANDS):
        spec = COMMANDS[name]
        usage = spec.usage or name
        print(f"  {usage:<28} - {spec.description}")


def _cmd_quit(args: list[str], binding: TaskListBinding) -> None:
    del args, binding
    print("Goodbye!")
    raise typer.Exit(code=0)


COMMANDS: dict[str, SlashCommandSpec] = {
    "/add": SlashCommandSpec(
        handler=_cmd_add,
        description="Add a task",
        usage="/add <title>",
    ),
    "/delete": SlashCommandSpec(
        handler=_cmd_delete,
        description="Delete tasks and their sub-tasks",
        usage="/delete <task>...",
    ),
    "/expand": SlashCommandSpec(
        handler=_cmd_expand,
        description="Show or hide a task's sub-tasks",
        usage="/expand <task>",
    ),
    "/help": SlashCommandSpec(
        handler=_cmd_help,
        description="Show this help",
    ),
    "/list": SlashCommandSpec(
        handler=_cmd_list,
        description="Reload and show tasks",
        usage="/list [--all]",
    ),
    "/quit": SlashCommandSpec(
        handler=_cmd_quit,
        description="Exit mytodo",
    ),
    "/sub": SlashCommandSpec(
        handler=_cmd_sub,
        description="Add, toggle or delete a sub-task",
        usage="/sub add|toggle|delete ...",
    ),
    "/toggle": SlashCommandSpec(
        handler=_cmd_toggle,
        description="Mark a task done or not done",
        usage="/toggle <task>",
    ),
}


def handle_slash_command(user_input: str, binding: TaskListBinding) -> bool:
    """Handle a slash command. Returns False if the input is not a command."""
    candidate = user_input.lstrip()
    if not candidate.startswith("/"):
        return False

    try:
        argv = _parse_slash_command_argv(candidate)
    except ValueError as e:
        print(f"Command parse error: {e}")
        return True

    if not argv:
        return False

    command, args = argv[0].lower(), argv[1:]
    spec = COMMANDS.get(command)
    if spec is None:
        print(f"Unknown command: {command}")
        return True

    spec.handler(args, binding)
    return True
