"""Render the task list for terminal output.

Format:
    1. [x] Buy milk  (a1b2c3d4)
    2. [ ] Plan trip  (9f8e7d6c) -
         1. [x] Book hotel  (0a1b2c3d)
         2. [ ] Rent car  (4e5f6a7b)
    3. [ ] Call mom  (5c6d7e8f) +

    (1/3 completed)

``+`` marks a collapsed task with sub-tasks, ``-`` an expanded one.
"""

from __future__ import annotations

from collections.abc import Sequence

from rich.console import Console
from rich.markup import escape

from mytodo.todo.models import SubTask, Task

SHORT_ID_LEN = 8


def short_id(item: Task | SubTask) -> str:
    return str(item.id)[:SHORT_ID_LEN]


def _checkbox(done: bool) -> str:
    return "[x]" if done else "[ ]"


def print_tasks(
    tasks: Sequence[Task], *, show_all: bool = False, console: Console | None = None
) -> None:
    """Print the task list with rich colors."""
    console = console or Console()
    if not tasks:
        console.print("[dim]No tasks.[/]")
        return

    for pos, task in enumerate(tasks, start=1):
        style = "green" if task.is_completed else "bold"
        marker = ""
        if task.sub_tasks:
            marker = " [dim]-[/]" if task.is_expanded else " [dim]+[/]"
        console.print(
            f"{pos:>2}. [{style}]{escape(_checkbox(task.is_completed))} {escape(task.title)}[/]"
            f"  [dim]({short_id(task)})[/]{marker}"
        )
        if task.is_expanded or show_all:
            for sub_pos, sub in enumerate(task.sub_tasks, start=1):
                sub_style = "green" if sub.is_completed else "default"
                console.print(
                    f"      {sub_pos}. [{sub_style}]{escape(_checkbox(sub.is_completed))} "
                    f"{escape(sub.title)}[/]  [dim]({short_id(sub)})[/]"
                )

    completed = sum(1 for t in tasks if t.is_completed)
    console.print()
    console.print(f"[dim]({completed}/{len(tasks)} completed)[/]")
