from __future__ import annotations

from rich.console import Console

from mytodo.todo.models import SubTask, Task
from mytodo.todo.render import print_tasks, short_id


def _tasks() -> list[Task]:
    return [
        Task(title="Done", is_completed=True),
        Task(
            title="Trip",
            is_expanded=True,
            sub_tasks=[SubTask(title="Hotel", is_completed=True), SubTask(title="Car")],
        ),
        Task(title="Collapsed", sub_tasks=[SubTask(title="Hidden")]),
    ]


def _render(tasks: list[Task], show_all: bool = False) -> str:
    console = Console(record=True, width=120)
    print_tasks(tasks, show_all=show_all, console=console)
    return console.export_text()


def test_print_tasks_empty() -> None:
    assert "No tasks." in _render([])


def test_print_tasks_checkboxes_markers_and_count() -> None:
    tasks = _tasks()
    lines = [line.rstrip() for line in _render(tasks).splitlines()]
    text = "\n".join(lines)

    assert f"1. [x] Done  ({short_id(tasks[0])})" in text
    assert "2. [ ] Trip" in text
    assert lines[1].endswith(" -")
    assert "1. [x] Hotel" in text
    assert "2. [ ] Car" in text
    assert "3. [ ] Collapsed" in text
    assert lines[4].endswith(" +")
    assert "Hidden" not in text
    assert "(1/3 completed)" in text


def test_print_tasks_show_all_includes_collapsed_sub_tasks() -> None:
    assert "Hidden" in _render(_tasks(), show_all=True)


def test_print_tasks_escapes_markup_in_titles() -> None:
    text = _render([Task(title="[bold]literal[/bold]")])

    assert "[ ] [bold]literal[/bold]" in text
    assert "(0/1 completed)" in text
