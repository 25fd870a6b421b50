from __future__ import annotations

from uuid import uuid4

from mytodo.todo.binding import TaskListBinding, TaskListState
from mytodo.todo.store import TaskStore


def test_binding_starts_with_store_snapshot(storage) -> None:
    store = TaskStore(storage)
    store.add_task("seed")

    binding = TaskListBinding(store)

    assert [t.title for t in binding.tasks] == ["seed"]
    assert binding.error_message is None


def test_subscribers_receive_each_new_state_until_unsubscribed(storage) -> None:
    binding = TaskListBinding(TaskStore(storage))
    seen: list[TaskListState] = []
    unsubscribe = binding.subscribe(seen.append)

    binding.add_task("one")
    unsubscribe()
    binding.add_task("two")

    assert len(seen) == 1
    assert [t.title for t in seen[0].tasks] == ["one"]
    assert [t.title for t in binding.tasks] == ["one", "two"]


def test_empty_titles_are_rejected_before_the_store(storage) -> None:
    binding = TaskListBinding(TaskStore(storage))
    seen: list[TaskListState] = []
    binding.subscribe(seen.append)

    assert binding.add_task("") is False
    assert binding.add_sub_task(uuid4(), "") is False
    assert seen == []
    assert storage.save_calls == 0


def test_save_failure_sets_error_message_and_keeps_memory_change(storage) -> None:
    binding = TaskListBinding(TaskStore(storage))
    storage.fail_save = True

    ok = binding.add_task("volatile")

    assert ok is False
    assert binding.error_message == "Failed to add task: disk full"
    assert [t.title for t in binding.tasks] == ["volatile"]


def test_successful_operation_clears_previous_error(storage) -> None:
    binding = TaskListBinding(TaskStore(storage))
    storage.fail_save = True
    binding.add_task("a")
    storage.fail_save = False

    assert binding.add_task("b") is True
    assert binding.error_message is None


def test_load_failure_reports_error_and_stops_loading(storage) -> None:
    binding = TaskListBinding(TaskStore(storage))
    states: list[TaskListState] = []
    binding.subscribe(states.append)
    storage.fail_load = True

    assert binding.load() is False

    assert states[0].is_loading is True
    assert states[-1].is_loading is False
    assert states[-1].error_message == "Failed to load tasks: disk unavailable"


def test_binding_routes_every_operation_to_the_store(storage) -> None:
    binding = TaskListBinding(TaskStore(storage))
    binding.add_task("A")
    binding.add_task("B")
    task_id = binding.tasks[0].id

    binding.toggle_task_expanded(task_id)
    binding.add_sub_task(task_id, "a1")
    sub_id = binding.tasks[0].sub_tasks[0].id
    binding.toggle_sub_task_completion(task_id, sub_id)

    assert binding.tasks[0].is_expanded is True
    assert binding.tasks[0].is_completed is True

    binding.toggle_task_completion(task_id)
    assert binding.tasks[0].is_completed is False

    binding.delete_sub_task(task_id, sub_id)
    assert binding.tasks[0].sub_tasks == []

    binding.delete_tasks_at([1])
    assert [t.title for t in binding.tasks] == ["A"]

    binding.delete_tasks([task_id])
    assert binding.tasks == ()


def test_published_states_do_not_change_after_later_operations(storage) -> None:
    binding = TaskListBinding(TaskStore(storage))
    binding.add_task("A")
    binding.add_sub_task(binding.tasks[0].id, "a1")
    earlier = binding.state

    binding.toggle_task_completion(earlier.tasks[0].id)

    assert earlier.tasks[0].is_completed is False
    assert earlier.tasks[0].sub_tasks[0].is_completed is False
    assert binding.tasks[0].is_completed is True
    assert binding.tasks[0].sub_tasks[0].is_completed is True
    assert binding.tasks[0] is not binding.store.tasks[0]
