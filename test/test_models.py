from datetime import datetime

from task_manager.models import ParsedTask, Task, TaskUpdate


def test_parsed_task_defaults():
    t = ParsedTask(task_name="Test")
    assert t.priority == "P3"
    assert t.assignee is None
    assert t.due_date is None


def test_task_name_is_trimmed():
    assert ParsedTask(task_name="  Buy milk ").task_name == "Buy milk"


def test_blank_assignee_becomes_none():
    assert ParsedTask(task_name="X", assignee="  ").assignee is None


def test_due_date_has_minute_precision():
    t = ParsedTask(task_name="X", due_date=datetime(2026, 1, 1, 9, 30, 59, 123))
    assert t.due_date == datetime(2026, 1, 1, 9, 30)


def test_task_from_parsed_keeps_fields():
    parsed = ParsedTask(task_name="X", assignee="Ana", priority="P1")
    task = Task.from_parsed(parsed, "abc")
    assert task.id == "abc"
    assert task.assignee == "Ana"
    assert task.priority == "P1"


def test_apply_update_only_touches_sent_fields():
    task = Task(id="1", task_name="X", assignee="Ana", priority="P2")
    updated = task.apply(TaskUpdate(priority="P4"))
    assert updated.priority == "P4"
    assert updated.assignee == "Ana"
    assert updated.task_name == "X"


def test_apply_update_can_clear_assignee():
    task = Task(id="1", task_name="X", assignee="Ana")
    assert task.apply(TaskUpdate(assignee=None)).assignee is None
