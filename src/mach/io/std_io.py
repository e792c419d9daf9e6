# ruff: noqa: T201

from mach.core.models import Task
from mach.util.ids import short_id


def format_task_line(t: Task) -> str:
    mark = "x" if t.status == "done" else " "
    where = t.scheduled_on if t.is_scheduled else f"backlog {(t.backlog_column or 0) + 1}"
    return f"[{mark}] {short_id(t.id)} | {where:<10} | {t.title}"


def print_task(t: Task) -> None:
    print(format_task_line(t))


def print_tasks(tasks: list[Task]) -> None:
    if not tasks:
        print("(no tasks)")
        return
    for t in tasks:
        print_task(t)
