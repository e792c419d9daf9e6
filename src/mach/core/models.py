from dataclasses import asdict, dataclass, field
from typing import Any, Literal

from mach.util.time import now_iso

Status = Literal["pending", "done"]
WeekStart = Literal["sunday", "monday"]

WEEK_STARTS: tuple[WeekStart, ...] = ("sunday", "monday")

# バックログ列の数は実行中に変化しない
BACKLOG_COLUMNS = 4


def normalize_week_start(value: str | None) -> WeekStart:
    """未知の値は sunday 扱いにする。"""
    if value is not None and value.strip().lower() == "monday":
        return "monday"
    return "sunday"


def toggle_week_start(value: WeekStart) -> WeekStart:
    return "monday" if value == "sunday" else "sunday"


@dataclass
class Task:
    """ストア側が所有するタスク。

    scheduled_on (YYYY-MM-DD) を持つタスクは日付列に、持たないタスクは
    backlog_column で指定されたバックログ列に表示される。両方を同時に持つことはない。
    """

    id: str
    title: str
    status: Status = "pending"
    scheduled_on: str | None = None
    backlog_column: int | None = None
    created_at: str = field(default_factory=now_iso)
    updated_at: str = field(default_factory=now_iso)
    done_at: str | None = None

    @property
    def is_scheduled(self) -> bool:
        return self.scheduled_on is not None

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @staticmethod
    def from_dict(d: dict[str, Any]) -> "Task":
        known = {k: v for k, v in d.items() if k in Task.__dataclass_fields__}
        return Task(**known)
