from dataclasses import dataclass, field

from mach.core.models import BACKLOG_COLUMNS, Status, Task


@dataclass(frozen=True)
class TaskSummary:
    """ボードに載せるタスクの読み取り専用射影。リフレッシュ毎に丸ごと置き換える。"""

    id: str
    title: str
    status: Status = "pending"

    @property
    def is_done(self) -> bool:
        return self.status == "done"

    @staticmethod
    def from_task(t: Task) -> "TaskSummary":
        return TaskSummary(id=t.id, title=t.title, status=t.status)


def _empty_backlog() -> list[list[TaskSummary]]:
    return [[] for _ in range(BACKLOG_COLUMNS)]


@dataclass
class BoardData:
    """日付列 (days) とバックログ列 (backlog_columns) のタスク一覧。

    backlog_columns の列数は BACKLOG_COLUMNS で固定。要素の置き換えのみ行い、
    列の追加・削除はしない。
    """

    days: list[list[TaskSummary]] = field(default_factory=list)
    backlog_columns: list[list[TaskSummary]] = field(default_factory=_empty_backlog)

    @classmethod
    def new(cls, num_days: int) -> "BoardData":
        board = cls()
        board.reset(num_days)
        return board

    def reset(self, num_days: int) -> None:
        self.days = [[] for _ in range(num_days)]
        for idx in range(BACKLOG_COLUMNS):
            self.backlog_columns[idx] = []

    # ---- day columns ----------------------------------------------------

    def set_day(self, idx: int, tasks: list[TaskSummary]) -> None:
        # 通常は起きないが、範囲外なら列を伸ばす
        while idx >= len(self.days):
            self.days.append([])
        self.days[idx] = list(tasks)

    def day_len(self, idx: int) -> int:
        if 0 <= idx < len(self.days):
            return len(self.days[idx])
        return 0

    def day_task_at(self, col: int, row: int | None) -> TaskSummary | None:
        if row is None or not 0 <= col < len(self.days):
            return None
        items = self.days[col]
        return items[row] if 0 <= row < len(items) else None

    def day_task_id_at(self, col: int, row: int | None) -> str | None:
        task = self.day_task_at(col, row)
        return task.id if task else None

    # ---- backlog columns ------------------------------------------------

    def set_backlog_column(self, col: int, tasks: list[TaskSummary]) -> None:
        if 0 <= col < BACKLOG_COLUMNS:
            self.backlog_columns[col] = list(tasks)

    def backlog_col_len(self, col: int) -> int:
        if 0 <= col < BACKLOG_COLUMNS:
            return len(self.backlog_columns[col])
        return 0

    def backlog_task_at(self, col: int, row: int | None) -> TaskSummary | None:
        if row is None or not 0 <= col < BACKLOG_COLUMNS:
            return None
        items = self.backlog_columns[col]
        return items[row] if 0 <= row < len(items) else None

    def backlog_task_id_at(self, col: int, row: int | None) -> str | None:
        task = self.backlog_task_at(col, row)
        return task.id if task else None

    # ---- lookups --------------------------------------------------------

    @staticmethod
    def _find(columns: list[list[TaskSummary]], task_id: str) -> tuple[int, int] | None:
        for col, items in enumerate(columns):
            for row, task in enumerate(items):
                if task.id == task_id:
                    return (col, row)
        return None

    def find_day_position(self, task_id: str) -> tuple[int, int] | None:
        return self._find(self.days, task_id)

    def find_backlog_position(self, task_id: str) -> tuple[int, int] | None:
        return self._find(self.backlog_columns, task_id)

    def day_status_of(self, task_id: str) -> Status | None:
        pos = self.find_day_position(task_id)
        if pos is None:
            return None
        return self.days[pos[0]][pos[1]].status

    def backlog_status_of(self, task_id: str) -> Status | None:
        pos = self.find_backlog_position(task_id)
        if pos is None:
            return None
        return self.backlog_columns[pos[0]][pos[1]].status
