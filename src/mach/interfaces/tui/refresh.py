from dataclasses import dataclass
from datetime import date

from result import Err, Ok, Result

from mach.core import ops
from mach.core.models import BACKLOG_COLUMNS, Task
from mach.interfaces.tui.board import BoardData, TaskSummary
from mach.interfaces.tui.cursor import GridCursor
from mach.interfaces.tui.week import WeekState
from mach.storage import Store
from mach.util.logger import setup_logger

logger = setup_logger("mach", is_stream=False, is_file=True)

Columns = list[list[TaskSummary]]


def backlog_index_for(t: Task) -> int:
    """バックログ列番号が無いタスクは列0、範囲外は端の列に寄せる。"""
    if t.backlog_column is None:
        return 0
    return max(0, min(t.backlog_column, BACKLOG_COLUMNS - 1))


@dataclass
class RefreshController:
    """ストアから表示中の週とバックログを読み直して BoardData を置き換える。

    ストア呼び出しは同期的で、イベントループのスレッドから直接呼ばれる。
    読み込みに失敗した場合は BoardData に触れずに Err を返す。
    """

    st: Store
    last_week_start: date | None = None

    def load(self, week: WeekState) -> Result[tuple[Columns, Columns], str]:
        try:
            scheduled = ops.list_scheduled(week.first_date, week.last_date, st=self.st)
            unscheduled = ops.list_unscheduled(st=self.st)
        except ops.OpsError as e:
            return Err(str(e))

        days: Columns = [[] for _ in week.columns]
        for t in scheduled:
            try:
                idx = week.column_index(date.fromisoformat(t.scheduled_on or ""))
            except ValueError:
                logger.warning("Skip task %s with invalid date: %r", t.id, t.scheduled_on)
                continue
            if idx is None:
                continue
            days[idx].append(TaskSummary.from_task(t))

        backlog: Columns = [[] for _ in range(BACKLOG_COLUMNS)]
        for t in unscheduled:
            backlog[backlog_index_for(t)].append(TaskSummary.from_task(t))
        return Ok((days, backlog))

    def refresh(
        self,
        week: WeekState,
        board: BoardData,
        cursor: GridCursor,
        today: date,
    ) -> Result[None, str]:
        """BoardData を丸ごと入れ替える。

        週が変わった (または初回の) 場合は日付カーソルを今日の列、なければ列0の先頭へ戻す。
        同じ週の再読み込みではカーソルを範囲内に収めるだけにする。
        """
        match self.load(week):
            case Ok(loaded):
                days, backlog = loaded
                board.reset(len(week.columns))
                for idx, items in enumerate(days):
                    board.set_day(idx, items)
                for idx, items in enumerate(backlog):
                    board.set_backlog_column(idx, items)

                cursor.resize(len(week.columns))
                if self.last_week_start != week.week_start:
                    today_idx = week.column_index(today)
                    cursor.set_focus(today_idx if today_idx is not None else 0, 0)
                else:
                    cursor.clamp()
                self.last_week_start = week.week_start
                logger.debug(
                    "Refreshed %s..%s: %d scheduled, %d backlog",
                    week.first_date,
                    week.last_date,
                    sum(len(d) for d in days),
                    sum(len(b) for b in backlog),
                )
                return Ok(None)
            case Err(e):
                logger.error("Refresh failed: %s", e)
                return Err(e)
            case _:
                return Err("Unexpected error")
