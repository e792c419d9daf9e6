from collections.abc import Callable
from datetime import date, timedelta

from result import Err, Ok

from mach.core import ops
from mach.core.models import BACKLOG_COLUMNS, toggle_week_start
from mach.interfaces.tui.data import AppState
from mach.interfaces.tui.input import (
    Action,
    ConfirmDelete,
    JumpToToday,
    MoveFocus,
    MoveTask,
    NoOp,
    Quit,
    Refresh,
    RequestDelete,
    ShiftWeek,
    SwitchRegion,
    ToggleBacklog,
    ToggleDone,
    ToggleHelp,
    ToggleWeekStart,
    dispatch,
)
from mach.interfaces.tui.refresh import RefreshController
from mach.interfaces.tui.week import WeekState
from mach.storage import Store
from mach.util.logger import setup_logger

logger = setup_logger("mach", is_stream=False, is_file=True)

LENGTH_SHORTEND_TITLE = 24


def _short(title: str) -> str:
    if len(title) <= LENGTH_SHORTEND_TITLE:
        return title
    return title[: LENGTH_SHORTEND_TITLE - 1] + "…"


class BoardController:
    """キー入力を action に変換して AppState とストアへ反映する。

    curses には依存しないので、端末なしでテストできる。
    """

    def __init__(
        self,
        state: AppState,
        st: Store,
        *,
        today_fn: Callable[[], date] = ops.today,
    ) -> None:
        self.state = state
        self.st = st
        self.today_fn = today_fn
        self.refresher = RefreshController(st)

    # ---- entry points ---------------------------------------------------

    def handle_key(self, key: int) -> bool:
        """キーを1つ処理する。False を返したらループ終了。"""
        was_pending_delete = self.state.chord.pending_delete
        action, chord = dispatch(key, self.state.mode, self.state.chord)
        self.state.chord = chord
        if was_pending_delete and not isinstance(action, ConfirmDelete):
            # 取り消された削除確認を残さない
            self.state.msg_footer = None
        self.apply(action)
        return not self.state.should_quit

    def tick(self) -> None:
        """定期処理。日付が変わっていたら今日の位置を更新する。"""
        today = self.today_fn()
        if today != self.state.today:
            logger.info("Date changed: %s -> %s", self.state.today, today)
            self.state.today = today

    def refresh(self, *, keep_task_id: str | None = None) -> bool:
        """ボードを読み直す。失敗時は直前の表示を残してフッターに出す。"""
        s = self.state
        match self.refresher.refresh(s.week, s.board, s.day_cursor, s.today):
            case Ok(_):
                s.backlog_cursor.clamp()
                if keep_task_id is not None:
                    self._focus_task(keep_task_id)
                return True
            case Err(e):
                s.msg_footer = f"Error (refresh): {e}"
                return False
            case _:
                s.msg_footer = "Error (refresh): unexpected result"
                return False

    def apply(self, action: Action) -> None:  # noqa: C901
        s = self.state
        match action:
            case Quit():
                s.should_quit = True
            case NoOp():
                pass
            case ToggleHelp():
                s.modes.toggle_help()
            case SwitchRegion():
                s.modes.toggle_region()
            case MoveFocus(direction=direction):
                self._move_focus(direction)
            case ShiftWeek(weeks=weeks):
                self._shift_week(weeks)
            case JumpToToday():
                self._jump_to_today()
            case RequestDelete():
                self._request_delete()
            case ConfirmDelete():
                self._confirm_delete()
            case ToggleDone():
                self._toggle_done()
            case MoveTask(delta=delta):
                self._move_task(delta)
            case ToggleBacklog():
                self._toggle_backlog()
            case ToggleWeekStart():
                self._toggle_week_start()
            case Refresh():
                current = s.focused_task()
                if self.refresh(keep_task_id=current.id if current else None):
                    s.msg_footer = "Refreshed"
            case _:
                logger.error("Unknown action: %r", action)

    # ---- navigation -----------------------------------------------------

    def _move_focus(self, direction: str) -> None:
        cursor = self.state.active_cursor
        if direction == "left":
            cursor.move_column(-1)
        elif direction == "right":
            cursor.move_column(+1)
        elif direction == "up":
            cursor.move_row(-1)
        elif direction == "down":
            cursor.move_row(+1)

    def _shift_week(self, weeks: int) -> None:
        s = self.state
        s.week.shift(weeks)
        if not self.refresh():
            # 読み込めなければ表示中のデータと週を一致させたままにする
            s.week.shift(-weeks)

    def _jump_to_today(self) -> None:
        s = self.state
        s.today = self.today_fn()
        s.modes.focus("day")
        if not s.week.contains(s.today):
            previous = s.week
            s.week = WeekState.new(s.today, previous.preference)
            if not self.refresh():
                s.week = previous
                return
        idx = s.week.column_index(s.today)
        if idx is not None:
            s.day_cursor.set_focus(idx, 0)

    def _focus_task(self, task_id: str) -> None:
        s = self.state
        if (pos := s.board.find_day_position(task_id)) is not None:
            s.day_cursor.set_focus(*pos)
        elif (pos := s.board.find_backlog_position(task_id)) is not None:
            s.backlog_cursor.set_focus(*pos)

    # ---- mutations ------------------------------------------------------

    def _request_delete(self) -> None:
        s = self.state
        task = s.focused_task()
        if task is None:
            s.chord = s.chord.disarm()
            s.msg_footer = "No task selected"
            return
        s.msg_footer = f"Delete '{_short(task.title)}'? press d again to confirm"

    def _confirm_delete(self) -> None:
        s = self.state
        task = s.focused_task()
        if task is None:
            s.msg_footer = "No task selected"
            return
        try:
            ops.delete_task(task.id, st=self.st)
        except ops.OpsError as e:
            s.msg_footer = f"Error (delete): {e}"
            return
        s.msg_footer = f"Deleted: {_short(task.title)}"
        self.refresh()

    def _toggle_done(self) -> None:
        s = self.state
        task = s.focused_task()
        if task is None:
            s.msg_footer = "No task selected"
            return
        try:
            updated = ops.toggle_status(task.id, st=self.st)
        except ops.OpsError as e:
            s.msg_footer = f"Error (status): {e}"
            return
        s.msg_footer = f"Status -> {updated.status}: {_short(task.title)}"
        self.refresh(keep_task_id=task.id)

    def _move_task(self, delta: int) -> None:
        s = self.state
        task = s.focused_task()
        if task is None:
            s.msg_footer = "No task selected"
            return
        try:
            if s.modes.board == "day":
                current = s.focused_date()
                if current is None:
                    return
                target = current + timedelta(days=delta)
                ops.move_to_date(task.id, target, st=self.st)
                s.msg_footer = f"Moved to {target.isoformat()}: {_short(task.title)}"
            else:
                column = max(0, min(s.backlog_cursor.col + delta, BACKLOG_COLUMNS - 1))
                if column == s.backlog_cursor.col:
                    return
                ops.move_to_backlog(task.id, column, st=self.st)
                s.msg_footer = f"Moved to backlog {column + 1}: {_short(task.title)}"
        except ops.OpsError as e:
            s.msg_footer = f"Error (move): {e}"
            return
        self.refresh(keep_task_id=task.id)

    def _toggle_backlog(self) -> None:
        s = self.state
        task = s.focused_task()
        if task is None:
            s.msg_footer = "No task selected"
            return
        try:
            if s.modes.board == "day":
                ops.move_to_backlog(task.id, 0, st=self.st)
                s.msg_footer = f"Moved to backlog: {_short(task.title)}"
            else:
                target = s.focused_date()
                if target is None:
                    return
                ops.move_to_date(task.id, target, st=self.st)
                s.msg_footer = f"Scheduled on {target.isoformat()}: {_short(task.title)}"
        except ops.OpsError as e:
            s.msg_footer = f"Error (move): {e}"
            return
        self.refresh(keep_task_id=task.id)

    def _toggle_week_start(self) -> None:
        s = self.state
        preference = toggle_week_start(s.week.preference)
        previous = s.week
        s.week = WeekState.new(s.today, preference)
        if not self.refresh():
            s.week = previous
            return
        # 表示が切り替わった後で保存する。保存に失敗したら表示も元に戻す
        try:
            ops.set_week_start_preference(preference, st=self.st)
        except ops.OpsError as e:
            s.week = previous
            self.refresh()
            s.msg_footer = f"Error (config): {e}"
            return
        s.msg_footer = f"Week starts on {preference}"
