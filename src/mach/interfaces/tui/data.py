from dataclasses import dataclass, field
from datetime import date

from mach.core.models import BACKLOG_COLUMNS, WeekStart
from mach.interfaces.tui.board import BoardData, TaskSummary
from mach.interfaces.tui.cursor import GridCursor
from mach.interfaces.tui.modes import BoardMode, ChordState, ModeState, UiMode
from mach.interfaces.tui.week import WeekState


@dataclass
class AppState:
    """TUI 全体の状態。描画側はここを読むだけで画面を組み立てられる。"""

    today: date
    week: WeekState
    board: BoardData
    day_cursor: GridCursor
    backlog_cursor: GridCursor
    modes: ModeState = field(default_factory=ModeState)
    chord: ChordState = field(default_factory=ChordState)
    should_quit: bool = False

    # UI用
    msg_footer: str | None = None  # フッターメッセージ表示

    @classmethod
    def new(cls, today: date, preference: WeekStart) -> "AppState":
        week = WeekState.new(today, preference)
        board = BoardData.new(len(week.columns))
        day_cursor = GridCursor(len(week.columns), board.day_len)
        today_idx = week.column_index(today)
        if today_idx is not None:
            day_cursor.set_focus(today_idx, 0)
        return cls(
            today=today,
            week=week,
            board=board,
            day_cursor=day_cursor,
            backlog_cursor=GridCursor(BACKLOG_COLUMNS, board.backlog_col_len),
        )

    @property
    def mode(self) -> UiMode:
        return self.modes.mode

    @property
    def show_help(self) -> bool:
        return self.modes.show_help

    def cursor_for(self, board: BoardMode) -> GridCursor:
        return self.day_cursor if board == "day" else self.backlog_cursor

    @property
    def active_cursor(self) -> GridCursor:
        return self.cursor_for(self.modes.board)

    def focused_task(self) -> TaskSummary | None:
        """現在フォーカスしているボードの選択中タスク。"""
        if self.modes.board == "day":
            return self.board.day_task_at(*self.day_cursor.position)
        return self.board.backlog_task_at(*self.backlog_cursor.position)

    def focused_date(self) -> date | None:
        return self.week.date_at(self.day_cursor.col)
