import curses
from dataclasses import dataclass

from mach.interfaces.tui.board import TaskSummary
from mach.interfaces.tui.data import AppState
from mach.interfaces.tui.helper import _fit_width, _string_width
from mach.interfaces.tui.style import (
    COMPLETED_COLOR,
    HELP_BG_COLOR,
    HELP_LINES,
    MAIN_THEME_COLOR,
    MAX_HELP_BOX_WIDTH,
    MIN_COLUMN_WIDTH,
    SELECTED_ROW_COLOR,
    STATUS_MARK_MAP,
    TODAY_COLOR,
    HeaderLines,
)
from mach.util.logger import setup_logger

logger = setup_logger("mach", is_stream=False, is_file=True)


@dataclass
class AppView:
    """AppView class to draw overall app screen.

    Attributes:
        stdscr: curses.window
        state: AppState
    """

    stdscr: curses.window
    state: AppState

    def draw(self) -> None:
        """Draw overall app screen."""
        self.stdscr.erase()
        max_y, max_x = self.stdscr.getmaxyx()
        header_height = HeaderLines.height()
        footer_height = 1
        content_height = max_y - header_height - footer_height
        if content_height < 4 or max_x < MIN_COLUMN_WIDTH:
            # give up drawing if terminal size is too small
            self._safe_addnstr(0, 0, "terminal too small", max_x)
            self.stdscr.refresh()
            return

        # 日付列に 2/3、バックログ列に残りを割り当てる
        day_height = max(2, (content_height * 2) // 3)
        backlog_height = content_height - day_height

        self._draw_header(0, max_x)
        self._draw_days(header_height, day_height, max_x)
        self._draw_backlog(header_height + day_height, backlog_height, max_x)
        self._draw_footer(max_y - 1, max_x)

        if self.state.show_help:
            self._draw_help(header_height, content_height, max_x)

        self.stdscr.refresh()

    def _safe_addnstr(self, y: int, x: int, s: str, n: int, attr: int = 0) -> None:
        """Add a string to the screen safely."""
        max_y, max_x = self.stdscr.getmaxyx()
        # 画面外なら描かない
        if y < 0 or y >= max_y or x < 0 or x >= max_x:
            return
        # 右端を超えないようにクリップ
        limit = max_x - x
        if limit <= 0 or n <= 0:
            return
        # 最終行では右端1マスを開ける
        if y == max_y - 1 and limit == max_x:
            limit -= 1

        s = s.replace("\t", " ")  # タブがいると幅が読めないので潰す
        n = min(n, len(s), limit)
        if n <= 0:
            return

        # nを減らしながらトライ (例外が発生したら1文字ずつ減らして再試行)
        while n > 0:
            chunk = s[:n]
            try:
                self.stdscr.addnstr(y, x, chunk, n, attr)
            except curses.error:
                n -= 1
            else:
                return

    @staticmethod
    def _color(pair: int) -> int:
        if not curses.has_colors():
            return 0
        return curses.color_pair(pair)

    # header/footer
    def _draw_header(self, y: int, width: int) -> None:
        week = self.state.week
        week_label = f"{week.first_date.isoformat()} .. {week.last_date.isoformat()}"
        mode_label = {"day": "days", "backlog": "backlog", "help": "help"}[self.state.mode]
        title = HeaderLines.title()
        status = HeaderLines.status(week_label, mode_label, week.preference)
        self._safe_addnstr(y, 0, title, width, self._color(MAIN_THEME_COLOR) | curses.A_BOLD)
        self._safe_addnstr(y + 1, 0, status, width)

    def _draw_footer(self, y: int, width: int) -> None:
        msg = self.state.msg_footer or ""
        if self.state.chord.pending_g:
            msg = "g-"
        self._safe_addnstr(y, 0, _fit_width(msg, width - 1), width)

    # columns
    def _draw_days(self, top: int, height: int, width: int) -> None:
        s = self.state
        cols = s.week.columns
        col_width = max(MIN_COLUMN_WIDTH, width // len(cols))
        active = s.modes.board == "day"
        for idx, col in enumerate(cols):
            title_attr = curses.A_BOLD
            if col.date == s.today:
                title_attr |= self._color(TODAY_COLOR)
            selected_row = s.day_cursor.row if idx == s.day_cursor.col else None
            self._draw_column(
                top,
                idx * col_width,
                height,
                col_width,
                col.title + (" *" if col.date == s.today else ""),
                title_attr,
                s.board.days[idx] if idx < len(s.board.days) else [],
                selected_row,
                is_focused=active and idx == s.day_cursor.col,
            )

    def _draw_backlog(self, top: int, height: int, width: int) -> None:
        s = self.state
        count = len(s.board.backlog_columns)
        col_width = max(MIN_COLUMN_WIDTH, width // count)
        active = s.modes.board == "backlog"
        for idx, items in enumerate(s.board.backlog_columns):
            selected_row = s.backlog_cursor.row if idx == s.backlog_cursor.col else None
            self._draw_column(
                top,
                idx * col_width,
                height,
                col_width,
                f"Backlog {idx + 1}",
                curses.A_BOLD,
                items,
                selected_row,
                is_focused=active and idx == s.backlog_cursor.col,
            )

    def _draw_column(
        self,
        top: int,
        left: int,
        height: int,
        width: int,
        title: str,
        title_attr: int,
        items: list[TaskSummary],
        selected_row: int | None,
        *,
        is_focused: bool,
    ) -> None:
        inner = width - 1
        header_attr = title_attr | (curses.A_UNDERLINE if is_focused else 0)
        self._safe_addnstr(top, left, _fit_width(title, inner), inner, header_attr)
        self._safe_addnstr(top + 1, left, "-" * inner, inner)

        rows = height - 2
        if rows <= 0:
            return
        # 選択行が見えるようにスクロール
        offset = 0
        if selected_row is not None and selected_row >= rows:
            offset = selected_row - rows + 1
        for i, task in enumerate(items[offset : offset + rows]):
            row = offset + i
            selected = is_focused and row == selected_row
            self._safe_addnstr(
                top + 2 + i,
                left,
                self._format_task_line(task, inner, selected=selected),
                inner,
                self._task_attr(task, selected=selected),
            )

    def _format_task_line(self, t: TaskSummary, width: int, *, selected: bool) -> str:
        prefix = "›" if selected else " "
        line = f"{prefix}[{STATUS_MARK_MAP.get(t.status, '?')}] {t.title}"
        line = _fit_width(line, width)
        # 選択行は列幅いっぱいまで塗る
        return line + " " * max(0, width - _string_width(line))

    def _task_attr(self, t: TaskSummary, *, selected: bool) -> int:
        attr = 0
        if t.is_done:
            attr |= self._color(COMPLETED_COLOR) | curses.A_DIM
        if selected:
            attr |= self._color(SELECTED_ROW_COLOR) | curses.A_REVERSE
        return attr

    # help overlay
    def _draw_help(self, top: int, height: int, width: int) -> None:
        box_width = min(MAX_HELP_BOX_WIDTH, width - 2)
        box_height = min(len(HELP_LINES) + 2, height)
        if box_width <= 4 or box_height <= 2:
            return
        y0 = top + max(0, (height - box_height) // 2)
        x0 = max(0, (width - box_width) // 2)
        attr = self._color(HELP_BG_COLOR)

        title = " Keys (any key to close) "
        self._safe_addnstr(y0, x0, ("+" + title.center(box_width - 2, "-") + "+")[:box_width], box_width, attr)
        for i, line in enumerate(HELP_LINES[: box_height - 2]):
            body = _fit_width(line, box_width - 4)
            body = body + " " * max(0, box_width - 4 - _string_width(body))
            self._safe_addnstr(y0 + 1 + i, x0, f"| {body} |", box_width, attr)
        self._safe_addnstr(y0 + box_height - 1, x0, "+" + "-" * (box_width - 2) + "+", box_width, attr)
