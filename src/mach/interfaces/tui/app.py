import argparse
import curses

from mach.core import ops
from mach.core.models import WeekStart
from mach.interfaces.tui.controller import BoardController
from mach.interfaces.tui.data import AppState
from mach.interfaces.tui.input import KEY_CTRL_C
from mach.interfaces.tui.style import (
    COMPLETED_COLOR,
    HELP_BG_COLOR,
    MAIN_THEME_COLOR,
    SELECTED_ROW_COLOR,
    TODAY_COLOR,
)
from mach.interfaces.tui.terminal import RenderError
from mach.interfaces.tui.view import AppView
from mach.storage import Store
from mach.util.logger import setup_logger

logger = setup_logger("mach", is_stream=False, is_file=True)

TICK_MS = 250


class App:
    def __init__(
        self,
        stdscr: curses.window,
        st: Store,
        args: argparse.Namespace | None = None,
    ) -> None:
        self.stdscr = stdscr
        self.args = args
        self.st = st

        msg: str | None = None
        preference: WeekStart = "sunday"
        try:
            preference = ops.week_start_preference(st=st)
        except ops.OpsError as e:
            msg = f"Error (config): {e}"

        self.state = AppState.new(ops.today(), preference)
        self.controller = BoardController(self.state, st)
        self.view = AppView(stdscr, self.state)
        self._init_curses()
        self.controller.refresh()
        if msg is not None:
            self.state.msg_footer = msg

    def _init_curses(self) -> None:
        try:
            curses.curs_set(0)
        except curses.error:
            # カーソル非表示に未対応の端末もある
            logger.debug("curs_set(0) is not supported")
        self.stdscr.keypad(True)  # noqa: FBT003
        # get_wch() は TICK_MS ごとにタイムアウトして定期処理に戻る
        self.stdscr.timeout(TICK_MS)

        if curses.has_colors():
            try:
                self._init_colors()
            except curses.error:
                logger.exception("Error (init colors)")

    def _init_colors(self) -> None:
        curses.start_color()
        curses.use_default_colors()
        # color pair indexes (idx, foreground, background)
        curses.init_pair(MAIN_THEME_COLOR, curses.COLOR_YELLOW, -1)  # header
        curses.init_pair(SELECTED_ROW_COLOR, -1, -1)  # selected-row (reverse)
        curses.init_pair(COMPLETED_COLOR, curses.COLOR_GREEN, -1)  # done
        curses.init_pair(TODAY_COLOR, curses.COLOR_CYAN, -1)  # today column
        curses.init_pair(HELP_BG_COLOR, curses.COLOR_WHITE, curses.COLOR_BLUE)  # help-bg

    def _read_key(self) -> int | None:
        """キーを1つ読む。タイムアウトなら None。"""
        try:
            key_raw = self.stdscr.get_wch()
        except curses.error:
            return None
        except KeyboardInterrupt:
            return KEY_CTRL_C
        return ord(key_raw) if isinstance(key_raw, str) else key_raw

    def handle_key(self, key: int) -> bool:
        return self.controller.handle_key(key)

    def run(self) -> int:
        """1回のループで高々1つのキーを処理し、再描画する。"""
        while True:
            self.controller.tick()
            try:
                self.view.draw()
            except curses.error as e:
                _msg = f"failed to draw frame: {e!s}"
                raise RenderError(_msg) from e

            if self.state.should_quit:
                break

            key = self._read_key()
            if key is None or key == curses.KEY_RESIZE:
                continue
            self.handle_key(key)
        return 0
