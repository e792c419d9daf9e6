import curses
import locale
from types import TracebackType

from mach.util.logger import setup_logger

logger = setup_logger("mach", is_stream=False, is_file=True)


class TerminalSetupError(Exception):
    """端末の初期化 (raw mode / alternate screen) に失敗した。"""


class RenderError(Exception):
    """描画中に curses がエラーを返した。"""


class TerminalGuard:
    """Raw mode と alternate screen を with ブロックの間だけ確保する。

    例外で抜けた場合も含め、__exit__ で必ず端末を元に戻す。
    """

    def __init__(self) -> None:
        self.stdscr: curses.window | None = None

    def __enter__(self) -> curses.window:
        try:
            # マルチバイト文字を描画するため initscr() より前に設定する
            locale.setlocale(locale.LC_ALL, "")
        except locale.Error as e:
            _msg = f"failed to set locale: {e!s}"
            raise TerminalSetupError(_msg) from e
        try:
            self.stdscr = curses.initscr()
            curses.noecho()
            curses.raw()
            self.stdscr.keypad(True)  # noqa: FBT003
        except curses.error as e:
            self.restore()
            _msg = f"failed to initialize terminal: {e!s}"
            raise TerminalSetupError(_msg) from e
        return self.stdscr

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.restore()

    def restore(self) -> None:
        if self.stdscr is None:
            return
        try:
            self.stdscr.keypad(False)  # noqa: FBT003
            curses.noraw()
            curses.echo()
            curses.endwin()
        except curses.error:
            logger.exception("Error (restore terminal)")
        finally:
            self.stdscr = None
