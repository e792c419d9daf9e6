import unittest
from datetime import date
from unittest import mock

from mach.interfaces.tui.board import TaskSummary
from mach.interfaces.tui.data import AppState
from mach.interfaces.tui.view import AppView

TODAY = date(2024, 6, 13)


class TestAppView(unittest.TestCase):
    """curses 画面の代わりに MagicMock を渡して描画内容を確認する"""

    def setUp(self) -> None:
        self.stdscr = mock.MagicMock()
        self.stdscr.getmaxyx.return_value = (24, 120)
        self.state = AppState.new(TODAY, "sunday")
        self.view = AppView(self.stdscr, self.state)
        patcher = mock.patch("mach.interfaces.tui.view.curses.has_colors", return_value=False)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _drawn(self) -> list[str]:
        return [c.args[2] for c in self.stdscr.addnstr.call_args_list]

    def test_draws_week_columns_and_backlog(self) -> None:
        self.state.board.set_day(4, [TaskSummary(id="a", title="Report")])
        self.state.board.set_backlog_column(1, [TaskSummary(id="b", title="Someday", status="done")])
        self.view.draw()
        drawn = "\n".join(self._drawn())
        assert "Sun 06/09" in drawn
        assert "Thu 06/13 *" in drawn
        assert "Backlog 4" in drawn
        assert "[ ] Report" in drawn
        assert "[x] Someday" in drawn
        self.stdscr.refresh.assert_called_once()

    def test_footer_shows_pending_g(self) -> None:
        self.state.chord = self.state.chord.arm("g")
        self.view.draw()
        assert any(s.startswith("g-") for s in self._drawn())

    def test_footer_message(self) -> None:
        self.state.msg_footer = "Deleted: A"
        self.view.draw()
        assert "Deleted: A" in self._drawn()

    def test_help_overlay(self) -> None:
        self.state.modes.enter_help()
        self.view.draw()
        drawn = "\n".join(self._drawn())
        assert "Keys (any key to close)" in drawn
        assert "jump to today" in drawn

    def test_too_small_terminal(self) -> None:
        self.stdscr.getmaxyx.return_value = (5, 40)
        self.view.draw()
        assert self._drawn() == ["terminal too small"]

    def test_long_column_scrolls_to_selection(self) -> None:
        tasks = [TaskSummary(id=str(i), title=f"task-{i:02d}") for i in range(30)]
        self.state.board.set_day(4, tasks)
        self.state.day_cursor.set_focus(4, 29)
        self.view.draw()
        drawn = "\n".join(self._drawn())
        assert "task-29" in drawn
        assert "task-00" not in drawn


if __name__ == "__main__":
    unittest.main()
