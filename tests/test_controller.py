import unittest
from datetime import date

from result import Err, Result

from mach.core import ops
from mach.core.models import Task
from mach.interfaces.tui.controller import BoardController
from mach.interfaces.tui.data import AppState
from mach.interfaces.tui.input import KEY_TAB
from mach.storage import StoreToSQLite

TODAY = date(2024, 6, 13)  # 木曜日


class FlakyStore(StoreToSQLite):
    """フラグで読み込み・更新を失敗させられるストア"""

    fail_reads = False
    fail_writes = False

    def list_scheduled(self, start: str, end: str) -> Result[list[Task], str]:
        if self.fail_reads:
            return Err("read failed")
        return super().list_scheduled(start, end)

    def move_to_date(self, task_id: str, day: str) -> Result[Task, str]:
        if self.fail_writes:
            return Err("write failed")
        return super().move_to_date(task_id, day)

    def remove_task(self, task_id: str) -> Result[None, str]:
        if self.fail_writes:
            return Err("write failed")
        return super().remove_task(task_id)

    def set_config(self, key: str, value: str) -> Result[None, str]:
        if self.fail_writes:
            return Err("write failed")
        return super().set_config(key, value)


class TestBoardController(unittest.TestCase):
    def setUp(self) -> None:
        self.st = FlakyStore(data_path=":memory:")
        self.st.load()
        self.today = TODAY
        self.state = AppState.new(TODAY, "sunday")
        self.ctrl = BoardController(self.state, self.st, today_fn=lambda: self.today)

    def tearDown(self) -> None:
        self.st.close()

    def _add(self, tid: str, *, scheduled_on: str | None = None, backlog_column: int | None = None) -> None:
        assert self.st.add_task(
            Task(id=tid, title=tid.upper(), scheduled_on=scheduled_on, backlog_column=backlog_column),
        ).is_ok()
        self.st.commit()

    def _keys(self, keys: str) -> None:
        for ch in keys:
            self.ctrl.handle_key(ord(ch))

    # ---- 起動 / ナビゲーション ----

    def test_initial_refresh_focuses_today(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        assert self.ctrl.refresh()
        assert self.state.day_cursor.position == (4, 0)
        assert self.state.focused_task() is not None
        assert self.state.focused_task().id == "a"  # type: ignore[union-attr]

    def test_move_focus(self) -> None:
        self._add("a", scheduled_on="2024-06-12")
        self.ctrl.refresh()
        self._keys("h")
        assert self.state.day_cursor.position == (3, 0)
        self._keys("hhhhhh")
        assert self.state.day_cursor.col == 0

    def test_switch_region_moves_focus_to_backlog(self) -> None:
        self._add("p", backlog_column=1)
        self.ctrl.refresh()
        self.ctrl.handle_key(KEY_TAB)
        assert self.state.mode == "backlog"
        self._keys("l")
        assert self.state.focused_task().id == "p"  # type: ignore[union-attr]

    def test_shift_week_and_gg(self) -> None:
        self.ctrl.refresh()
        self._keys("]]")
        assert self.state.week.week_start == date(2024, 6, 23)
        assert self.state.day_cursor.col == 0
        self._keys("gg")
        assert self.state.week.week_start == date(2024, 6, 9)
        assert self.state.day_cursor.col == 4

    def test_gg_from_backlog_focuses_day_board(self) -> None:
        self.ctrl.refresh()
        self.ctrl.handle_key(KEY_TAB)
        self._keys("gg")
        assert self.state.mode == "day"
        assert self.state.day_cursor.col == 4

    def test_g_then_other_key_does_not_jump(self) -> None:
        self.ctrl.refresh()
        self._keys("hhgj")
        assert self.state.day_cursor.col == 2
        assert self.state.chord.armed is None

    def test_shift_week_failure_keeps_week(self) -> None:
        self.ctrl.refresh()
        self.st.fail_reads = True
        self._keys("]")
        assert self.state.week.week_start == date(2024, 6, 9)
        assert self.state.msg_footer is not None
        assert self.state.msg_footer.startswith("Error (refresh)")

    def test_help_swallows_next_key(self) -> None:
        self.ctrl.refresh()
        self._keys("?")
        assert self.state.show_help
        self._keys("h")
        assert not self.state.show_help
        assert self.state.day_cursor.col == 4

    def test_quit(self) -> None:
        assert not self.ctrl.handle_key(ord("q"))
        assert self.state.should_quit

    def test_tick_updates_today(self) -> None:
        self.ctrl.tick()
        assert self.state.today == TODAY
        self.today = date(2024, 6, 14)
        self.ctrl.tick()
        assert self.state.today == date(2024, 6, 14)

    # ---- 削除 ----

    def test_dd_deletes_focused_task(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self._keys("d")
        assert self.state.msg_footer == "Delete 'A'? press d again to confirm"
        assert self._task_ids() == ["a"]
        self._keys("d")
        assert self._task_ids() == []
        assert self.state.msg_footer == "Deleted: A"
        assert self.state.day_cursor.position == (4, None)

    def test_d_then_other_key_cancels_delete(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self._keys("dj")
        assert self.state.chord.armed is None
        self._keys("d")
        assert self._task_ids() == ["a"]

    def test_cancelled_delete_clears_prompt(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self._keys("d")
        assert self.state.msg_footer is not None
        self._keys("l")
        assert self.state.msg_footer is None
        assert self._task_ids() == ["a"]

    def test_d_without_task(self) -> None:
        self.ctrl.refresh()
        self._keys("d")
        assert self.state.msg_footer == "No task selected"
        assert self.state.chord.armed is None

    def test_delete_error_goes_to_footer(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self.st.fail_writes = True
        self._keys("dd")
        assert self._task_ids() == ["a"]
        assert self.state.msg_footer == "Error (delete): write failed"

    # ---- 更新 ----

    def test_toggle_done(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self._keys("x")
        assert self.state.board.day_status_of("a") == "done"
        self._keys(" ")
        assert self.state.board.day_status_of("a") == "pending"

    def test_move_task_to_next_day_follows_task(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self._keys("L")
        assert ops.get_task("a", st=self.st).scheduled_on == "2024-06-14"
        assert self.state.day_cursor.position == (5, 0)
        self._keys("HH")
        assert ops.get_task("a", st=self.st).scheduled_on == "2024-06-12"
        assert self.state.day_cursor.position == (3, 0)

    def test_move_task_error_goes_to_footer(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self.st.fail_writes = True
        self._keys("L")
        assert ops.get_task("a", st=self.st).scheduled_on == "2024-06-13"
        assert self.state.msg_footer == "Error (move): write failed"

    def test_move_task_between_backlog_columns(self) -> None:
        self._add("p", backlog_column=0)
        self.ctrl.refresh()
        self.ctrl.handle_key(KEY_TAB)
        self._keys("H")
        assert ops.get_task("p", st=self.st).backlog_column == 0
        self._keys("L")
        assert ops.get_task("p", st=self.st).backlog_column == 1
        assert self.state.backlog_cursor.position == (1, 0)

    def test_toggle_backlog_roundtrip(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self._keys("b")
        t = ops.get_task("a", st=self.st)
        assert t.scheduled_on is None
        assert t.backlog_column == 0
        assert self.state.board.find_backlog_position("a") == (0, 0)

        self.ctrl.handle_key(KEY_TAB)
        self._keys("b")
        assert ops.get_task("a", st=self.st).scheduled_on == "2024-06-13"

    def test_toggle_week_start(self) -> None:
        self.ctrl.refresh()
        self._keys("W")
        assert self.state.week.preference == "monday"
        assert self.state.week.week_start == date(2024, 6, 10)
        assert self.state.day_cursor.col == 3
        assert ops.week_start_preference(st=self.st) == "monday"
        assert self.state.msg_footer == "Week starts on monday"

    def test_toggle_week_start_refresh_failure_keeps_preference(self) -> None:
        self.ctrl.refresh()
        self.st.fail_reads = True
        self._keys("W")
        assert self.state.week.preference == "sunday"
        assert self.state.week.week_start == date(2024, 6, 9)
        assert ops.week_start_preference(st=self.st) == self.state.week.preference
        assert self.state.msg_footer is not None
        assert self.state.msg_footer.startswith("Error (refresh)")

    def test_toggle_week_start_save_failure_restores_week(self) -> None:
        self.ctrl.refresh()
        self.st.fail_writes = True
        self._keys("W")
        assert self.state.week.preference == "sunday"
        assert self.state.week.week_start == date(2024, 6, 9)
        assert self.state.day_cursor.col == 4
        assert ops.week_start_preference(st=self.st) == "sunday"
        assert self.state.msg_footer == "Error (config): write failed"

    def test_refresh_key_keeps_focus(self) -> None:
        self._add("a", scheduled_on="2024-06-13")
        self._add("b", scheduled_on="2024-06-13")
        self.ctrl.refresh()
        self._keys("j")
        self._keys("r")
        assert self.state.day_cursor.position == (4, 1)
        assert self.state.msg_footer == "Refreshed"

    def _task_ids(self) -> list[str]:
        return sorted(t.id for t in ops.list_tasks(st=self.st))


class TestAppStateFocus(unittest.TestCase):
    def test_focused_date(self) -> None:
        state = AppState.new(TODAY, "monday")
        assert state.focused_date() == TODAY
        assert state.focused_task() is None


if __name__ == "__main__":
    unittest.main()
