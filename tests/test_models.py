import unittest

from mach.core.models import Task, normalize_week_start, toggle_week_start


class TestWeekStart(unittest.TestCase):
    def test_normalize(self) -> None:
        assert normalize_week_start("monday") == "monday"
        assert normalize_week_start(" MONDAY ") == "monday"
        assert normalize_week_start("sunday") == "sunday"
        assert normalize_week_start("friday") == "sunday"
        assert normalize_week_start(None) == "sunday"

    def test_toggle(self) -> None:
        assert toggle_week_start("sunday") == "monday"
        assert toggle_week_start("monday") == "sunday"


class TestTask(unittest.TestCase):
    def test_dict_roundtrip_ignores_unknown(self) -> None:
        t = Task(id="a", title="A", scheduled_on="2024-06-13")
        d = t.to_dict()
        d["unknown"] = 1
        assert Task.from_dict(d) == t

    def test_is_scheduled(self) -> None:
        assert Task(id="a", title="A", scheduled_on="2024-06-13").is_scheduled
        assert not Task(id="b", title="B", backlog_column=1).is_scheduled


if __name__ == "__main__":
    unittest.main()
