import unittest

from mach.interfaces.tui.helper import _fit_width, _string_width


class TestWidth(unittest.TestCase):
    def test_string_width(self) -> None:
        assert _string_width("abc") == 3
        assert _string_width("日本") == 4

    def test_fit_width_short(self) -> None:
        assert _fit_width("abc", 5) == "abc"

    def test_fit_width_cut(self) -> None:
        out = _fit_width("abcdefghij", 6)
        assert out.endswith("…")
        assert _string_width(out) <= 6

    def test_fit_width_wide_chars(self) -> None:
        out = _fit_width("日本語のタスク", 7)
        assert _string_width(out) <= 7

    def test_fit_width_nonpositive(self) -> None:
        assert _fit_width("abc", 0) == ""
        assert _fit_width("abc", -3) == ""


if __name__ == "__main__":
    unittest.main()
