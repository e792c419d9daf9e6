import re
import unittest

from mach.util.ids import gen_task_id, parse_id


class TestGenTaskId(unittest.TestCase):
    def test_format(self) -> None:
        out = gen_task_id()
        assert re.fullmatch(r"[0-9a-f-]{36}", out)
        assert gen_task_id() != out


class TestParseId(unittest.TestCase):
    def test_empty(self) -> None:
        r = parse_id("  ", source_ids=["a", "b"])
        assert r.is_err()
        assert r.unwrap_err() == "Empty ID"

    def test_exact_match(self) -> None:
        r = parse_id("id-1", source_ids=["id-1", "id-2"])
        assert r.is_ok()
        assert r.unwrap() == "id-1"

    def test_prefix_single(self) -> None:
        r = parse_id("abcd", source_ids=["abcd-1", "other"])
        assert r.is_ok()
        assert r.unwrap() == "abcd-1"

    def test_prefix_too_short(self) -> None:
        r = parse_id("ab", source_ids=["abcd-1", "other"])
        assert r.is_err()
        assert "Unknown" in r.unwrap_err()

    def test_prefix_ambiguous(self) -> None:
        r = parse_id("abcd", source_ids=["abcd-1", "abcd-2"])
        assert r.is_err()
        assert "Ambiguous" in r.unwrap_err()

    def test_unknown(self) -> None:
        r = parse_id("zzzz", source_ids=["a", "b"])
        assert r.is_err()
        assert "Unknown" in r.unwrap_err()


if __name__ == "__main__":
    unittest.main()
