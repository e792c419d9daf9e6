import os
import tempfile
import unittest
from pathlib import Path

from mach.util import dirs


class TestLoadEnv(unittest.TestCase):
    def setUp(self) -> None:
        self.tmpdir = Path(tempfile.mkdtemp())
        self.env_path = self.tmpdir / "config.env"
        self.orig = {k: os.environ.get(k) for k in ("MACH_DATA_PATH", "MACH_WEEK_START")}
        for k in self.orig:
            os.environ.pop(k, None)

    def tearDown(self) -> None:
        self.env_path.unlink(missing_ok=True)
        self.tmpdir.rmdir()
        for key, val in self.orig.items():
            if val is not None:
                os.environ[key] = val
            elif key in os.environ:
                del os.environ[key]

    def test_defaults_when_no_file(self) -> None:
        env = dirs.load_env(self.env_path.as_posix())
        assert env["DATA_PATH"] == dirs.DEFAULT_DATA_PATH
        assert env["WEEK_START"] == "sunday"

    def test_parses_config_env(self) -> None:
        self.env_path.write_text(
            "# comment\n\nDATA_PATH=/data/tasks.yaml\nWEEK_START = Monday\nOTHER=1\n",
            encoding="utf-8",
        )
        env = dirs.load_env(self.env_path.as_posix())
        assert env["DATA_PATH"] == "/data/tasks.yaml"
        assert env["WEEK_START"] == "monday"
        assert env["OTHER"] == "1"

    def test_strips_quotes(self) -> None:
        self.env_path.write_text("DATA_PATH=\"/data/my tasks.yaml\"\n", encoding="utf-8")
        env = dirs.load_env(self.env_path.as_posix())
        assert env["DATA_PATH"] == "/data/my tasks.yaml"

    def test_environment_overrides_file(self) -> None:
        self.env_path.write_text("DATA_PATH=/data/tasks.yaml\nWEEK_START=monday\n", encoding="utf-8")
        os.environ["MACH_DATA_PATH"] = "/elsewhere/mach.db"
        os.environ["MACH_WEEK_START"] = "SUNDAY"
        env = dirs.load_env(self.env_path.as_posix())
        assert env["DATA_PATH"] == "/elsewhere/mach.db"
        assert env["WEEK_START"] == "sunday"


class TestDefaults(unittest.TestCase):
    def test_home_from_environment(self) -> None:
        assert dirs.DEFAULT_HOME == os.environ["MACH_HOME_DIR"]
        assert Path(dirs.DEFAULT_DATA_PATH).name == "mach.db"

    def test_ensure_dirs(self) -> None:
        dirs.ensure_dirs()
        assert Path(dirs.DEFAULT_HOME).is_dir()


if __name__ == "__main__":
    unittest.main()
