import logging
import unittest
from logging.handlers import TimedRotatingFileHandler

from mach.util import logger as mach_logger
from mach.util.dirs import DEFAULT_HOME


class TestSetupLogger(unittest.TestCase):
    def test_file_only_logger_does_not_propagate(self) -> None:
        lg = mach_logger.setup_logger("mach.test.fileonly", is_stream=False, is_file=True)
        assert not lg.propagate
        assert [type(h) for h in lg.handlers] == [TimedRotatingFileHandler]
        assert lg.handlers[0].baseFilename.startswith(DEFAULT_HOME)  # type: ignore[attr-defined]

    def test_no_duplicate_handlers(self) -> None:
        lg1 = mach_logger.setup_logger("mach.test.dup", is_stream=True, is_file=False)
        lg2 = mach_logger.setup_logger("mach.test.dup", is_stream=True, is_file=True)
        assert lg1 is lg2
        assert len(lg2.handlers) == 1

    def test_log_path_uses_top_level_name(self) -> None:
        assert mach_logger.log_path("mach.cli").name == "mach.log"

    def test_setup_mode_switches_console_level(self) -> None:
        lg = mach_logger.setup_logger("mach.test.console", is_stream=True, is_file=False)
        mach_logger.setup_mode(is_debug=True)
        assert lg.handlers[0].level == logging.DEBUG
        mach_logger.setup_mode(is_debug=False)
        assert lg.handlers[0].level == logging.INFO


if __name__ == "__main__":
    unittest.main()
