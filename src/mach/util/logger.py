import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path

from mach.util.dirs import DEFAULT_HOME, ensure_dirs

ROOT_LOGGER = "mach"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_BACKUP_DAYS = 7


def log_path(name: str) -> Path:
    return Path(DEFAULT_HOME) / f"{name.split('.')[0].lower()}.log"


def _is_console(handler: logging.Handler) -> bool:
    # TimedRotatingFileHandler も StreamHandler のサブクラス
    return isinstance(handler, logging.StreamHandler) and not isinstance(handler, logging.FileHandler)


def setup_mode(*, is_debug: bool) -> None:
    """コンソール出力のレベルを切り替える。ファイルには常に DEBUG まで残す。"""
    level = logging.DEBUG if is_debug else logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    for name in list(logging.root.manager.loggerDict):
        if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
            continue
        for handler in logging.getLogger(name).handlers:
            if _is_console(handler):
                handler.setLevel(level)


def setup_logger(
    name: str,
    *,
    is_stream: bool = True,
    is_file: bool = True,
) -> logging.Logger:
    """名前付き logger を用意する。

    is_stream=False の logger は root へ伝播させない。curses 描画中に
    basicConfig のハンドラから stderr へ出力されると画面が崩れるため。
    """
    logger = logging.getLogger(name)
    logger.setLevel(logging.DEBUG)
    # 同名loggerへのハンドラ重複登録を防ぐ
    if logger.handlers:
        return logger
    logger.propagate = is_stream

    if is_stream or not is_file:
        stream_handler = logging.StreamHandler()
        stream_handler.setLevel(logging.INFO)
        stream_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(stream_handler)

    if is_file:
        ensure_dirs()
        time_rotate_file_handler = TimedRotatingFileHandler(
            log_path(name).as_posix(),
            when="MIDNIGHT",
            interval=1,
            backupCount=LOG_BACKUP_DAYS,
            encoding="utf-8",
        )
        time_rotate_file_handler.setLevel(logging.DEBUG)
        time_rotate_file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(time_rotate_file_handler)

    return logger
