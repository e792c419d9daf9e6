import os
import re
from pathlib import Path

DEFAULT_HOME = os.environ.get("MACH_HOME_DIR", (Path.home() / ".mach").as_posix())
DEFAULT_DATA_PATH = (Path(DEFAULT_HOME) / "mach.db").as_posix()
DEFAULT_ENV_PATH = (Path(DEFAULT_HOME) / "config.env").as_posix()
DEFAULT_WEEK_START = "sunday"

# config.env のキー -> (上書きする環境変数, 既定値)
ENV_KEYS: dict[str, tuple[str, str]] = {
    "DATA_PATH": ("MACH_DATA_PATH", DEFAULT_DATA_PATH),
    "WEEK_START": ("MACH_WEEK_START", DEFAULT_WEEK_START),
}

_ENV_LINE = re.compile(r"([^=]+)=(.*)")


def ensure_dirs() -> None:
    _path = Path(DEFAULT_HOME)
    _path.mkdir(parents=True, exist_ok=True)


def _unquote(value: str) -> str:
    if len(value) >= 2 and value[0] == value[-1] and value[0] in ("'", '"'):
        return value[1:-1]
    return value


def read_env_file(path: str) -> dict[str, str]:
    """KEY=VALUE 形式のファイルを読む。空行と # 始まりの行は無視する。"""
    env: dict[str, str] = {}
    _path = Path(path)
    if not _path.is_file():
        return env
    with _path.open(encoding="utf-8") as f:
        for raw in f:
            line = raw.strip()
            if not line or line.startswith("#"):
                continue
            m = _ENV_LINE.match(line)
            if m:
                env[m.group(1).strip()] = _unquote(m.group(2).strip())
    return env


def load_env(path: str = DEFAULT_ENV_PATH) -> dict[str, str]:
    """config.env を読み、既知のキーは OS 環境変数 > ファイル > 既定値 の順で決める。"""
    env = read_env_file(path)
    for key, (var, default) in ENV_KEYS.items():
        env[key] = os.environ.get(var, env.get(key, default))
    env["WEEK_START"] = env["WEEK_START"].lower()
    return env
