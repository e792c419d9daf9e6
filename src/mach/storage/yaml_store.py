import copy
from pathlib import Path

import yaml  # type: ignore[import-untyped]

from mach.core.models import Task
from mach.storage.base import Store
from mach.util.logger import setup_logger

logger = setup_logger("mach", is_stream=False, is_file=True)


class StoreToYAML(Store):
    """YAML ファイルバックエンド実装.

    ファイル全体をメモリに読み込み、save() で書き戻す。
    """

    def __init__(self, data_path: str | None = None) -> None:
        super().__init__(data_path)
        self._committed_tasks: dict[str, Task] = {}
        self._committed_config: dict[str, str] = {}

    # ---- 基本IO ----

    def load(self) -> None:
        _path = Path(self.data_path)
        _tasks: dict[str, Task] = {}
        _config: dict[str, str] = {}
        if _path.exists():
            with _path.open(encoding="utf-8") as f:
                try:
                    raw = yaml.safe_load(f) or {}
                except yaml.YAMLError as e:
                    _msg = f"Failed to load YAML file: {e}"
                    logger.exception(_msg)
                    # 壊れたファイルは空として扱う
                    raw = {}
            for tid, td in (raw.get("tasks") or {}).items():
                _tasks[tid] = Task.from_dict(td)
            _config = {str(k): str(v) for k, v in (raw.get("config") or {}).items()}

        # 読み込んだ内容をコミット済みの状態として扱う
        self._tasks = copy.deepcopy(_tasks)
        self._config = dict(_config)
        self._committed_tasks = copy.deepcopy(_tasks)
        self._committed_config = dict(_config)

    def save(self) -> None:
        raw = {
            "tasks": {tid: t.to_dict() for tid, t in self._tasks.items()},
            "config": dict(self._config),
        }
        _path = Path(self.data_path)
        _path.parent.mkdir(parents=True, exist_ok=True)
        with _path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(raw, f, allow_unicode=True, sort_keys=True)

    # ---- データ操作 ----

    def commit(self) -> None:
        """変更を確定する。"""
        self._committed_tasks = copy.deepcopy(self._tasks)
        self._committed_config = dict(self._config)

    def rollback(self) -> None:
        """変更を破棄する。"""
        self._tasks = copy.deepcopy(self._committed_tasks)
        self._config = dict(self._committed_config)
