from abc import ABC, abstractmethod

from result import Err, Ok, Result

from mach.core.models import Status, Task
from mach.util.dirs import ensure_dirs, load_env
from mach.util.time import now_iso


def _schedule_key(t: Task) -> tuple[str, str, str]:
    return (t.scheduled_on or "", t.created_at, t.id)


def _backlog_key(t: Task) -> tuple[int, str, str]:
    return (t.backlog_column or 0, t.created_at, t.id)


class Store(ABC):
    """ストレージ抽象基底クラス。

    YAML/SQLite などのストレージ実装の共通インターフェースを定義します。
    基底クラスはメモリ上の _tasks / _config を対象とした実装を持ち、
    SQLite 実装はこれらをクエリで置き換えます。

    Public API:
        - load() / save(): ストレージの読み込み / 保存
        - commit() / rollback(): 変更の確定 / 破棄
        - add_task(): タスクを追加する
        - get_task(): タスクIDでタスクを取得する
        - get_all_tasks(): 全タスクを取得する
        - list_scheduled(): 日付範囲内の予定済みタスクを取得する
        - list_unscheduled(): バックログのタスクを取得する
        - set_status(): ステータスを変更する
        - move_to_date(): タスクを日付列へ移動する
        - move_to_backlog(): タスクをバックログ列へ移動する
        - remove_task(): タスクを削除する
        - get_config() / set_config(): 設定値の取得 / 保存

    注意: 実装クラスは内部構造（_tasks等）を直接公開してはいけません。
    """

    def __init__(self, data_path: str | None = None) -> None:
        ensure_dirs()
        env = load_env()
        self.data_path = data_path or env["DATA_PATH"]
        self._tasks: dict[str, Task] = {}
        self._config: dict[str, str] = {}

    @abstractmethod
    def load(self) -> None:
        """ストレージからデータを読み込む。"""
        raise NotImplementedError

    @abstractmethod
    def save(self) -> None:
        """ストレージにデータを保存する。"""
        raise NotImplementedError

    def commit(self) -> None:
        """変更を確定する。既定では何もしない。"""

    def rollback(self) -> None:
        """変更を破棄する。既定では何もしない。"""

    def close(self) -> None:
        """接続などのリソースを解放する。既定では何もしない。"""

    # ---- データ取得 ----

    def get_task(self, task_id: str) -> Result[Task, str]:
        """タスクIDでタスクを取得する。

        Returns:
            Ok(Task): 成功時
            Err(str): 失敗時（例: タスクが見つからない）
        """
        t = self._tasks.get(task_id)
        if t is None:
            return Err(f"Task not found: {task_id}")
        return Ok(t)

    def get_all_tasks(self) -> Result[dict[str, Task], str]:
        return Ok(self._tasks)

    def list_scheduled(self, start: str, end: str) -> Result[list[Task], str]:
        """start <= scheduled_on <= end のタスクを日付順・作成順で返す。

        Args:
            start: 範囲の開始日 (YYYY-MM-DD)
            end: 範囲の終了日 (YYYY-MM-DD, 含む)
        """
        tasks = [t for t in self._tasks.values() if t.scheduled_on is not None and start <= t.scheduled_on <= end]
        return Ok(sorted(tasks, key=_schedule_key))

    def list_unscheduled(self) -> Result[list[Task], str]:
        """日付を持たないタスクをバックログ列順・作成順で返す。"""
        tasks = [t for t in self._tasks.values() if t.scheduled_on is None]
        return Ok(sorted(tasks, key=_backlog_key))

    # ---- タスク操作 ----

    def add_task(self, task: Task) -> Result[None, str]:
        """タスクを追加する。

        Returns:
            Ok(None): 成功時
            Err(str): 失敗時（例: 既に存在するID）
        """
        if task.id in self._tasks:
            return Err(f"Task already exists: {task.id}")
        # 日付列とバックログ列の両方に属することはない
        if task.scheduled_on is not None:
            task.backlog_column = None
        self._tasks[task.id] = task
        return Ok(None)

    def set_status(self, task_id: str, status: Status) -> Result[Task, str]:
        match self.get_task(task_id):
            case Ok(t):
                t.status = status
                t.done_at = now_iso() if status == "done" else None
                t.updated_at = now_iso()
                return Ok(t)
            case Err(e):
                return Err(e)
            case _:
                return Err("Unexpected error")

    def move_to_date(self, task_id: str, day: str) -> Result[Task, str]:
        match self.get_task(task_id):
            case Ok(t):
                t.scheduled_on = day
                t.backlog_column = None
                t.updated_at = now_iso()
                return Ok(t)
            case Err(e):
                return Err(e)
            case _:
                return Err("Unexpected error")

    def move_to_backlog(self, task_id: str, column: int) -> Result[Task, str]:
        match self.get_task(task_id):
            case Ok(t):
                t.scheduled_on = None
                t.backlog_column = column
                t.updated_at = now_iso()
                return Ok(t)
            case Err(e):
                return Err(e)
            case _:
                return Err("Unexpected error")

    def remove_task(self, task_id: str) -> Result[None, str]:
        match self.get_task(task_id):
            case Ok(_):
                del self._tasks[task_id]
                return Ok(None)
            case Err(e):
                return Err(e)
            case _:
                return Err("Unexpected error")

    # ---- 設定 ----

    def get_config(self, key: str) -> Result[str | None, str]:
        return Ok(self._config.get(key))

    def set_config(self, key: str, value: str) -> Result[None, str]:
        self._config[key] = value
        return Ok(None)
