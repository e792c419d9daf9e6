import sqlite3
from pathlib import Path

from result import Err, Ok, Result

from mach.core.models import Status, Task
from mach.storage.base import Store
from mach.util.logger import setup_logger
from mach.util.time import now_iso

logger = setup_logger("mach", is_stream=False, is_file=True)

TASK_COLUMNS = (
    "id",
    "title",
    "status",
    "scheduled_on",
    "backlog_column",
    "created_at",
    "updated_at",
    "done_at",
)


class StoreToSQLite(Store):
    """SQLite3 バックエンド実装.

    - tasks テーブル: Task 本体
    - config テーブル: key -> value (週の開始曜日など)
    """

    def __init__(self, data_path: str | None = None) -> None:
        super().__init__(data_path)
        self._conn: sqlite3.Connection | None = None

    # ---- low-level helpers ---------------------------------------------

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            if self.data_path != ":memory:":
                Path(self.data_path).parent.mkdir(parents=True, exist_ok=True)
            self._conn = sqlite3.connect(self.data_path)
            self._conn.row_factory = sqlite3.Row
        return self._conn

    def _init_schema(self) -> None:
        """テーブルがなければ作成する."""
        c = self.conn
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS tasks (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                status TEXT NOT NULL DEFAULT 'pending',
                scheduled_on TEXT,
                backlog_column INTEGER,
                created_at TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                done_at TEXT
            )
            """,
        )
        c.execute("CREATE INDEX IF NOT EXISTS idx_tasks_scheduled_on ON tasks(scheduled_on)")
        c.execute(
            """
            CREATE TABLE IF NOT EXISTS config (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
            """,
        )
        c.commit()

    @staticmethod
    def _row_to_task(row: sqlite3.Row) -> Task:
        return Task(
            id=row["id"],
            title=row["title"],
            status=row["status"],
            scheduled_on=row["scheduled_on"],
            backlog_column=row["backlog_column"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            done_at=row["done_at"],
        )

    def _query_tasks(self, sql: str, params: tuple = ()) -> Result[list[Task], str]:
        try:
            rows = self.conn.execute(sql, params).fetchall()
        except sqlite3.Error as e:
            msg = f"Failed to query tasks: {e!s}"
            logger.exception(msg)
            return Err(msg)
        return Ok([self._row_to_task(r) for r in rows])

    def _update(self, task_id: str, sql: str, params: tuple) -> Result[Task, str]:
        try:
            cur = self.conn.execute(sql, params)
        except sqlite3.Error as e:
            msg = f"Failed to update task {task_id}: {e!s}"
            logger.exception(msg)
            return Err(msg)
        if cur.rowcount == 0:
            return Err(f"Task not found: {task_id}")
        return self.get_task(task_id)

    # ---- 基本IO ---------------------------------------------------------

    def load(self) -> None:
        """SQLite の接続とスキーマを初期化.

        YAML 実装と違い、ここでは DB をメモリに持たず、必要なときにクエリする。
        """
        self._init_schema()

    def save(self) -> None:
        """SQLite では commit 相当."""
        self.commit()

    def commit(self) -> None:
        try:
            self.conn.commit()
        except sqlite3.Error as e:
            msg = f"Error on commit(): {e!s}"
            logger.exception(msg)

    def rollback(self) -> None:
        try:
            self.conn.rollback()
        except sqlite3.Error as e:
            msg = f"Error on rollback(): {e!s}"
            logger.exception(msg)

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # ---- データ取得 -----------------------------------------------------

    def get_task(self, task_id: str) -> Result[Task, str]:
        match self._query_tasks("SELECT * FROM tasks WHERE id = ?", (task_id,)):
            case Ok(tasks) if tasks:
                return Ok(tasks[0])
            case Ok(_):
                return Err(f"Task not found: {task_id}")
            case Err(e):
                return Err(e)
            case _:
                return Err("Unexpected error")

    def get_all_tasks(self) -> Result[dict[str, Task], str]:
        match self._query_tasks("SELECT * FROM tasks"):
            case Ok(tasks):
                return Ok({t.id: t for t in tasks})
            case Err(e):
                return Err(e)
            case _:
                return Err("Unexpected error")

    def list_scheduled(self, start: str, end: str) -> Result[list[Task], str]:
        return self._query_tasks(
            "SELECT * FROM tasks WHERE scheduled_on IS NOT NULL AND scheduled_on BETWEEN ? AND ? "
            "ORDER BY scheduled_on, created_at, id",
            (start, end),
        )

    def list_unscheduled(self) -> Result[list[Task], str]:
        return self._query_tasks(
            "SELECT * FROM tasks WHERE scheduled_on IS NULL ORDER BY COALESCE(backlog_column, 0), created_at, id",
        )

    # ---- タスク操作 -----------------------------------------------------

    def add_task(self, task: Task) -> Result[None, str]:
        if task.scheduled_on is not None:
            task.backlog_column = None
        ph = ", ".join("?" for _ in TASK_COLUMNS)
        try:
            self.conn.execute(
                f"INSERT INTO tasks ({', '.join(TASK_COLUMNS)}) VALUES ({ph})",  # noqa: S608
                tuple(getattr(task, col) for col in TASK_COLUMNS),
            )
        except sqlite3.IntegrityError:
            return Err(f"Task already exists: {task.id}")
        except sqlite3.Error as e:
            msg = f"Failed to add task {task.id}: {e!s}"
            logger.exception(msg)
            return Err(msg)
        return Ok(None)

    def set_status(self, task_id: str, status: Status) -> Result[Task, str]:
        now = now_iso()
        return self._update(
            task_id,
            "UPDATE tasks SET status = ?, done_at = ?, updated_at = ? WHERE id = ?",
            (status, now if status == "done" else None, now, task_id),
        )

    def move_to_date(self, task_id: str, day: str) -> Result[Task, str]:
        return self._update(
            task_id,
            "UPDATE tasks SET scheduled_on = ?, backlog_column = NULL, updated_at = ? WHERE id = ?",
            (day, now_iso(), task_id),
        )

    def move_to_backlog(self, task_id: str, column: int) -> Result[Task, str]:
        return self._update(
            task_id,
            "UPDATE tasks SET scheduled_on = NULL, backlog_column = ?, updated_at = ? WHERE id = ?",
            (column, now_iso(), task_id),
        )

    def remove_task(self, task_id: str) -> Result[None, str]:
        try:
            cur = self.conn.execute("DELETE FROM tasks WHERE id = ?", (task_id,))
        except sqlite3.Error as e:
            msg = f"Failed to remove task {task_id}: {e!s}"
            logger.exception(msg)
            return Err(msg)
        if cur.rowcount == 0:
            return Err(f"Task not found: {task_id}")
        return Ok(None)

    # ---- 設定 -----------------------------------------------------------

    def get_config(self, key: str) -> Result[str | None, str]:
        try:
            row = self.conn.execute("SELECT value FROM config WHERE key = ?", (key,)).fetchone()
        except sqlite3.Error as e:
            msg = f"Failed to read config {key}: {e!s}"
            logger.exception(msg)
            return Err(msg)
        return Ok(None if row is None else row["value"])

    def set_config(self, key: str, value: str) -> Result[None, str]:
        try:
            self.conn.execute(
                "INSERT INTO config (key, value) VALUES (?, ?) ON CONFLICT(key) DO UPDATE SET value = excluded.value",
                (key, value),
            )
        except sqlite3.Error as e:
            msg = f"Failed to save config {key}: {e!s}"
            logger.exception(msg)
            return Err(msg)
        return Ok(None)
