from __future__ import annotations

from typing import TYPE_CHECKING, TypeVar

from result import Err, Ok, Result

from mach.core.models import BACKLOG_COLUMNS, Status, Task, WeekStart, normalize_week_start
from mach.storage import Store, get_store
from mach.util import time as _time
from mach.util.dirs import load_env
from mach.util.ids import gen_task_id, parse_id
from mach.util.logger import setup_logger

if TYPE_CHECKING:
    from datetime import date

logger = setup_logger("mach", is_stream=False, is_file=True)

T = TypeVar("T")

WEEK_START_KEY = "week_start"


class OpsError(Exception):
    """ops 層でのユースケース実行失敗を表す例外。"""


# ---- 内部ユーティリティ ----------------------------------------------------


def open_store(data_path: str | None = None) -> Store:
    """設定 (または data_path) に従って Store を開いて読み込む。"""
    try:
        st = get_store(data_path)
    except ValueError as e:
        raise OpsError(str(e)) from e
    try:
        st.load()
    except Exception as e:
        _msg = f"Failed to open store {st.data_path}: {e!s}"
        logger.exception(_msg)
        raise OpsError(_msg) from e
    return st


def _open_store(st: Store | None) -> Store:
    return st if st is not None else open_store()


def _unwrap(st: Store, res: Result[T, str]) -> T:
    """Err ならロールバックして OpsError を送出する。"""
    if res.is_err():
        st.rollback()
        _msg = res.unwrap_err()
        logger.error(_msg)
        raise OpsError(_msg)
    return res.unwrap()  # type: ignore[no-any-return]


def _persist(st: Store) -> None:
    st.commit()
    try:
        st.save()
    except OSError as e:
        _msg = f"Failed to save tasks: {e!s}"
        logger.exception(_msg)
        raise OpsError(_msg) from e


def _mutate(st: Store, res: Result[Task, str]) -> Task:
    task = _unwrap(st, res)
    _persist(st)
    return task


# ---- 日付 / 設定 ------------------------------------------------------------


def today() -> date:
    return _time.today()


def week_start_preference(*, st: Store | None = None) -> WeekStart:
    """週の開始曜日を返す。ストアに保存された値 > config.env の WEEK_START の順。"""
    st = _open_store(st)
    saved = _unwrap(st, st.get_config(WEEK_START_KEY))
    if saved is None:
        return normalize_week_start(load_env().get("WEEK_START"))
    return normalize_week_start(str(saved))


def set_week_start_preference(value: WeekStart, *, st: Store | None = None) -> WeekStart:
    st = _open_store(st)
    pref = normalize_week_start(value)
    _unwrap(st, st.set_config(WEEK_START_KEY, pref))
    _persist(st)
    return pref


# ---- 一覧取得 / 個別取得 ----------------------------------------------------


def list_scheduled(start: date, end: date, *, st: Store | None = None) -> list[Task]:
    """start..end (両端含む) に予定されたタスクをストアの順序のまま返す。"""
    st = _open_store(st)
    tasks = _unwrap(st, st.list_scheduled(_time.format_date(start), _time.format_date(end)))
    return list(tasks)


def list_unscheduled(*, st: Store | None = None) -> list[Task]:
    st = _open_store(st)
    tasks = _unwrap(st, st.list_unscheduled())
    return list(tasks)


def list_tasks(*, st: Store | None = None) -> list[Task]:
    st = _open_store(st)
    tasks = _unwrap(st, st.get_all_tasks())
    return list(tasks.values())


def get_task(task_id: str, *, st: Store | None = None) -> Task:
    """単一タスクを取得するユースケース。見つからない場合は OpsError。"""
    st = _open_store(st)
    return _unwrap(st, st.get_task(task_id))


def resolve_id(text: str, *, st: Store | None = None) -> str:
    """完全IDまたは一意なprefixからタスクIDを解決する。"""
    st = _open_store(st)
    match parse_id(text, source_ids=[t.id for t in list_tasks(st=st)]):
        case Ok(tid):
            return str(tid)
        case Err(e):
            raise OpsError(e)
        case _:
            raise OpsError("Unexpected error")


# ---- 追加 / 更新 / 削除 -----------------------------------------------------


def _check_backlog_column(column: int) -> None:
    if not 0 <= column < BACKLOG_COLUMNS:
        _msg = f"Backlog column out of range: {column} (0-{BACKLOG_COLUMNS - 1})"
        raise OpsError(_msg)


def add_task(
    title: str,
    *,
    scheduled_on: date | None = None,
    backlog_column: int | None = None,
    st: Store | None = None,
) -> Task:
    """新規タスクを追加するユースケース。

    scheduled_on が指定されれば日付列へ、そうでなければ backlog_column (既定 0) の
    バックログ列へ追加する。
    """
    title = title.strip()
    if not title:
        raise OpsError("Empty title")
    if scheduled_on is None:
        backlog_column = backlog_column or 0
        _check_backlog_column(backlog_column)
    else:
        backlog_column = None

    st = _open_store(st)
    t = Task(
        id=gen_task_id(),
        title=title,
        scheduled_on=_time.format_date(scheduled_on) if scheduled_on else None,
        backlog_column=backlog_column,
    )
    _unwrap(st, st.add_task(t))
    _persist(st)
    logger.info("Added task %s", t.id)
    return t


def set_status(task_id: str, status: Status, *, st: Store | None = None) -> Task:
    st = _open_store(st)
    return _mutate(st, st.set_status(task_id, status))


def toggle_status(task_id: str, *, st: Store | None = None) -> Task:
    """pending <-> done を切り替える。"""
    st = _open_store(st)
    t = get_task(task_id, st=st)
    return set_status(task_id, "pending" if t.status == "done" else "done", st=st)


def delete_task(task_id: str, *, st: Store | None = None) -> None:
    st = _open_store(st)
    _unwrap(st, st.remove_task(task_id))
    _persist(st)
    logger.info("Deleted task %s", task_id)


def move_to_date(task_id: str, day: date, *, st: Store | None = None) -> Task:
    st = _open_store(st)
    return _mutate(st, st.move_to_date(task_id, _time.format_date(day)))


def move_to_backlog(task_id: str, column: int, *, st: Store | None = None) -> Task:
    _check_backlog_column(column)
    st = _open_store(st)
    return _mutate(st, st.move_to_backlog(task_id, column))
