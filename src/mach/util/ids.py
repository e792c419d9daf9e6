import uuid

from result import Err, Ok, Result

SHORT_ID_LENGTH = 8
MIN_PREFIX_LENGTH = 4


def gen_task_id() -> str:
    return str(uuid.uuid4())


def short_id(task_id: str) -> str:
    """一覧表示用の先頭 SHORT_ID_LENGTH 文字。"""
    return task_id[:SHORT_ID_LENGTH]


def parse_id(
    s: str,
    *,
    source_ids: list[str],
    min_prefix: int = MIN_PREFIX_LENGTH,
) -> Result[str, str]:
    """完全一致、または min_prefix 文字以上の一意なprefixでタスクIDを解決する。"""
    s = s.strip()
    if not s:
        return Err("Empty ID")
    if s in source_ids:
        return Ok(s)
    candidates = [tid for tid in source_ids if tid.startswith(s)] if len(s) >= min_prefix else []
    match candidates:
        case [tid]:
            return Ok(tid)
        case []:
            return Err(f"Unknown ID: {s} (please set correct ID.)")
        case _:
            return Err(f"Ambiguous ID: {s} ({len(candidates)} tasks. Please set a longer ID.)")
