from datetime import date, datetime

from result import Err, Ok, Result

ISO_FMT = "%Y-%m-%dT%H:%M:%S"
DATE_FMT = "%Y-%m-%d"


def now_iso() -> str:
    return datetime.now().astimezone().strftime(ISO_FMT)


def today() -> date:
    return datetime.now().astimezone().date()


def format_date(d: date) -> str:
    return d.strftime(DATE_FMT)


def parse_date(s: str) -> Result[date, str]:
    """'YYYY-MM-DD' 形式の文字列を date に変換する。"""
    try:
        return Ok(datetime.strptime(s.strip(), DATE_FMT).date())
    except ValueError as e:
        return Err(f"Invalid date '{s}': {e!s}")
