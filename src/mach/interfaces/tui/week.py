from dataclasses import dataclass, field
from datetime import date, timedelta

from mach.core.models import WeekStart

DAYS_IN_WEEK = 7
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


@dataclass(frozen=True)
class ColumnMeta:
    """1つの日付列 (日付と見出し)。"""

    title: str
    date: date


def start_of_week(d: date, preference: WeekStart) -> date:
    """d 以前で最も近い週の開始曜日 (日曜 or 月曜) を返す。"""
    # date.weekday(): Mon=0 .. Sun=6
    offset = (d.weekday() + 1) % 7 if preference == "sunday" else d.weekday()
    return d - timedelta(days=offset)


def column_title(d: date) -> str:
    return f"{WEEKDAY_LABELS[d.weekday()]} {d.month:02d}/{d.day:02d}"


def build_columns(week_start: date) -> list[ColumnMeta]:
    cols: list[ColumnMeta] = []
    for offset in range(DAYS_IN_WEEK):
        d = week_start + timedelta(days=offset)
        cols.append(ColumnMeta(title=column_title(d), date=d))
    return cols


@dataclass
class WeekState:
    """表示中の1週間 (カレンダーウィンドウ)。

    week_start は常に設定された週の開始曜日に揃っており、columns は常に7列。
    """

    week_start: date
    preference: WeekStart = "sunday"
    columns: list[ColumnMeta] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.week_start = start_of_week(self.week_start, self.preference)
        self.columns = build_columns(self.week_start)

    @classmethod
    def new(cls, today: date, preference: WeekStart) -> "WeekState":
        return cls(week_start=today, preference=preference)

    @property
    def first_date(self) -> date:
        return self.columns[0].date

    @property
    def last_date(self) -> date:
        return self.columns[-1].date

    def shift(self, weeks: int) -> None:
        self.week_start += timedelta(days=DAYS_IN_WEEK * weeks)
        self.columns = build_columns(self.week_start)

    def prev_week(self) -> None:
        self.shift(-1)

    def next_week(self) -> None:
        self.shift(+1)

    def column_index(self, d: date) -> int | None:
        """d の列インデックス。表示中の週に含まれなければ None。"""
        for idx, col in enumerate(self.columns):
            if col.date == d:
                return idx
        return None

    def date_at(self, idx: int) -> date | None:
        if 0 <= idx < len(self.columns):
            return self.columns[idx].date
        return None

    def contains(self, d: date) -> bool:
        return self.first_date <= d <= self.last_date
