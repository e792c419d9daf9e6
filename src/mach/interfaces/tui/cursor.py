from collections.abc import Callable
from dataclasses import dataclass


@dataclass
class GridCursor:
    """列×行グリッド上の選択位置。

    日付列用とバックログ列用に1つずつ持つ。行は常に対象列の有効な
    インデックスか、列が空であることを表す None のどちらか。
    端では折り返さずに止まる。

    Attributes:
        column_count: 列数
        length_of: 列インデックスからその列の行数を返す関数
        col: 現在の列
        row: 現在の行 (列が空なら None)
    """

    column_count: int
    length_of: Callable[[int], int]
    col: int = 0
    row: int | None = None

    def __post_init__(self) -> None:
        self.clamp()

    @property
    def position(self) -> tuple[int, int | None]:
        return (self.col, self.row)

    @property
    def is_empty(self) -> bool:
        return self.row is None

    def _clamp_col(self, col: int) -> int:
        return max(0, min(col, self.column_count - 1))

    def _clamp_row(self, row: int) -> int | None:
        length = self.length_of(self.col)
        if length <= 0:
            return None
        return max(0, min(row, length - 1))

    def set_focus(self, col: int, row: int = 0) -> None:
        """指定セルへ直接移動する (起動時・リフレッシュ時に今日の列へ合わせる用)。"""
        self.col = self._clamp_col(col)
        self.row = self._clamp_row(row)

    def move_column(self, delta: int) -> None:
        self.col = self._clamp_col(self.col + delta)
        self.row = self._clamp_row(self.row or 0)

    def move_row(self, delta: int) -> None:
        if self.row is None:
            self.row = self._clamp_row(0)
            return
        self.row = self._clamp_row(self.row + delta)

    def clamp(self) -> None:
        """列の中身が変わった後に位置を有効範囲へ戻す。"""
        self.col = self._clamp_col(self.col)
        self.row = self._clamp_row(self.row or 0)

    def resize(self, column_count: int) -> None:
        self.column_count = max(1, column_count)
        self.clamp()
