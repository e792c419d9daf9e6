from dataclasses import dataclass
from typing import Literal

UiMode = Literal[
    "day",
    "backlog",
    "help",
]
BoardMode = Literal[
    "day",
    "backlog",
]
Chord = Literal[
    "g",  # gg: 今日の列へジャンプ
    "d",  # dd: 削除の確定
]


@dataclass(frozen=True)
class ChordState:
    """2打鍵コマンドの待機状態。同時に待機できるのは1つだけ。"""

    armed: Chord | None = None

    @property
    def pending_g(self) -> bool:
        return self.armed == "g"

    @property
    def pending_delete(self) -> bool:
        return self.armed == "d"

    def arm(self, chord: Chord) -> "ChordState":
        return ChordState(armed=chord)

    def disarm(self) -> "ChordState":
        return ChordState()


@dataclass
class ModeState:
    """どの領域にフォーカスがあるか。help は直前のボードへ戻る。"""

    mode: UiMode = "day"
    board_before_help: BoardMode = "day"

    @property
    def show_help(self) -> bool:
        return self.mode == "help"

    @property
    def board(self) -> BoardMode:
        """Help 表示中でも、移動などの対象となるボード。"""
        if self.mode == "help":
            return self.board_before_help
        return self.mode

    def toggle_region(self) -> None:
        if self.mode == "day":
            self.mode = "backlog"
        elif self.mode == "backlog":
            self.mode = "day"

    def focus(self, board: BoardMode) -> None:
        if self.mode == "help":
            self.board_before_help = board
        else:
            self.mode = board

    def enter_help(self) -> None:
        if self.mode != "help":
            self.board_before_help = self.mode
            self.mode = "help"

    def exit_help(self) -> None:
        if self.mode == "help":
            self.mode = self.board_before_help

    def toggle_help(self) -> None:
        if self.mode == "help":
            self.exit_help()
        else:
            self.enter_help()
