"""Key events -> board actions.

dispatch() is a pure function of (key, mode, chord state): it returns the
action to apply and the chord state for the next key, and touches nothing else.
"""

import curses
from dataclasses import dataclass
from typing import Literal

from mach.interfaces.tui.modes import ChordState, UiMode

Direction = Literal[
    "left",
    "right",
    "up",
    "down",
]

KEY_CTRL_C = 3
KEY_TAB = 9
KEY_CHORD_G = ord("g")
KEY_CHORD_D = ord("d")
QUIT_KEYS = (ord("q"), ord("Q"), KEY_CTRL_C)


@dataclass(frozen=True)
class MoveFocus:
    direction: Direction


@dataclass(frozen=True)
class SwitchRegion:
    pass


@dataclass(frozen=True)
class ToggleHelp:
    pass


@dataclass(frozen=True)
class ShiftWeek:
    weeks: int


@dataclass(frozen=True)
class RequestDelete:
    pass


@dataclass(frozen=True)
class ConfirmDelete:
    pass


@dataclass(frozen=True)
class JumpToToday:
    pass


@dataclass(frozen=True)
class ToggleDone:
    pass


@dataclass(frozen=True)
class MoveTask:
    delta: int


@dataclass(frozen=True)
class ToggleBacklog:
    pass


@dataclass(frozen=True)
class ToggleWeekStart:
    pass


@dataclass(frozen=True)
class Refresh:
    pass


@dataclass(frozen=True)
class Quit:
    pass


@dataclass(frozen=True)
class NoOp:
    pass


Action = (
    MoveFocus
    | SwitchRegion
    | ToggleHelp
    | ShiftWeek
    | RequestDelete
    | ConfirmDelete
    | JumpToToday
    | ToggleDone
    | MoveTask
    | ToggleBacklog
    | ToggleWeekStart
    | Refresh
    | Quit
    | NoOp
)

# 両方のボードで共通のキー
BOARD_KEYMAP: dict[int, Action] = {
    ord("h"): MoveFocus("left"),
    curses.KEY_LEFT: MoveFocus("left"),
    ord("l"): MoveFocus("right"),
    curses.KEY_RIGHT: MoveFocus("right"),
    ord("k"): MoveFocus("up"),
    curses.KEY_UP: MoveFocus("up"),
    ord("j"): MoveFocus("down"),
    curses.KEY_DOWN: MoveFocus("down"),
    KEY_TAB: SwitchRegion(),
    ord("?"): ToggleHelp(),
    ord("x"): ToggleDone(),
    ord(" "): ToggleDone(),
    ord("H"): MoveTask(-1),
    ord("L"): MoveTask(+1),
    ord("b"): ToggleBacklog(),
    ord("W"): ToggleWeekStart(),
    ord("r"): Refresh(),
}

# 日付ボードでのみ有効なキー
DAY_KEYMAP: dict[int, Action] = {
    ord("["): ShiftWeek(-1),
    ord("]"): ShiftWeek(+1),
}


def dispatch(key: int, mode: UiMode, chord: ChordState) -> tuple[Action, ChordState]:
    """キー1つを action に変換し、次のキーのための chord 状態と一緒に返す。"""
    # quit はモード・chord に関係なく最優先
    if key in QUIT_KEYS:
        return Quit(), chord.disarm()

    # help 表示中は任意のキーで閉じる
    if mode == "help":
        return ToggleHelp(), chord.disarm()

    # 待機中の chord は次のキーで必ず解除される
    if chord.armed is not None:
        armed = chord.armed
        chord = chord.disarm()
        if armed == "g" and key == KEY_CHORD_G:
            return JumpToToday(), chord
        if armed == "d" and key == KEY_CHORD_D:
            return ConfirmDelete(), chord
        # 一致しなければ通常のキーとして処理を続ける

    if key == KEY_CHORD_G:
        return NoOp(), chord.arm("g")
    if key == KEY_CHORD_D:
        return RequestDelete(), chord.arm("d")

    if mode == "day" and key in DAY_KEYMAP:
        return DAY_KEYMAP[key], chord
    return BOARD_KEYMAP.get(key, NoOp()), chord
