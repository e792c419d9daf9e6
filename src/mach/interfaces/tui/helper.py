import unicodedata

ELLIPSIS = "…"


def _char_width(ch: str) -> int:
    """Calculate the width of a character in the terminal."""
    if len(ch) == 0:
        return 0
    # 制御文字
    if ch < " ":
        return 0
    # 結合文字 (濁点など)
    if unicodedata.combining(ch):
        return 0
    # 東アジア文字幅プロパティ
    # F: full-width, W: wide, A: ambiguous を2倍にして返す
    if unicodedata.east_asian_width(ch) in ("F", "W", "A"):
        return 2
    return 1


def _string_width(s: str) -> int:
    """Calculate the width of a string in the terminal."""
    return sum(map(_char_width, s))


def _fit_width(s: str, width: int) -> str:
    """Cut a string to the terminal width, marking the cut with '…'."""
    if width <= 0:
        return ""
    if _string_width(s) <= width:
        return s
    budget = width - _char_width(ELLIPSIS)
    if budget <= 0:
        return ""
    out = ""
    used = 0
    for ch in s:
        w = _char_width(ch)
        if used + w > budget:
            break
        out += ch
        used += w
    return out + ELLIPSIS
