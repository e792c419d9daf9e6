STATUS_MARK_MAP = {
    "pending": " ",
    "done": "x",
}

MAIN_THEME_COLOR = 1
SELECTED_ROW_COLOR = 3
COMPLETED_COLOR = 5
TODAY_COLOR = 6
HELP_BG_COLOR = 9

MAX_HELP_BOX_WIDTH = 64
MIN_COLUMN_WIDTH = 8

HELP_LINES = [
    "h/j/k/l, arrows   move focus",
    "Tab               switch day board / backlog",
    "[ / ]             previous / next week (day board)",
    "gg                jump to today",
    "x, Space          toggle done",
    "H / L             move task left / right",
    "b                 send to backlog / schedule on focused day",
    "dd                delete task",
    "W                 toggle week start (Sun/Mon)",
    "r                 refresh",
    "?                 toggle this help",
    "q, Ctrl-C         quit",
]


class HeaderLines:
    """Header lines for the TUI."""

    @classmethod
    def height(cls) -> int:
        return 2

    @classmethod
    def title(cls) -> str:
        return "--- mach (TUI) > weekly planning board ---"

    @classmethod
    def status(cls, week_label: str, mode_label: str, week_start_label: str) -> str:
        return f"Week: [{week_label}] [Board: {mode_label}] [Week starts: {week_start_label}] [(?) help] [(q)uit]"
