import argparse

from mach.core import ops
from mach.interfaces.tui.app import App
from mach.interfaces.tui.terminal import TerminalGuard
from mach.storage import Store


def run(args: argparse.Namespace | None = None, st: Store | None = None) -> int:
    """ストアを開いてから端末を確保し、イベントループを回す。終了時にストアを閉じる。"""
    st = st or ops.open_store(getattr(args, "data_path", None))
    try:
        with TerminalGuard() as stdscr:
            app = App(stdscr, st, args)
            return app.run()
    finally:
        st.close()
