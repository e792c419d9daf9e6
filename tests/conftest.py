import os
import tempfile

# ログ・設定ファイルをユーザーのホームに作らないよう、mach の import 前に差し替える
os.environ["MACH_HOME_DIR"] = tempfile.mkdtemp(prefix="mach-test-")
os.environ.pop("MACH_DATA_PATH", None)
os.environ.pop("MACH_WEEK_START", None)
