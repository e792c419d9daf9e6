from mach.storage.base import Store
from mach.storage.sqlite3_store import StoreToSQLite
from mach.storage.yaml_store import StoreToYAML
from mach.util.dirs import load_env

__all__ = [
    "Store",
    "StoreToSQLite",
    "StoreToYAML",
    "get_store",
]


def get_store(data_path: str | None = None) -> Store:
    path = data_path or load_env()["DATA_PATH"]
    if path.endswith((".yaml", ".yml")):
        return StoreToYAML(data_path=path)
    if path.endswith(".db") or path == ":memory:":
        return StoreToSQLite(data_path=path)
    _msg = f"Invalid data path: {path} (expected *.db or *.yaml)"
    raise ValueError(_msg)
