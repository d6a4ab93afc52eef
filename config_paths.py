import json
import os

HOME = os.path.expanduser("~")
XDG_CONFIG_HOME = os.environ.get("XDG_CONFIG_HOME")
CONFIG_HOME = XDG_CONFIG_HOME if XDG_CONFIG_HOME else os.path.join(HOME, ".config")
CONFIG_DIR = os.path.join(CONFIG_HOME, "parqview")
HISTORY_PATH = os.path.join(CONFIG_DIR, "history.log")
CONFIG_JSON = os.path.join(CONFIG_DIR, "config.json")
LOG_PATH = os.path.join(CONFIG_DIR, "parqview.log")

# default settings
SQL_TABLE_NAME_DEFAULT = "parquet"
SEARCH_CHUNK_ROWS_DEFAULT = 8192
MAX_COL_WIDTH_DEFAULT = 40
MAX_WINDOW_SPAN_DEFAULT = 4096
HISTORY_MAX_ITEMS_DEFAULT = 100
LOG_LEVEL_DEFAULT = "WARNING"

_LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def ensure_config_dirs():
    os.makedirs(CONFIG_DIR, exist_ok=True)


def _positive_int(value):
    if isinstance(value, bool) or not isinstance(value, int):
        return None
    return value if value > 0 else None


def load_config():
    cfg = {
        "SQL_TABLE_NAME": SQL_TABLE_NAME_DEFAULT,
        "SEARCH_CHUNK_ROWS": SEARCH_CHUNK_ROWS_DEFAULT,
        "MAX_COL_WIDTH": MAX_COL_WIDTH_DEFAULT,
        "MAX_WINDOW_SPAN": MAX_WINDOW_SPAN_DEFAULT,
        "DETAIL_WRAP": False,
        "HISTORY_MAX_ITEMS": HISTORY_MAX_ITEMS_DEFAULT,
        "LOG_LEVEL": LOG_LEVEL_DEFAULT,
    }

    if not os.path.exists(CONFIG_JSON):
        return cfg

    try:
        with open(CONFIG_JSON, "r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, ValueError):
        return cfg
    if not isinstance(data, dict):
        return cfg

    name = data.get("sql_table_name")
    if isinstance(name, str) and name.strip():
        cfg["SQL_TABLE_NAME"] = name.strip()

    for key, cfg_key in (
        ("search_chunk_rows", "SEARCH_CHUNK_ROWS"),
        ("max_col_width", "MAX_COL_WIDTH"),
        ("max_window_span", "MAX_WINDOW_SPAN"),
        ("history_max_items", "HISTORY_MAX_ITEMS"),
    ):
        value = _positive_int(data.get(key))
        if value is not None:
            cfg[cfg_key] = value

    wrap = data.get("detail_wrap")
    if isinstance(wrap, bool):
        cfg["DETAIL_WRAP"] = wrap

    level = data.get("log_level")
    if isinstance(level, str) and level.upper() in _LOG_LEVELS:
        cfg["LOG_LEVEL"] = level.upper()

    return cfg
