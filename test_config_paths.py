import json
import tempfile
from pathlib import Path

import config_paths


def _load_with_json(payload):
    with tempfile.TemporaryDirectory() as tmp:
        cfg_dir = Path(tmp) / "parqview"
        cfg_dir.mkdir(parents=True, exist_ok=True)
        cfg_path = cfg_dir / "config.json"
        if payload is not None:
            cfg_path.write_text(payload if isinstance(payload, str) else json.dumps(payload))
        # point module paths to temp
        orig_dir = config_paths.CONFIG_DIR
        orig_json = config_paths.CONFIG_JSON
        try:
            config_paths.CONFIG_DIR = str(cfg_dir)
            config_paths.CONFIG_JSON = str(cfg_path)
            return config_paths.load_config()
        finally:
            config_paths.CONFIG_DIR = orig_dir
            config_paths.CONFIG_JSON = orig_json


def test_load_config_defaults_without_json():
    cfg = _load_with_json(None)
    assert cfg["SQL_TABLE_NAME"] == "parquet"
    assert cfg["SEARCH_CHUNK_ROWS"] == config_paths.SEARCH_CHUNK_ROWS_DEFAULT
    assert cfg["MAX_COL_WIDTH"] == 40
    assert cfg["DETAIL_WRAP"] is False
    assert cfg["LOG_LEVEL"] == "WARNING"


def test_load_config_reads_json_overrides():
    cfg = _load_with_json(
        {
            "sql_table_name": "t",
            "search_chunk_rows": 1000,
            "max_col_width": 25,
            "max_window_span": 512,
            "history_max_items": 20,
            "detail_wrap": True,
            "log_level": "debug",
        }
    )
    assert cfg["SQL_TABLE_NAME"] == "t"
    assert cfg["SEARCH_CHUNK_ROWS"] == 1000
    assert cfg["MAX_COL_WIDTH"] == 25
    assert cfg["MAX_WINDOW_SPAN"] == 512
    assert cfg["HISTORY_MAX_ITEMS"] == 20
    assert cfg["DETAIL_WRAP"] is True
    assert cfg["LOG_LEVEL"] == "DEBUG"


def test_load_config_ignores_invalid_values():
    cfg = _load_with_json(
        {
            "sql_table_name": "  ",
            "search_chunk_rows": 0,
            "max_col_width": "wide",
            "detail_wrap": "yes",
            "log_level": "chatty",
        }
    )
    assert cfg["SQL_TABLE_NAME"] == "parquet"
    assert cfg["SEARCH_CHUNK_ROWS"] == config_paths.SEARCH_CHUNK_ROWS_DEFAULT
    assert cfg["MAX_COL_WIDTH"] == 40
    assert cfg["DETAIL_WRAP"] is False
    assert cfg["LOG_LEVEL"] == "WARNING"


def test_load_config_survives_malformed_json():
    cfg = _load_with_json("{not json")
    assert cfg["SQL_TABLE_NAME"] == "parquet"
