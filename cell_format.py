import datetime as dt
import math

import numpy as np
import pandas as pd

from data_model import ReadErrorCell

NULL_TEXT = "NULL"
READ_ERROR_TEXT = "<read error>"


def _is_null(value) -> bool:
    if value is None:
        return True
    if isinstance(value, (list, tuple, dict, np.ndarray)):
        return False
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _format_float(value) -> str:
    f = float(value)
    if math.isinf(f):
        return "inf" if f > 0 else "-inf"
    if f.is_integer() and abs(f) < 1e16:
        return f"{f:.1f}"
    return repr(f)


def _format_nested(value) -> str:
    if isinstance(value, np.ndarray):
        value = value.tolist()
    if isinstance(value, dict):
        inner = ", ".join(f"{k}: {_format_nested(v)}" for k, v in value.items())
        return "{" + inner + "}"
    if isinstance(value, (list, tuple)):
        # map columns arrive from pyarrow as lists of (key, value) tuples
        if value and all(isinstance(v, tuple) and len(v) == 2 for v in value):
            inner = ", ".join(
                f"{_format_nested(k)}: {_format_nested(v)}" for k, v in value
            )
            return "{" + inner + "}"
        return "[" + ", ".join(_format_nested(v) for v in value) + "]"
    return render_value(value)


def render_value(value) -> str:
    """Display text for one cell."""
    if isinstance(value, ReadErrorCell):
        return READ_ERROR_TEXT
    if _is_null(value):
        return NULL_TEXT
    if isinstance(value, str):
        return value
    if isinstance(value, (bool, np.bool_)):
        return "true" if value else "false"
    if isinstance(value, (float, np.floating)):
        return _format_float(value)
    if isinstance(value, (int, np.integer)):
        return str(int(value))
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError:
            return "0x" + raw.hex()
    if isinstance(value, (dict, list, tuple, np.ndarray)):
        return _format_nested(value)
    if isinstance(value, pd.Timestamp):
        return value.isoformat(sep=" ")
    if isinstance(value, dt.datetime):
        return value.isoformat(sep=" ")
    if isinstance(value, (dt.date, dt.time)):
        return value.isoformat()
    return str(value)


def search_text(value) -> str:
    """Lowercased text a search query is matched against.

    Nulls and unreadable cells have no text, so they never match a non-empty query.
    """
    if isinstance(value, ReadErrorCell) or _is_null(value):
        return ""
    return render_value(value).lower()
