import curses
import logging
import os
import sys

from app_state import AppState
from config_paths import LOG_PATH, ensure_config_dirs, load_config
from parquet_source import OpenError, ParquetSource

__version__ = "0.1.0"

USAGE = "parqview - terminal explorer for Parquet files\n\nUsage:\n  parqview <file.parquet>\n  parqview -v\n"

logger = logging.getLogger(__name__)


def _configure_logging(level: str):
    try:
        logging.basicConfig(
            filename=LOG_PATH,
            level=getattr(logging, level, logging.WARNING),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    except OSError as exc:
        # the terminal belongs to curses; without a log file stay silent
        logging.getLogger().addHandler(logging.NullHandler())
        print(f"parqview: cannot open log {LOG_PATH}: {exc}", file=sys.stderr)


def main(argv=None) -> int:
    args = sys.argv[1:] if argv is None else list(argv)

    if "-v" in args or "-V" in args:
        print(__version__)
        return 0

    if "-h" in args or "--help" in args:
        print(USAGE)
        return 0

    if len(args) != 1:
        print(USAGE, file=sys.stderr)
        return 2

    path = args[0]
    try:
        ensure_config_dirs()
    except OSError as exc:
        print(f"parqview: cannot create config dir: {exc}", file=sys.stderr)
    config = load_config()
    _configure_logging(config["LOG_LEVEL"])

    try:
        source = ParquetSource.open(path)
    except OpenError as exc:
        logger.error("open failed: %s", exc)
        print(f"parqview: {exc}", file=sys.stderr)
        return 1

    # Make ESC snappy
    os.environ.setdefault("ESCDELAY", "25")

    from orchestrator import Orchestrator

    app = AppState(source, config)
    try:
        curses.wrapper(lambda stdscr: Orchestrator(stdscr, app).run())
    finally:
        app.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
