from config_paths import HISTORY_PATH
from history_manager import HistoryManager
from info_panes import metadata_lines, schema_lines
from query_runner import DuckDbEngine, QueryRunner
from table_model import SourceTableModel


class AppState:
    """Everything loaded for one file: read-only description plus collaborators.

    The interactive state lives in ``ViewState``; this object only holds what the
    transitions read from (models, metadata) or hand work to (runner, history).
    """

    def __init__(self, source, config, runner=None, history=None):
        self.source = source
        self.file_path = source.path
        self.config = config

        self.schema = source.schema
        self.metadata = source.metadata
        self.row_groups = source.row_groups
        self.visualize_model = SourceTableModel(
            source, max_window_span=config["MAX_WINDOW_SPAN"]
        )

        self.schema_lines = schema_lines(self.schema)
        self.metadata_lines = metadata_lines(self.metadata)

        if runner is None:
            runner = QueryRunner(DuckDbEngine(source.path, config["SQL_TABLE_NAME"]))
        self.runner = runner

        if history is None:
            history = HistoryManager(HISTORY_PATH, max_items=config["HISTORY_MAX_ITEMS"])
            history.load()
        self.history = history

    def close(self):
        self.runner.close()
        self.source.close()
