import pytest

import main


@pytest.fixture(autouse=True)
def _no_user_config(monkeypatch):
    monkeypatch.setattr(main, "ensure_config_dirs", lambda: None)
    monkeypatch.setattr(
        main,
        "load_config",
        lambda: {"LOG_LEVEL": "WARNING", "SQL_TABLE_NAME": "parquet"},
    )
    monkeypatch.setattr(main, "_configure_logging", lambda level: None)


def test_version_flag(capsys):
    assert main.main(["-v"]) == 0
    assert capsys.readouterr().out.strip() == main.__version__


def test_help_flag(capsys):
    assert main.main(["-h"]) == 0
    assert "Usage" in capsys.readouterr().out


@pytest.mark.parametrize("args", [[], ["a.parquet", "b.parquet"]])
def test_wrong_arity_prints_usage(args, capsys):
    assert main.main(args) == 2
    assert "Usage" in capsys.readouterr().err


def test_missing_file_exits_with_error(tmp_path, capsys):
    path = tmp_path / "missing.parquet"
    assert main.main([str(path)]) == 1
    err = capsys.readouterr().err
    assert "parqview: file not found" in err
    assert "missing.parquet" in err


def test_unreadable_file_exits_with_error(tmp_path, capsys):
    path = tmp_path / "bad.parquet"
    path.write_bytes(b"PAR1 but not really")
    assert main.main([str(path)]) == 1
    assert "bad.parquet" in capsys.readouterr().err
