"""Tests for CLI entry point."""

import pytest

from memoria import cli


@pytest.fixture
def data_dir(tmp_path, monkeypatch):
    path = tmp_path / "data"
    monkeypatch.setenv("MEMORIA_DATA_DIR", str(path))
    monkeypatch.chdir(tmp_path)  # no stray .env
    return path


def test_usage_without_command(data_dir, monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["memoria"])
    assert cli.main() == 1
    assert "Usage: memoria" in capsys.readouterr().out


def test_init_creates_data_dir(data_dir, monkeypatch):
    monkeypatch.setattr("sys.argv", ["memoria", "init"])
    assert cli.main() == 0
    assert (data_dir / "long_term_memory.txt").exists()
    assert (data_dir / "memoria.log").exists()


def test_debug_flag_removed_from_args(data_dir, monkeypatch):
    monkeypatch.setattr("sys.argv", ["memoria", "--debug", "init"])
    assert cli.main() == 0


def test_unknown_command(data_dir, monkeypatch, capsys):
    monkeypatch.setattr("sys.argv", ["memoria", "dance"])
    assert cli.main() == 1
    assert "Unknown command: dance" in capsys.readouterr().out


def test_health_reports_missing_credentials(data_dir, monkeypatch, capsys):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.setattr("sys.argv", ["memoria", "health"])
    assert cli.main() == 1
    assert "gpt-4o-mini (chat): missing credentials" in capsys.readouterr().out


def test_read_line_eof(monkeypatch):
    def raise_eof(prompt):
        raise EOFError

    monkeypatch.setattr("builtins.input", raise_eof)
    assert cli._read_line() is None
