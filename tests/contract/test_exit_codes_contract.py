from __future__ import annotations

from pathlib import Path

from mailmerge.cli import main as cli_main

"""Exit code contract: 0 = success (including zero emails), 1 = fatal."""


def test_exit_code_fatal_on_explicit_missing_config(temp_workdir: Path, write_table, capsys):
    path = write_table("contacts.csv", "Email\na@x.com\n")
    code = cli_main(["--config", "config/missing.yml", "extract", str(path)])
    captured = capsys.readouterr()
    assert code == 1
    assert "ERROR config: config file not found" in captured.out


def test_exit_code_fatal_on_config_from_env(temp_workdir: Path, write_table, monkeypatch, capsys):
    monkeypatch.setenv("MAILMERGE_CONFIG", "config/nowhere.yml")
    path = write_table("contacts.csv", "Email\na@x.com\n")
    assert cli_main(["extract", str(path)]) == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_fatal_on_decode_failure(temp_workdir: Path, capsys):
    path = temp_workdir / "data" / "contacts.csv"
    path.write_bytes(b"Name,Email\n\xff\xfe,x@y.com\n")
    assert cli_main(["extract", str(path)]) == 1
    assert "ERROR file:" in capsys.readouterr().out


def test_exit_code_fatal_on_missing_file(temp_workdir: Path, capsys):
    assert cli_main(["extract", str(temp_workdir / "data" / "missing.tsv")]) == 1
    assert "ERROR file:" in capsys.readouterr().out


def test_exit_code_fatal_on_empty_tsv(write_table, capsys):
    path = write_table("contacts.tsv", "")
    assert cli_main(["extract", str(path)]) == 1
    assert "ERROR file: TSV file is empty" in capsys.readouterr().out


def test_exit_code_success(write_table, capsys):
    path = write_table("contacts.csv", "Email\na@x.com\n")
    assert cli_main(["extract", str(path)]) == 0


def test_exit_code_success_with_zero_emails(write_table, capsys):
    path = write_table("contacts.csv", "Name\nAl\n")
    assert cli_main(["extract", str(path)]) == 0
