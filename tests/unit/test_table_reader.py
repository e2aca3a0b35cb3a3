from __future__ import annotations

from pathlib import Path

import pytest

from mailmerge.table.reader import (
    TSV_DELIMITER,
    TableDecodeError,
    UnsupportedFileTypeError,
    delimiter_for,
    read_table_file,
    read_table_text,
)


def test_read_csv_keeps_header_order_and_text_cells(write_table):
    path = write_table("contacts.csv", "Name,Zip,E-mail 1 - Value\nAl,00123,a@x.com\nBo,NA,b@y.org\n")
    table = read_table_file(path)
    assert table.source_name == "contacts.csv"
    assert table.columns == ["Name", "Zip", "E-mail 1 - Value"]
    # 数値 / NA 変換なし
    assert table.rows[0] == {"Name": "Al", "Zip": "00123", "E-mail 1 - Value": "a@x.com"}
    assert table.rows[1]["Zip"] == "NA"


def test_read_tsv(write_table):
    path = write_table("contacts.tsv", "Name\tEmail\nAl\ta@x.com\nBo, Jr.\tb@y.org\n")
    table = read_table_file(path)
    assert table.columns == ["Name", "Email"]
    assert [r["Name"] for r in table.rows] == ["Al", "Bo, Jr."]


def test_blank_lines_are_skipped(write_table):
    path = write_table("blank.csv", "Email\na@x.com\n\n\nb@y.org\n")
    table = read_table_file(path)
    assert [r["Email"] for r in table.rows] == ["a@x.com", "b@y.org"]


def test_empty_cells_are_empty_strings(write_table):
    path = write_table("cells.csv", "Name,Email\nAl,\n")
    table = read_table_file(path)
    assert table.rows == [{"Name": "Al", "Email": ""}]


def test_short_rows_yield_missing_cells(write_table):
    path = write_table("short.csv", "Name,Email,Phone\nAl\n")
    table = read_table_file(path)
    assert table.rows[0]["Name"] == "Al"
    assert table.rows[0]["Email"] is None
    assert table.rows[0]["Phone"] is None


def test_header_only_file_has_no_rows(write_table):
    path = write_table("header.csv", "Name,Email\n")
    table = read_table_file(path)
    assert table.columns == ["Name", "Email"]
    assert table.rows == []


def test_zero_byte_file_is_empty_table(write_table):
    path = write_table("zero.csv", "")
    table = read_table_file(path)
    assert table.columns == []
    assert table.rows == []


def test_utf8_bom_is_stripped_from_first_header(temp_workdir: Path):
    path = temp_workdir / "data" / "bom.csv"
    path.write_bytes("\ufeffE-mail 1 - Value\na@x.com\n".encode("utf-8"))
    table = read_table_file(path)
    assert table.columns == ["E-mail 1 - Value"]


def test_non_utf8_file_raises_decode_error(temp_workdir: Path):
    path = temp_workdir / "data" / "latin1.csv"
    path.write_bytes("Name,Email\nJos\xe9,j@x.com\n".encode("latin-1"))
    with pytest.raises(TableDecodeError):
        read_table_file(path)


def test_unclosed_quote_raises_decode_error(write_table):
    path = write_table("broken.csv", 'Name,Email\n"Al,a@x.com\n')
    with pytest.raises(TableDecodeError):
        read_table_file(path)


def test_missing_file_raises_decode_error(temp_workdir: Path):
    with pytest.raises(TableDecodeError):
        read_table_file(temp_workdir / "data" / "missing.csv")


def test_delimiter_for_suffix():
    assert delimiter_for(Path("a.csv")) == ","
    assert delimiter_for(Path("A.TSV")) == TSV_DELIMITER
    with pytest.raises(UnsupportedFileTypeError):
        delimiter_for(Path("contacts.numbers"))
    with pytest.raises(UnsupportedFileTypeError):
        delimiter_for(Path("README"))


def test_read_table_text():
    table = read_table_text("Email\ta\nx@y.com\t1\n", delimiter=TSV_DELIMITER, source_name="pasted")
    assert table.source_name == "pasted"
    assert table.rows == [{"Email": "x@y.com", "a": "1"}]
