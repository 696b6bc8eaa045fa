from NoteBlocks.tables import (
    format_row,
    is_separator_row,
    is_table_start,
    pad_rows,
    parse_row,
    separator_row,
)


def test_parse_row_cells():
    assert parse_row("| a | b |") == ["a", "b"]
    assert parse_row("a | b |") == ["a", "b"]
    assert parse_row("a | b") is None
    assert parse_row("plain text") is None
    assert parse_row("|  |  |") is None
    assert parse_row("|  |  |", allow_empty=True) == ["", ""]


def test_parse_row_unescapes_pipes_and_breaks():
    assert parse_row("| a \\| b | c |") == ["a | b", "c"]
    assert parse_row("| x<br>y | z |") == ["x\ny", "z"]


def test_table_start_needs_two_columns_and_separator():
    assert is_table_start(["| a | b |", "|---|:---:|"], 0)
    assert not is_table_start(["| a |", "| --- |"], 0)
    assert not is_table_start(["| a | b |", "| --- |"], 0)
    assert not is_table_start(["| a | b |"], 0)
    assert is_separator_row("| --- | ---: |", 2)


def test_pad_rows_is_rectangular():
    rows = pad_rows([["a", "b", "c"], ["d", "e"], ["f"]])
    assert rows == [["a", "b", "c"], ["d", "e", ""], ["f", "", ""]]
    assert pad_rows([["a"]], minimum=2) == [["a", ""]]


def test_format_row_escapes_cells():
    assert format_row(["a|b", "x\ny"]) == "| a\\|b | x<br>y |"
    assert separator_row(3) == "| --- | --- | --- |"
    assert parse_row(format_row(["a|b", "x\ny"])) == ["a|b", "x\ny"]
