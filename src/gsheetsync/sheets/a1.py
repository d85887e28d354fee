"""
A1 notation helpers.
See https://developers.google.com/sheets/api/guides/concepts#cell
Cells in this package are addressed with zero based (row, column) pairs while
A1 is one based with alphabetical columns, so (0, 0) is A1 and (2, 27) is AB3.
A range is qualified with the sheet title, '<title>'!<cell>.  Titles are always
single quoted with embedded quotes doubled, which the API accepts for any title.
"""
import re

from . import GoogleSheetsMaxColumns

_A1CELLREGEXSTR = r"^\s*(?P<col>[A-Z]{1,3})(?P<row>[1-9]\d*)\s*$"
_A1COLREGEXSTR = r"^[A-Z]{1,3}$"

_a1_cell_re = re.compile(_A1CELLREGEXSTR)
_a1_col_re = re.compile(_A1COLREGEXSTR)

def col_to_letters(col: int) -> str:
    """
    One based column number to letters, 1 -> A, 27 -> AA, 18278 -> ZZZ.
    """
    if col < 1 or col > GoogleSheetsMaxColumns:
        raise ValueError(f"Column out of range: {col}")
    letters = ""
    while col > 0:
        col, rem = divmod(col - 1, 26)
        letters = chr(ord('A') + rem) + letters
    return letters

def letters_to_col(letters: str) -> int:
    """
    Column letters to one based column number, A -> 1, AA -> 27.
    """
    s = str(letters).upper()
    if not _a1_col_re.match(s):
        raise ValueError(f"Invalid column label: {letters}")
    col = 0
    for c in s:
        col = col * 26 + (ord(c) - ord('A') + 1)
    return col

def cell_pos(row: int, column: int) -> str:
    """Zero based coordinates to an A1 cell position."""
    if row < 0:
        raise ValueError(f"Row out of range: {row}")
    return f"{col_to_letters(column + 1)}{row + 1}"

def parse_cell_pos(pos: str) -> tuple[int, int]:
    """A1 cell position to zero based (row, column)."""
    m = _a1_cell_re.match(str(pos).upper())
    if not m:
        raise ValueError(f"Invalid cell position: {pos}")
    return int(m.group('row')) - 1, letters_to_col(m.group('col')) - 1

def quote_title(title: str) -> str:
    return "'" + str(title).replace("'", "''") + "'"

def a1_range(title: str, pos: str) -> str:
    """Sheet qualified range, 'Sheet 1'!B3"""
    return f"{quote_title(title)}!{pos}"
