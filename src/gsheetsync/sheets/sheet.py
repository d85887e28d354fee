from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Self

from .a1 import cell_pos, parse_cell_pos, a1_range
from .resources import Sheet, SheetProperties, ValueRange
from .requests import desired_properties

@dataclass
class Cell():
    """
    A single cell.  row and column are zero based, pos is the A1 position.
    """
    row: int
    column: int
    value: str = field(default="")

    @property
    def pos(self) -> str:
        return cell_pos(self.row, self.column)

    def __str__(self) -> str:
        return f"{self.pos}={self.value!r}"

class GoogleSheet():
    """
    Class representation of a sheet.  In Google Sheets parlance a 'sheet' is
    an invidual sheet within a parent 'spreadsheet', the different tabs on
    the spreadsheet itself.

    Edits are local until synchronize() is called.  Cells written through
    update() are remembered and the grid is grown as needed, both are flushed
    to the server in one go by Service.sync_sheet().
    """
    def __init__(self, spreadsheet, sheet: Sheet|dict) -> None:
        self._spreadsheet = spreadsheet
        self._sheet = sheet if isinstance(sheet, Sheet) else Sheet.from_base(sheet)
        self._props = self._sheet.properties
        self._rows = self._decode_rows()
        self._modified: dict[tuple[int, int], Cell] = {}
        self.reset_target()

    def _decode_rows(self) -> list[list[Cell]]:
        rows = []
        if self._sheet.data:
            grid = self._sheet.data[0]
            for r, row_data in enumerate(grid.rowData):
                rows.append([Cell(grid.startRow + r, grid.startColumn + c, cd.formattedValue)
                             for c, cd in enumerate(row_data.values)])
        return rows

    def __str__(self) -> str:
        return str(self._props)

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    def __len__(self) -> int:
        """
        In this context length is number of cells in the sheet
        """
        return self.rows * self.cols

    @property
    def spreadsheet(self):
        return self._spreadsheet

    @property
    def service(self):
        return self._spreadsheet.service

    @property
    def properties(self) -> SheetProperties:
        return self._props

    @property
    def title(self) -> str:
        return self._props.title

    @property
    def index(self) -> int:
        """
        Index within the spreadsheet, the ordering of the tabs.
        The index can shift by update, but the sheetId is always constant.
        """
        return self._props.index

    @property
    def sheet_id(self) -> int:
        return self._props.sheetId

    @property
    def rows(self) -> int:
        return self._props.gridProperties.rowCount

    @property
    def cols(self) -> int:
        return self._props.gridProperties.columnCount

    @property
    def dimensions(self) -> tuple[int, int]:
        return (self.rows, self.cols)

    @property
    def new_max_row(self) -> int:
        """Row count the grid has to grow to on the next sync."""
        return self._new_max_row

    @property
    def new_max_column(self) -> int:
        return self._new_max_column

    @property
    def cells(self) -> list[list[Cell]]:
        """Rows of cells as known locally, rows can be ragged."""
        return self._rows

    @property
    def modified_cells(self) -> list[Cell]:
        return list(self._modified.values())

    def reset_target(self) -> None:
        self._new_max_row = self.rows
        self._new_max_column = self.cols

    def cell(self, row: int, column: int) -> Cell:
        """
        The cell at (row, column), an empty one if nothing is known there.
        """
        if row < len(self._rows) and column < len(self._rows[row]):
            return self._rows[row][column]
        return Cell(row, column)

    def __getitem__(self, pos: str) -> Cell:
        """
        The cell at an A1 position, sheet["B3"] is cell(2, 1).
        """
        return self.cell(*parse_cell_pos(pos))

    def value_ranges(self, cells: Iterable[Cell]|None = None) -> list[ValueRange]:
        """The given cells, or the pending edits, as one single cell ValueRange each."""
        if cells is None:
            cells = self._modified.values()
        return [ValueRange(a1_range(self.title, c.pos), "COLUMNS", [[c.value]]) for c in cells]

    def update(self, row: int, column: int, value: str) -> Cell:
        """
        Set a cell value locally, growing the target grid size if the cell
        is past the current edge.
        """
        if row < 0 or column < 0:
            raise ValueError(f"Invalid cell coordinates: ({row}, {column})")
        self._new_max_row = max(self._new_max_row, row + 1)
        self._new_max_column = max(self._new_max_column, column + 1)
        cell = self._set_cell(row, column, value)
        self._modified[(row, column)] = cell
        return cell

    def _set_cell(self, row: int, column: int, value: str) -> Cell:
        while len(self._rows) <= row:
            self._rows.append([])
        cells = self._rows[row]
        while len(cells) <= column:
            cells.append(Cell(row, len(cells)))
        cell = cells[column]
        cell.value = str(value)
        return cell

    def synchronize(self) -> Self:
        self.service.sync_sheet(self)
        return self

    def sync_raw(self, rows: int, columns: int, cells: Iterable[Cell]) -> Self:
        self.service.sync_raw_sheet(self, rows, columns, cells)
        return self

    def expand(self, rows: int, columns: int) -> Self:
        self.service.expand_sheet(self, rows, columns)
        return self

    def delete_rows(self, start: int, end: int) -> Self:
        self.service.delete_rows(self, start, end)
        return self

    def delete_columns(self, start: int, end: int) -> Self:
        self.service.delete_columns(self, start, end)
        return self

    def clear(self) -> Self:
        self.service.clear_sheet(self)
        return self

    def update_properties(self, properties: SheetProperties|None = None, **kwargs) -> Self:
        """
        Push changed sheet properties, either a whole desired SheetProperties or
        individual fields, e.g. update_properties(title="new", frozenRowCount=1)
        """
        desired = properties if properties is not None else desired_properties(self._props, **kwargs)
        self.service.update_sheet_properties(self, desired)
        return self

    # local bookkeeping, only called once the server has accepted a change

    def _set_properties(self, properties: SheetProperties) -> None:
        self._props = properties
        self._sheet.properties = properties

    def _set_grid_size(self, rows: int, columns: int) -> None:
        self._props.gridProperties.rowCount = rows
        self._props.gridProperties.columnCount = columns
        self._new_max_row = rows
        self._new_max_column = columns

    def _synced(self) -> None:
        self._modified = {}
        self.reset_target()

    def _cleared(self) -> None:
        self._rows = []
        self._modified = {}
        self.reset_target()

    def _remove_rows(self, start: int, end: int) -> None:
        n = end - start
        self._props.gridProperties.rowCount = max(self.rows - n, 0)
        self._new_max_row = max(self._new_max_row - n, 0)
        del self._rows[start:end]
        for r, cells in enumerate(self._rows):
            for c in cells:
                c.row = r
        self._modified = {(c.row, c.column): c for (r, _), c in self._modified.items()
                          if not start <= r < end}

    def _remove_columns(self, start: int, end: int) -> None:
        n = end - start
        self._props.gridProperties.columnCount = max(self.cols - n, 0)
        self._new_max_column = max(self._new_max_column - n, 0)
        for cells in self._rows:
            del cells[start:end]
            for i, c in enumerate(cells):
                c.column = i
        self._modified = {(c.row, c.column): c for (_, col), c in self._modified.items()
                          if not start <= col < end}
