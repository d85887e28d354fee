"""
Class implementations of sheets request resources.
As these are just logical groupings of data fields we use dataclasses
to implement.  Field names follow the JSON keys of the API so asdict() gives
most of what the request client needs and from_base() goes the other way.
The API omits zero values from responses (0, "", false) so every default
here is the zero value, otherwise a sheet with index 0 would decode wrong.
Only the resources this package actually exchanges are modelled.
"""
from dataclasses import dataclass, field, asdict
from typing import List

from ..resources import GoogleSheetsResourceBase

class GoogleSheetsEnum():
    """
    An 'enum' in the sheets client is just a string so this is
    just to translate and validate input.
    """
    _VALID_DIMENSION_OPTIONS = {
        "ROWS": "ROWS",
        "R": "ROWS",
        "C": "COLUMNS",
        "COLS": "COLUMNS",
        "COLUMNS": "COLUMNS"
    }
    _VALID_VALUE_INPUT_OPTIONS = {
        "RAW": "RAW",
        "USER": "USER_ENTERED",
        "USER_ENTERED": "USER_ENTERED"
    }

    @classmethod
    def dimension(cls, dim: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/Dimension"""
        return cls._VALID_DIMENSION_OPTIONS.get(str(dim).upper(), "")

    @classmethod
    def valueInputOption(cls, option: str) -> str:
        """https://developers.google.com/sheets/api/reference/rest/v4/ValueInputOption"""
        return cls._VALID_VALUE_INPUT_OPTIONS.get(str(option).upper(), "")

@dataclass
class Color(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#color
    An omitted alpha means a solid color.
    """
    red: int|float = field(default=0)
    green: int|float = field(default=0)
    blue: int|float = field(default=0)
    alpha: int|float = field(default=1)

@dataclass
class GridProperties(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#gridproperties"""
    rowCount: int = field(default=0)
    columnCount: int = field(default=0)
    frozenRowCount: int = field(default=0)
    frozenColumnCount: int = field(default=0)
    hideGridlines: bool = field(default=False)

    def __bool__(self) -> bool:
        return self.rowCount > 0 and self.columnCount > 0

@dataclass
class SheetProperties(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheetproperties"""
    sheetId: int = field(default=0)
    title: str = field(default="")
    index: int = field(default=0)
    sheetType: str = field(default="GRID")
    gridProperties: GridProperties|dict = field(default_factory=dict)
    hidden: bool = field(default=False)
    tabColor: Color|dict|None = field(default=None)
    rightToLeft: bool = field(default=False)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.gridProperties = (self.gridProperties if isinstance(self.gridProperties, GridProperties)
                               else GridProperties.from_base(self.gridProperties))
        if self.tabColor is not None and not isinstance(self.tabColor, Color):
            self.tabColor = Color.from_base(self.tabColor)

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['gridProperties'] = self.gridProperties.to_base()
        b['tabColor'] = self.tabColor.to_base() if self.tabColor is not None else None
        return b

    def __bool__(self) -> bool:
        return bool(self.title)

    def __str__(self) -> str:
        if not self:
            return "<invalid sheet>"
        val = f"{self.title}({self.sheetId}[{self.index}]):{self.sheetType}"
        if self.is_grid():
            val += f"({self.gridProperties.rowCount}Rx{self.gridProperties.columnCount}C)"
        return val

    def is_grid(self) -> bool:
        """
        A GRID sheet is the traditional range of cells and is normally
        what you want to work with.
        """
        return self.sheetType == 'GRID'

@dataclass
class CellData(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/cells#celldata"""
    formattedValue: str = field(default="")

@dataclass
class RowData(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#rowdata"""
    values: List[CellData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.values = [c if isinstance(c, CellData) else CellData.from_base(c) for c in self.values]

@dataclass
class GridData(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#griddata"""
    startRow: int = field(default=0)
    startColumn: int = field(default=0)
    rowData: List[RowData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.rowData = [r if isinstance(r, RowData) else RowData.from_base(r) for r in self.rowData]

@dataclass
class GridRange(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/other#gridrange
    Unset bounds mean unbounded, so a range with just the sheetId is the whole sheet.
    """
    sheetId: int = field(default=0)
    startRowIndex: int|None = field(default=None)
    endRowIndex: int|None = field(default=None)
    startColumnIndex: int|None = field(default=None)
    endColumnIndex: int|None = field(default=None)

@dataclass
class DimensionRange(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/DimensionRange"""
    sheetId: int = field(default=0)
    dimension: str = field(default="")
    startIndex: int|None = field(default=None)
    endIndex: int|None = field(default=None)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        if self.dimension:
            d = str(self.dimension)
            self.dimension = GoogleSheetsEnum.dimension(d)
            if not self.dimension:
                raise ValueError(f"Invalid dimension value: {d}")

    def __bool__(self) -> bool:
        return bool(self.dimension)

@dataclass
class ValueRange(GoogleSheetsResourceBase):
    """https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values#resource:-valuerange"""
    range: str = field(default="")
    majorDimension: str = field(default="ROWS")
    values: List[List[str]] = field(default_factory=list)

    def __post_init__(self):
        self.fixup()

    def fixup(self) -> None:
        if self.majorDimension:
            self.majorDimension = GoogleSheetsEnum.dimension(str(self.majorDimension))

    def __bool__(self) -> bool:
        return bool(self.range) and bool(self.majorDimension)

@dataclass
class Sheet(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/sheets#sheet
    Representation of a sheet within a spreadsheet
    """
    properties: SheetProperties|dict = field(default_factory=dict)
    data: List[GridData|dict] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = (self.properties if isinstance(self.properties, SheetProperties)
                           else SheetProperties.from_base(self.properties))
        self.data = [gd if isinstance(gd, GridData) else GridData.from_base(gd) for gd in self.data]

    def to_base(self) -> dict:
        self.fixup()
        return {'properties': self.properties.to_base(),
                'data': [d.to_base() for d in self.data]}

    def __bool__(self) -> bool:
        return bool(self.properties)

    def __str__(self) -> str:
        return str(self.properties)

@dataclass
class SpreadsheetProperties(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#SpreadsheetProperties
    """
    title: str = field(default="")
    locale: str = field(default="")
    timeZone: str = field(default="")

    def __bool__(self) -> bool:
        return bool(self.title)

@dataclass
class Spreadsheet(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets#resource:-spreadsheet
    """
    spreadsheetId: str = field(default="")
    properties: SpreadsheetProperties|dict = field(default_factory=dict)
    sheets: List[Sheet|dict] = field(default_factory=list)
    spreadsheetUrl: str = field(default="")

    def __post_init__(self) -> None:
        self.fixup()

    def fixup(self) -> None:
        self.properties = (self.properties if isinstance(self.properties, SpreadsheetProperties)
                           else SpreadsheetProperties.from_base(self.properties))
        self.sheets = [s if isinstance(s, Sheet) else Sheet.from_base(s) for s in self.sheets]

    def to_base(self) -> dict:
        self.fixup()
        b = asdict(self)
        b['properties'] = self.properties.to_base()
        b['sheets'] = [s.to_base() for s in self.sheets]
        return b

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

    def __str__(self) -> str:
        if not self.spreadsheetId:
            return 'unconnected'
        return f"{self.properties.title}[{','.join(str(s) for s in self.sheets)}]"
