from dataclasses import dataclass, field, replace
from typing import List
import operator
import re

from ..resources import GoogleSheetsResourceBase
from .resources import *

# Every request kind spreadsheets.batchUpdate accepts.
# https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#request
# A request is a dataclass named <Kind>Request, e.g. DeleteDimensionRequest -> deleteDimension,
# adding one is just adding the dataclass.
REQUEST_KINDS = frozenset([
    "updateSpreadsheetProperties", "updateSheetProperties", "updateDimensionProperties",
    "updateNamedRange", "repeatCell", "addNamedRange", "deleteNamedRange", "addSheet",
    "deleteSheet", "autoFill", "cutPaste", "copyPaste", "mergeCells", "unmergeCells",
    "updateBorders", "updateCells", "addFilterView", "appendCells", "clearBasicFilter",
    "deleteDimension", "deleteEmbeddedObject", "deleteFilterView", "duplicateFilterView",
    "duplicateSheet", "findReplace", "insertDimension", "insertRange", "moveDimension",
    "updateEmbeddedObjectPosition", "pasteData", "textToColumns", "updateFilterView",
    "deleteRange", "appendDimension", "addConditionalFormatRule",
    "updateConditionalFormatRule", "deleteConditionalFormatRule", "sortRange",
    "setDataValidation", "setBasicFilter", "addProtectedRange", "updateProtectedRange",
    "deleteProtectedRange", "autoResizeDimensions", "addChart", "updateChartSpec",
    "updateBanding", "addBanding", "deleteBanding", "createDeveloperMetadata",
    "updateDeveloperMetadata", "deleteDeveloperMetadata", "randomizeRange",
    "addDimensionGroup", "deleteDimensionGroup", "updateDimensionGroup", "trimWhitespace",
    "deleteDuplicates", "updateEmbeddedObjectBorder", "addSlicer", "updateSlicerSpec",
    "addDataSource", "updateDataSource", "deleteDataSource", "refreshDataSource",
    "cancelDataSourceRefresh", "addTable", "updateTable", "deleteTable",
])

class GoogleSheetsUpdateRequestBase(GoogleSheetsResourceBase):
    """
    Base class for sheet batchUpdate requests to get the actual
    request dict into the right format, {<kind>: <body>}.
    """
    @classmethod
    def kind(cls) -> str:
        # strip off the trailing 'Request' class name and
        # set the first letter to lower case
        m = re.match("^([a-zA-Z])([a-zA-Z]+)Request$", cls.__name__)
        if not m:
            raise RuntimeError("Invalid Google Sheets request format for class name")
        key = m.group(1).lower() + m.group(2)
        if key not in REQUEST_KINDS:
            raise RuntimeError(f"Unknown Google Sheets request kind: {key}")
        return key

    def to_request(self) -> dict[str, dict]:
        return {self.kind(): self.to_base()}

# Field mask paths compared when diffing sheet properties, in request order.
SHEET_PROPERTY_FIELDS = (
    "title",
    "index",
    "gridProperties.rowCount",
    "gridProperties.columnCount",
    "gridProperties.frozenRowCount",
    "gridProperties.frozenColumnCount",
    "gridProperties.hideGridlines",
    "hidden",
    "tabColor",
    "rightToLeft",
)
GRID_SIZE_FIELDS = ("gridProperties.rowCount", "gridProperties.columnCount")

def sheet_properties_mask(current: SheetProperties, desired: SheetProperties,
                          check: bool = True) -> List[str]:
    """
    The field mask paths where desired differs from current.
    With check False the grid size is always part of the mask, changed or not.
    """
    mask = []
    for path in SHEET_PROPERTY_FIELDS:
        getter = operator.attrgetter(path)
        if (not check and path in GRID_SIZE_FIELDS) or getter(desired) != getter(current):
            mask.append(path)
    return mask

@dataclass
class UpdateSheetPropertiesRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
    Only the fields named in the mask are sent, along with the sheetId to address the sheet.
    """
    properties: SheetProperties
    fields: str

    def to_base(self) -> dict:
        paths = [p for p in self.fields.split(",") if p]
        return {'properties': self.properties.masked(paths, keep=('sheetId',)),
                'fields': self.fields}

@dataclass
class AppendDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#appenddimensionrequest
    """
    sheetId: int
    dimension: str
    length: int

    def __post_init__(self) -> None:
        d = self.dimension
        self.dimension = GoogleSheetsEnum.dimension(d)
        if not self.dimension:
            raise ValueError(f"Invalid dimension value: {d}")

@dataclass
class DeleteDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletedimensionrequest
    The 'range' indirection makes this a bit complicated, we want the DimensionRange
    initializer but park it in the range object.
    """
    range: DimensionRange = field(init=False)

    def __init__(self, sheetId: int, dimension: str,
                 startIndex: int|None = None,
                 endIndex: int|None = None) -> None:
        self.range = DimensionRange(sheetId, dimension, startIndex, endIndex)

    def to_base(self) -> dict:
        return {'range': self.range.trim()}

@dataclass
class InsertDimensionRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#insertdimensionrequest
    """
    range: DimensionRange = field(init=False)
    inheritFromBefore: bool = field(default=False)

    def __init__(self, sheetId: int, dimension: str,
                 startIndex: int, endIndex: int,
                 inheritFromBefore: bool = False) -> None:
        self.range = DimensionRange(sheetId, dimension, startIndex, endIndex)
        self.inheritFromBefore = inheritFromBefore

    def to_base(self) -> dict:
        return {'range': self.range.trim(), 'inheritFromBefore': self.inheritFromBefore}

@dataclass
class AddSheetRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#addsheetrequest
    The server assigns the sheetId and index unless given, so those only go out when set.
    """
    properties: SheetProperties

    def to_base(self) -> dict:
        props = self.properties
        paths = ["title"]
        if props.sheetId:
            paths.append("sheetId")
        if props.index:
            paths.append("index")
        if props.gridProperties.rowCount:
            paths.append("gridProperties.rowCount")
        if props.gridProperties.columnCount:
            paths.append("gridProperties.columnCount")
        return {'properties': props.masked(paths)}

@dataclass
class UpdateCellsRequest(GoogleSheetsUpdateRequestBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatecellsrequest
    With no rows and a '*' mask this clears everything in the range.
    """
    range: GridRange
    fields: str = field(default="*")
    rows: List[RowData] = field(default_factory=list)

    def to_base(self) -> dict:
        b = {'range': self.range.trim(), 'fields': self.fields}
        if self.rows:
            b['rows'] = [r.to_base() for r in self.rows]
        return b

@dataclass
class GoogleSheetsUpdateRequest(GoogleSheetsResourceBase):
    """
    Generate a GSheet Batch Update request body.
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#request-body
    """
    requests: List[GoogleSheetsUpdateRequestBase|dict]
    includeSpreadsheetInResponse: bool = field(default=False)

    def to_base(self) -> dict:
        b = {'requests': [r.to_request() if isinstance(r, GoogleSheetsUpdateRequestBase) else dict(r)
                          for r in self.requests]}
        if self.includeSpreadsheetInResponse:
            b['includeSpreadsheetInResponse'] = True
        return b

@dataclass
class GoogleSheetsUpdateRequestResponse(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    replies: List[dict] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

@dataclass
class BatchUpdateValuesRequest(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchUpdate#request-body
    """
    data: List[ValueRange]
    valueInputOption: str = field(default="USER_ENTERED")

    def __post_init__(self) -> None:
        v = self.valueInputOption
        self.valueInputOption = GoogleSheetsEnum.valueInputOption(v)
        if not self.valueInputOption:
            raise ValueError(f"Invalid valueInputOption value: {v}")

    def to_base(self) -> dict:
        return {'valueInputOption': self.valueInputOption,
                'data': [d.to_base() for d in self.data]}

@dataclass
class UpdateValuesRequestResponse(GoogleSheetsResourceBase):
    """
    https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchUpdate#response-body
    """
    spreadsheetId: str = field(default="")
    totalUpdatedRows: int = field(default=0)
    totalUpdatedColumns: int = field(default=0)
    totalUpdatedCells: int = field(default=0)
    totalUpdatedSheets: int = field(default=0)
    responses: List[dict] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.spreadsheetId)

def desired_properties(sheet_properties: SheetProperties, **kwargs) -> SheetProperties:
    """
    Copy of sheet_properties with top level fields replaced, plus grid fields
    (rowCount, columnCount, frozenRowCount, ...) routed into gridProperties.
    Names that are neither raise ValueError rather than being dropped.
    """
    grid_names = set(GridProperties.__dataclass_fields__)
    unknown = sorted(k for k in kwargs
                     if k not in grid_names and k not in SheetProperties.__dataclass_fields__)
    if unknown:
        raise ValueError(f"Unknown sheet properties: {', '.join(unknown)}")
    grid = {k: kwargs.pop(k) for k in list(kwargs) if k in grid_names}
    props = replace(sheet_properties, gridProperties=replace(sheet_properties.gridProperties))
    props.update_fields(**kwargs)
    props.gridProperties.update_fields(**grid)
    return props
