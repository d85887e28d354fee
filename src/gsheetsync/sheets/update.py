from dataclasses import replace
from typing import Self
import logging

from ..errors import SheetsError
from .resources import GoogleSheetsEnum, GridRange, SheetProperties
from .requests import *

logger = logging.getLogger(__name__)

class UpdateRequest():
    """
    Utility class for building up a chain of update requests.
    The spreadsheet batchUpdate method can take a list of requests at once
    and it is more efficient to provide a number of them at once rather than
    request/response/request/response/etc.  So this provides a means to add
    a chain of requests and then terminate with do().
    The idea is you would:
    response = UpdateRequest(spreadsheet).request1(params).request2(params).do()
    Nothing is sent, and nothing local changes, until do() is called.
    """
    def __init__(self, spreadsheet) -> None:
        if spreadsheet is None:
            raise ValueError("spreadsheet must not be None")
        self._spreadsheet = spreadsheet
        self._requests: list[GoogleSheetsUpdateRequestBase] = []

    def __len__(self) -> int:
        return len(self._requests)

    @property
    def requests(self) -> list[GoogleSheetsUpdateRequestBase]:
        return list(self._requests)

    def body(self) -> GoogleSheetsUpdateRequest:
        return GoogleSheetsUpdateRequest(list(self._requests))

    def do(self) -> GoogleSheetsUpdateRequestResponse:
        """
        Send through the service the spreadsheet was fetched with.
        """
        return self.do_service(self._spreadsheet.service)

    def do_service(self, service) -> GoogleSheetsUpdateRequestResponse:
        """
        Terminate a request chain and send the actual batchUpdate.
        """
        if not self._requests:
            raise SheetsError("Requests must not be empty")
        logger.debug("batchUpdate %s: %s", self._spreadsheet.id,
                     ",".join(r.kind() for r in self._requests))
        return service.batch_update(self._spreadsheet.id, self.body())

    def update_sheet_properties(self, sheet, properties: SheetProperties, check: bool = True) -> Self:
        """
        Only the properties that differ from what the sheet currently has are sent,
        if nothing differs there is no request at all.  With check False the
        row and column counts go out regardless, for growing the grid.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatesheetpropertiesrequest
        """
        mask = sheet_properties_mask(sheet.properties, properties, check)
        if mask:
            props = replace(properties, sheetId=sheet.sheet_id)
            self._requests.append(UpdateSheetPropertiesRequest(props, ",".join(mask)))
        return self

    def delete_dimension(self, sheet, dimension: str, start: int, end: int) -> Self:
        """
        Remove rows or columns in [start, end).
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#deletedimensionrequest
        """
        dim = GoogleSheetsEnum.dimension(dimension)
        if not dim:
            raise ValueError("delete_dimension() dimension parameter must be 'ROWS' or 'COLUMNS' not: " + str(dimension))
        if start < 0 or end <= start:
            raise ValueError(f"delete_dimension() invalid range [{start}, {end})")
        self._requests.append(DeleteDimensionRequest(sheet.sheet_id, dim, start, end))
        return self

    def append_dimension(self, sheet, dimension: str, length: int) -> Self:
        """
        Append rows or columns to the end.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#appenddimensionrequest
        """
        if length < 0:
            raise ValueError("append_dimension(): length parameter must be >= 0")
        if length > 0:
            self._requests.append(AppendDimensionRequest(sheet.sheet_id, dimension, length))
        return self

    def insert_dimension(self, sheet, dimension: str, start: int, end: int,
                         inherit_from_before: bool = False) -> Self:
        """
        Insert rows or columns so the new ones span [start, end).
        inherit_from_before takes formatting from the row/column before start
        rather than the one after.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#insertdimensionrequest
        """
        if start < 0 or end <= start:
            raise ValueError(f"insert_dimension() invalid range [{start}, {end})")
        if inherit_from_before and start == 0:
            raise ValueError("insert_dimension() cannot inherit from before the first row/column")
        self._requests.append(InsertDimensionRequest(sheet.sheet_id, dimension, start, end,
                                                     inherit_from_before))
        return self

    def add_sheet(self, properties: SheetProperties) -> Self:
        """
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#addsheetrequest
        """
        if not properties.title:
            raise ValueError("add_sheet() requires a title")
        self._requests.append(AddSheetRequest(properties))
        return self

    def clear_sheet(self, sheet) -> Self:
        """
        Clear values and formatting of every cell in the sheet.
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request#updatecellsrequest
        """
        self._requests.append(UpdateCellsRequest(GridRange(sheet.sheet_id), "*"))
        return self
