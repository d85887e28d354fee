from collections.abc import Iterable
from dataclasses import replace
import copy
from pathlib import Path
from typing import Self
import logging

import google.auth.exceptions
from googleapiclient.discovery import Resource

from ..access import gws
from ..errors import SheetsError
from . import ops, GoogleSheetsMaxCells
from .ops import Scope, FETCH_FIELDS
from .resources import Spreadsheet, Sheet, SheetProperties, GridProperties
from .requests import (GoogleSheetsUpdateRequest, GoogleSheetsUpdateRequestResponse,
                       BatchUpdateValuesRequest, UpdateValuesRequestResponse)
from .update import UpdateRequest
from .spreadsheet import GoogleSpreadsheet
from .sheet import GoogleSheet, Cell

logger = logging.getLogger(__name__)

# SecretFileName is the default service account key file.
SecretFileName = "client_secret.json"

class Service():
    """
    Entry point for working with spreadsheets.  Holds the API client resource
    and does every server round trip for the spreadsheet and sheet objects it hands out.
    Local state on a sheet only changes after the server has accepted a request,
    a failed call leaves the sheet as it was.
    """
    def __init__(self, resource: Resource|None = None) -> None:
        """
        With no resource one is built from the access singleton on first use.
        """
        self._resource = resource

    @classmethod
    def from_secret_file(cls, secret_file: Path|str = SecretFileName) -> Self:
        """
        A service authenticated with the service account key (or OAuth client
        secrets) in secret_file.  The file must exist and be one of those, there
        is no quiet fallback to the application default credentials here.
        """
        path = Path(secret_file)
        if not (path.exists() and path.is_file()):
            raise SheetsError(f"secret file {secret_file} not found")
        if not gws.secrets_type(path):
            raise SheetsError(f"secret file {secret_file} is not a service account key or OAuth client file")
        try:
            gws.client_secrets = path
            gws.append_scopes(Scope)
            resource = gws.get_service("sheets", "v4")
        except (google.auth.exceptions.GoogleAuthError, ValueError) as e:
            raise SheetsError(f"unable to authenticate with {secret_file}: {e}") from e
        if resource is None:
            raise SheetsError(f"unable to authenticate with {secret_file}")
        return cls(resource)

    @property
    def resource(self) -> Resource|None:
        return self._resource

    def create_spreadsheet(self, spreadsheet: Spreadsheet|dict|str) -> GoogleSpreadsheet:
        """
        Create a spreadsheet from just its title then fetch it, the create
        response doesn't carry everything the sheet model needs.
        """
        if isinstance(spreadsheet, str):
            title = spreadsheet
        else:
            ss = spreadsheet if isinstance(spreadsheet, Spreadsheet) else Spreadsheet.from_base(spreadsheet)
            title = ss.properties.title
        created = ops.create(title, service=self._resource)
        logger.info("created spreadsheet %s %r", created.spreadsheetId, title)
        return self.fetch_spreadsheet(created.spreadsheetId)

    def fetch_spreadsheet(self, spreadsheet_id: str) -> GoogleSpreadsheet:
        spreadsheet = ops.get(spreadsheet_id, FETCH_FIELDS, service=self._resource)
        return GoogleSpreadsheet(self, spreadsheet)

    def batch_update(self, spreadsheet_id: str,
                     request: GoogleSheetsUpdateRequest|dict) -> GoogleSheetsUpdateRequestResponse:
        return ops.batchUpdate(spreadsheet_id, request, service=self._resource)

    def update_values(self, spreadsheet_id: str,
                      request: BatchUpdateValuesRequest|dict) -> UpdateValuesRequestResponse:
        return ops.updateValues(spreadsheet_id, request, service=self._resource)

    def update_sheet_properties(self, sheet: GoogleSheet, properties: SheetProperties) -> None:
        """
        Push whatever differs between properties and the sheet's current ones.
        Nothing to push is not an error.
        """
        r = UpdateRequest(sheet.spreadsheet).update_sheet_properties(sheet, properties)
        if not len(r):
            return
        r.do_service(self)
        # the sheet keeps its own copy, later grid changes must not reach the caller
        sheet._set_properties(replace(copy.deepcopy(properties), sheetId=sheet.sheet_id))
        sheet.reset_target()

    def expand_sheet(self, sheet: GoogleSheet, rows: int, columns: int) -> None:
        """
        Set the grid to rows x columns.  The size is always sent, even if
        the sheet already thinks it is that size.
        """
        if rows < 0 or columns < 0:
            raise ValueError(f"expand_sheet() invalid size {rows}x{columns}")
        if rows * columns > GoogleSheetsMaxCells:
            raise ValueError(f"expand_sheet() {rows}x{columns} is over the {GoogleSheetsMaxCells} cell limit")
        grid = replace(sheet.properties.gridProperties, rowCount=rows, columnCount=columns)
        props = replace(sheet.properties, gridProperties=grid)
        logger.debug("expand %s to %dx%d", sheet.title, rows, columns)
        UpdateRequest(sheet.spreadsheet).update_sheet_properties(sheet, props, check=False).do_service(self)
        sheet._set_grid_size(rows, columns)

    def sync_sheet(self, sheet: GoogleSheet) -> None:
        """
        Grow the grid if edits went past it, then write all modified cells.
        """
        rows = max(sheet.new_max_row, sheet.rows)
        columns = max(sheet.new_max_column, sheet.cols)
        if rows > sheet.rows or columns > sheet.cols:
            self.expand_sheet(sheet, rows, columns)
        data = sheet.value_ranges()
        if data:
            self.update_values(sheet.spreadsheet.id, BatchUpdateValuesRequest(data, "USER_ENTERED"))
        sheet._synced()

    def sync_raw_sheet(self, sheet: GoogleSheet, rows: int, columns: int, cells: Iterable[Cell]) -> None:
        """
        Size the grid to exactly rows x columns and write the given cells,
        bypassing the sheet's own edits.  Those are dropped afterwards as
        the grid they were tracked against has been replaced.
        """
        cells = list(cells)
        for c in cells:
            if not (0 <= c.row < rows and 0 <= c.column < columns):
                raise ValueError(f"sync_raw_sheet() cell {c.row},{c.column} outside {rows}x{columns}")
        self.expand_sheet(sheet, rows, columns)
        data = sheet.value_ranges(cells)
        if data:
            self.update_values(sheet.spreadsheet.id, BatchUpdateValuesRequest(data, "USER_ENTERED"))
        for c in cells:
            sheet._set_cell(c.row, c.column, c.value)
        sheet._synced()

    def delete_rows(self, sheet: GoogleSheet, start: int, end: int) -> None:
        """
        Delete rows [start, end), zero based.
        """
        UpdateRequest(sheet.spreadsheet).delete_dimension(sheet, "ROWS", start, end).do_service(self)
        sheet._remove_rows(start, end)

    def delete_columns(self, sheet: GoogleSheet, start: int, end: int) -> None:
        """
        Delete columns [start, end), zero based.
        """
        UpdateRequest(sheet.spreadsheet).delete_dimension(sheet, "COLUMNS", start, end).do_service(self)
        sheet._remove_columns(start, end)

    def add_sheet(self, spreadsheet: GoogleSpreadsheet, title: str,
                  rows: int|None = None, columns: int|None = None) -> GoogleSheet:
        """
        Add a new sheet (tab) to the spreadsheet.  The server picks the id and
        puts it last unless told otherwise.
        """
        props = SheetProperties(title=title, gridProperties=GridProperties(rowCount=rows or 0,
                                                                             columnCount=columns or 0))
        response = UpdateRequest(spreadsheet).add_sheet(props).do_service(self)
        reply = response.replies[0].get("addSheet", {}) if response.replies else {}
        if not reply.get("properties"):
            raise SheetsError(f"addSheet reply missing properties for {title!r}")
        logger.info("added sheet %r to %s", title, spreadsheet.id)
        return spreadsheet._append_sheet(Sheet.from_base(reply))

    def clear_sheet(self, sheet: GoogleSheet) -> None:
        """
        Clear every cell of the sheet, values and formatting.  Pending local edits go too.
        """
        UpdateRequest(sheet.spreadsheet).clear_sheet(sheet).do_service(self)
        sheet._cleared()
