"""
Thin wrappers over the spreadsheets resource of the API client.
Each takes an optional service keyword, the Resource built by
googleapiclient.discovery.build("sheets", "v4"), and if not supplied the
service decorator fills it in from the authenticated access singleton.
All failures come out as SheetsError.
"""
import logging

import httplib2
from googleapiclient.discovery import Resource
from googleapiclient.errors import HttpError

from ..access import service
from ..errors import SheetsError, decode, from_http_error
from .resources import Spreadsheet
from .requests import (GoogleSheetsUpdateRequest, GoogleSheetsUpdateRequestResponse,
                       BatchUpdateValuesRequest, UpdateValuesRequestResponse)

logger = logging.getLogger(__name__)

# Scope is the API scope for viewing and managing your Google Spreadsheet data.
Scope = "https://spreadsheets.google.com/feeds"

# just the pieces the sheet model needs, keeps the response small
FETCH_FIELDS = "spreadsheetId,properties.title,sheets(properties,data.rowData.values(formattedValue))"

def execute(request) -> dict:
    """
    Run an API client request and decode what comes back.
    """
    if request is None:
        raise SheetsError("no request to execute")
    try:
        response = request.execute()
    except HttpError as e:
        raise from_http_error(e) from e
    except (httplib2.HttpLib2Error, OSError) as e:
        raise SheetsError(f"transport error: {e}") from e
    except ValueError as e:
        raise SheetsError(f"unable to decode response: {e}") from e
    return decode(response)

def _require(service: Resource|None) -> Resource:
    if service is None:
        raise SheetsError("unable to authenticate with the Sheets API")
    return service

@service("sheets", "v4", Scope)
def get(spreadsheetid: str, fields: str = FETCH_FIELDS,
        service: Resource|None = None) -> Spreadsheet:
    """
    Wrapper for calling the get() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/get
    """
    if not spreadsheetid:
        raise ValueError("spreadsheet id must not be empty")
    logger.debug("get spreadsheet %s", spreadsheetid)
    request = _require(service).spreadsheets().get(spreadsheetId=spreadsheetid, fields=fields)
    return Spreadsheet.from_base(execute(request))

@service("sheets", "v4", Scope)
def create(title: str, service: Resource|None = None) -> Spreadsheet:
    """
    Wrapper for calling the create() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/create
    This is for creating a whole new spreadsheet, not a sheet within one.
    Only the title goes up, the server fills in everything else.
    """
    body = {"properties": {"title": str(title)}}
    logger.debug("create spreadsheet %r", title)
    request = _require(service).spreadsheets().create(body=body)
    return Spreadsheet.from_base(execute(request))

@service("sheets", "v4", Scope)
def batchUpdate(spreadsheetid: str, request: GoogleSheetsUpdateRequest|dict,
                service: Resource|None = None) -> GoogleSheetsUpdateRequestResponse:
    """
    Wrapper for calling the batchUpdate() spreadsheet method.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/batchUpdate
    This is for altering spreadsheet and sheet structure, not cell values
    which go through the values() resource.
    """
    body = request.to_base() if isinstance(request, GoogleSheetsUpdateRequest) else dict(request)
    r = _require(service).spreadsheets().batchUpdate(spreadsheetId=spreadsheetid, body=body)
    return GoogleSheetsUpdateRequestResponse.from_base(execute(r))

@service("sheets", "v4", Scope)
def updateValues(spreadsheetid: str, request: BatchUpdateValuesRequest|dict,
                 service: Resource|None = None) -> UpdateValuesRequestResponse:
    """
    Wrapper for calling the batchUpdate() method on the values resource.
    See https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets.values/batchUpdate
    """
    body = request.to_base() if isinstance(request, BatchUpdateValuesRequest) else dict(request)
    logger.debug("values batchUpdate %s: %d ranges", spreadsheetid, len(body.get("data", [])))
    values = _require(service).spreadsheets().values()
    r = values.batchUpdate(spreadsheetId=spreadsheetid, body=body)
    return UpdateValuesRequestResponse.from_base(execute(r))
