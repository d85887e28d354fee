"""
A client library for the Google Sheets v4 API.
The goal is to simplify authentication from a secrets file, fetching and
creating spreadsheets, and pushing batched updates: cell values, grid size,
row/column deletion and sheet properties.

Python dataclasses are used for the resource structs and most of the logic is
translating between those and the raw dicts the API client speaks.  Sheet
property updates only send the fields that actually changed, with a field
mask naming them.
"""
from .access import gws
from .errors import SheetsError
from .sheets import (Service, GoogleSpreadsheet, GoogleSheet, Cell, UpdateRequest,
                     FETCH_FIELDS, SecretFileName, Scope)
