"""
Classes to facilitate working with Google Sheets
"""

# can address up to 'ZZZ'
GoogleSheetsMaxColumns = 18278
# current cell limit in a single GSheet
# this can be any R and C dimensions as long as RxC <= 10000000
GoogleSheetsMaxCells = 10000000

from .service import Service, FETCH_FIELDS, SecretFileName, Scope
from .spreadsheet import GoogleSpreadsheet
from .sheet import GoogleSheet, Cell
from .update import UpdateRequest
