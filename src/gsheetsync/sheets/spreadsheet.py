from .resources import Spreadsheet, Sheet
from .sheet import GoogleSheet
from .update import UpdateRequest

class GoogleSpreadsheet():
    """
    A fetched spreadsheet and its sheets, tied to the Service it came from
    so the sheets can push their own changes.
    """
    def __init__(self, service, spreadsheet: Spreadsheet|dict) -> None:
        self._service = service
        self._spreadsheet = spreadsheet if isinstance(spreadsheet, Spreadsheet) else Spreadsheet.from_base(spreadsheet)
        self._sheets = [GoogleSheet(self, s) for s in self._spreadsheet.sheets]

    def __bool__(self) -> bool:
        return bool(self._spreadsheet)

    def __str__(self) -> str:
        return str(self._spreadsheet)

    def __repr__(self) -> str:
        return f"{self.__class__}:{str(self)}"

    def __len__(self) -> int:
        """
        In this context length is the number of sheets in this spreadsheet.
        """
        return len(self._sheets)

    def __contains__(self, val: str|int) -> bool:
        """
        Is the sheet in this spreadsheet?
        val can be either a string (title) or int (ID)
        """
        if isinstance(val, int):
            return any(s.sheet_id == val for s in self._sheets)
        return any(s.title == val for s in self._sheets)

    def __getitem__(self, item: str|int) -> GoogleSheet:
        """
        Get the sheet.  In this context if item is a
        string that is by title and if it is an int is is by index,
        index in this case meaning sheet index, not list index
        """
        s = self.sheet_by_index(item) if isinstance(item, int) else self.sheet_by_title(item)
        if s is None:
            raise KeyError(f"{item} not in sheets[]")
        return s

    @property
    def id(self) -> str:
        return self._spreadsheet.spreadsheetId

    @property
    def title(self) -> str:
        return self._spreadsheet.properties.title

    @property
    def service(self):
        return self._service

    @property
    def spreadsheet(self) -> Spreadsheet:
        return self._spreadsheet

    @property
    def sheets(self) -> list[GoogleSheet]:
        return list(self._sheets)

    def sheet_by_id(self, sheet_id: int) -> GoogleSheet|None:
        return next((s for s in self._sheets if s.sheet_id == sheet_id), None)

    def sheet_by_title(self, title: str) -> GoogleSheet|None:
        return next((s for s in self._sheets if s.title == title), None)

    def sheet_by_index(self, index: int) -> GoogleSheet|None:
        return next((s for s in self._sheets if s.index == index), None)

    def update_request(self) -> UpdateRequest:
        """
        Start a batchUpdate chain against this spreadsheet.
        """
        return UpdateRequest(self)

    def add_sheet(self, title: str, rows: int|None = None, columns: int|None = None) -> GoogleSheet:
        return self._service.add_sheet(self, title, rows, columns)

    def refresh(self) -> "GoogleSpreadsheet":
        """
        Re-read everything from the server, dropping any unsynced edits.
        """
        fresh = self._service.fetch_spreadsheet(self.id)
        self._spreadsheet = fresh.spreadsheet
        self._sheets = [GoogleSheet(self, s) for s in self._spreadsheet.sheets]
        return self

    def _append_sheet(self, sheet: Sheet) -> GoogleSheet:
        self._spreadsheet.sheets.append(sheet)
        s = GoogleSheet(self, sheet)
        self._sheets.append(s)
        return s
