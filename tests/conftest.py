import pytest

from gsheetsync.sheets import Service

class FakeRequest():
    def __init__(self, response):
        self._response = response

    def execute(self):
        if isinstance(self._response, Exception):
            raise self._response
        return self._response

class FakeValues():
    def __init__(self, parent):
        self._parent = parent

    def batchUpdate(self, **kwargs):
        return self._parent.record("values.batchUpdate", kwargs)

class FakeSpreadsheets():
    def __init__(self, parent):
        self._parent = parent

    def get(self, **kwargs):
        return self._parent.record("get", kwargs)

    def create(self, **kwargs):
        return self._parent.record("create", kwargs)

    def batchUpdate(self, **kwargs):
        return self._parent.record("batchUpdate", kwargs)

    def values(self):
        return FakeValues(self._parent)

class FakeSheetsResource():
    """
    Stands in for the googleapiclient sheets v4 Resource.  Responses are
    queued per method, calls are recorded as (method, kwargs).
    """
    def __init__(self):
        self.calls = []
        self.responses = {}

    def queue(self, method, response):
        self.responses.setdefault(method, []).append(response)
        return self

    def spreadsheets(self):
        return FakeSpreadsheets(self)

    def record(self, method, kwargs):
        self.calls.append((method, kwargs))
        queued = self.responses.get(method, [])
        return FakeRequest(queued.pop(0) if queued else {})

    def bodies(self, method):
        return [kw.get("body") for m, kw in self.calls if m == method]

SPREADSHEET = {
    "spreadsheetId": "ss1",
    "properties": {"title": "Budget"},
    "sheets": [
        {
            "properties": {
                "sheetId": 0,
                "title": "Sheet1",
                "index": 0,
                "sheetType": "GRID",
                "gridProperties": {"rowCount": 3, "columnCount": 2}
            },
            "data": [{
                "rowData": [
                    {"values": [{"formattedValue": "a"}, {"formattedValue": "b"}]},
                    {"values": [{"formattedValue": "c"}]},
                    {}
                ]
            }]
        },
        {
            "properties": {
                "sheetId": 77,
                "title": "Other Tab",
                "index": 1,
                "sheetType": "GRID",
                "gridProperties": {"rowCount": 1000, "columnCount": 26, "frozenRowCount": 1}
            }
        }
    ]
}

@pytest.fixture
def spreadsheet_json():
    return SPREADSHEET

@pytest.fixture
def resource():
    return FakeSheetsResource()

@pytest.fixture
def service(resource):
    return Service(resource)

@pytest.fixture
def spreadsheet(resource, service):
    resource.queue("get", SPREADSHEET)
    ss = service.fetch_spreadsheet("ss1")
    resource.calls.clear()
    return ss
