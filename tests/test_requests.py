from dataclasses import replace

import pytest

from gsheetsync.sheets.resources import SheetProperties, GridProperties, Color, GridRange
from gsheetsync.sheets.requests import (sheet_properties_mask, desired_properties,
                                        UpdateSheetPropertiesRequest, DeleteDimensionRequest,
                                        AppendDimensionRequest, InsertDimensionRequest,
                                        AddSheetRequest, UpdateCellsRequest,
                                        GoogleSheetsUpdateRequest, GoogleSheetsUpdateRequestBase,
                                        BatchUpdateValuesRequest, SHEET_PROPERTY_FIELDS)

def current():
    return SheetProperties(sheetId=5, title="Data", index=2,
                           gridProperties=GridProperties(rowCount=100, columnCount=10, frozenRowCount=1),
                           tabColor=Color(red=1))

def test_mask_only_changed():
    cur = current()
    want = desired_properties(cur, title="Renamed", frozenColumnCount=2, rightToLeft=True)
    assert(sheet_properties_mask(cur, want) == ["title", "gridProperties.frozenColumnCount", "rightToLeft"])
    # the source properties are left alone
    assert(cur.title == "Data")
    assert(cur.gridProperties.frozenColumnCount == 0)

def test_desired_properties_unknown_name():
    cur = current()
    with pytest.raises(ValueError) as e:
        desired_properties(cur, titel="Renamed", frozenRows=1)
    assert("frozenRows" in str(e.value))
    assert("titel" in str(e.value))
    assert(cur.title == "Data")

def test_masked_keep():
    cur = current()
    assert(cur.masked(["title"]) == {"title": "Data"})
    assert(cur.masked(["title"], keep=("sheetId",)) == {"sheetId": 5, "title": "Data"})

def test_mask_every_field():
    cur = current()
    want = SheetProperties(sheetId=5, title="x", index=0,
                           gridProperties=GridProperties(rowCount=1, columnCount=1, frozenRowCount=0,
                                                         frozenColumnCount=3, hideGridlines=True),
                           hidden=True, tabColor=Color(blue=1), rightToLeft=True)
    assert(sheet_properties_mask(cur, want) == list(SHEET_PROPERTY_FIELDS))

def test_mask_no_change():
    cur = current()
    assert(sheet_properties_mask(cur, replace(cur)) == [])

def test_mask_unchecked_grid_size():
    cur = current()
    assert(sheet_properties_mask(cur, replace(cur), check=False) ==
           ["gridProperties.rowCount", "gridProperties.columnCount"])
    want = desired_properties(cur, hidden=True)
    assert(sheet_properties_mask(cur, want, check=False) ==
           ["gridProperties.rowCount", "gridProperties.columnCount", "hidden"])

def test_tab_color_diff():
    cur = current()
    assert(sheet_properties_mask(cur, desired_properties(cur, tabColor={"red": 1})) == [])
    assert(sheet_properties_mask(cur, desired_properties(cur, tabColor={"green": 0.5})) == ["tabColor"])

def test_update_sheet_properties_payload():
    props = desired_properties(current(), title="New", rowCount=200)
    r = UpdateSheetPropertiesRequest(props, "title,gridProperties.rowCount").to_request()
    assert(r == {"updateSheetProperties": {
        "properties": {"sheetId": 5, "title": "New", "gridProperties": {"rowCount": 200}},
        "fields": "title,gridProperties.rowCount"}})

def test_update_sheet_properties_sends_desired_values():
    props = desired_properties(current(), rightToLeft=True, tabColor={"blue": 1})
    b = UpdateSheetPropertiesRequest(props, "tabColor,rightToLeft").to_base()
    assert(b["properties"]["rightToLeft"] is True)
    assert(b["properties"]["tabColor"] == {"red": 0, "green": 0, "blue": 1, "alpha": 1})

def test_delete_dimension():
    r = DeleteDimensionRequest(0, "R", 2, 5).to_request()
    assert(r == {"deleteDimension": {"range": {"sheetId": 0, "dimension": "ROWS",
                                               "startIndex": 2, "endIndex": 5}}})
    r = DeleteDimensionRequest(3, "COLS", 1).to_request()
    assert(r == {"deleteDimension": {"range": {"sheetId": 3, "dimension": "COLUMNS", "startIndex": 1}}})
    with pytest.raises(ValueError):
        DeleteDimensionRequest(0, "DIAGONAL", 0, 1)

def test_other_variants():
    assert(AppendDimensionRequest(1, "ROWS", 10).to_request() ==
           {"appendDimension": {"sheetId": 1, "dimension": "ROWS", "length": 10}})
    assert(InsertDimensionRequest(1, "COLUMNS", 0, 2).to_request() ==
           {"insertDimension": {"range": {"sheetId": 1, "dimension": "COLUMNS",
                                          "startIndex": 0, "endIndex": 2},
                                "inheritFromBefore": False}})
    assert(AddSheetRequest(SheetProperties(title="New")).to_request() ==
           {"addSheet": {"properties": {"title": "New"}}})
    assert(UpdateCellsRequest(GridRange(9)).to_request() ==
           {"updateCells": {"range": {"sheetId": 9}, "fields": "*"}})

def test_unknown_kind():
    class FrobnicateRequest(GoogleSheetsUpdateRequestBase):
        def to_base(self):
            return {}
    with pytest.raises(RuntimeError):
        FrobnicateRequest().to_request()

def test_batch_body():
    body = GoogleSheetsUpdateRequest([DeleteDimensionRequest(0, "ROWS", 0, 1),
                                      {"deleteSheet": {"sheetId": 4}}]).to_base()
    assert(body == {"requests": [
        {"deleteDimension": {"range": {"sheetId": 0, "dimension": "ROWS", "startIndex": 0, "endIndex": 1}}},
        {"deleteSheet": {"sheetId": 4}}]})

def test_value_input_option():
    assert(BatchUpdateValuesRequest([], "user").valueInputOption == "USER_ENTERED")
    with pytest.raises(ValueError):
        BatchUpdateValuesRequest([], "SOMETIMES")
