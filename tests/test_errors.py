import json

import httplib2
import pytest
from googleapiclient.errors import HttpError

from gsheetsync.errors import SheetsError, decode, check_error, from_http_error
from gsheetsync.sheets.ops import execute

ENVELOPE = {"error": {"code": 403, "status": "PERMISSION_DENIED", "message": "m"}}

def test_envelope():
    with pytest.raises(SheetsError) as e:
        check_error(ENVELOPE)
    text = str(e.value)
    assert("403" in text)
    assert("PERMISSION_DENIED" in text)
    assert("m" in text)
    assert(text == "error status: PERMISSION_DENIED, code: 403, message: m")

def test_envelope_odd_code():
    for code in ("UNAVAILABLE", [503], None):
        with pytest.raises(SheetsError) as e:
            check_error({"error": {"code": code, "status": "UNAVAILABLE", "message": "later"}})
        assert("message: later" in str(e.value))
    with pytest.raises(SheetsError) as e:
        decode('{"error": {"code": "503", "status": "UNAVAILABLE"}}')
    assert("code: 503," in str(e.value))

def test_decode():
    assert(decode(None) == {})
    assert(decode(b"") == {})
    assert(decode('{"spreadsheetId": "x"}') == {"spreadsheetId": "x"})
    with pytest.raises(SheetsError):
        decode(json.dumps(ENVELOPE).encode("utf-8"))
    with pytest.raises(SheetsError):
        decode("<html>not json</html>")
    with pytest.raises(SheetsError):
        decode("[1, 2]")

def test_http_error():
    resp = httplib2.Response({"status": "403"})
    err = from_http_error(HttpError(resp, json.dumps(ENVELOPE).encode("utf-8")))
    assert(isinstance(err, SheetsError))
    assert(str(err) == "error status: PERMISSION_DENIED, code: 403, message: m")

def test_http_error_without_envelope():
    resp = httplib2.Response({"status": "502"})
    err = from_http_error(HttpError(resp, b"Bad Gateway"))
    assert("502" in str(err))

class Raises():
    def __init__(self, exc):
        self.exc = exc

    def execute(self):
        raise self.exc

def test_execute_wraps_failures():
    with pytest.raises(SheetsError):
        execute(Raises(HttpError(httplib2.Response({"status": "403"}), json.dumps(ENVELOPE).encode("utf-8"))))
    with pytest.raises(SheetsError):
        execute(Raises(httplib2.ServerNotFoundError("no such host")))
    with pytest.raises(SheetsError):
        execute(Raises(ConnectionResetError()))
    with pytest.raises(SheetsError):
        execute(Raises(json.JSONDecodeError("bad", "", 0)))
