"""
Error handling for Sheets API calls.

Everything that can go wrong talking to the service, a dead connection, a body
that isn't JSON or an error envelope from the API itself, ends up as a SheetsError.
The API reports errors as:

    {"error": {"code": 403, "message": "...", "status": "PERMISSION_DENIED"}}
"""
import json
import logging

from googleapiclient.errors import HttpError

logger = logging.getLogger(__name__)

class SheetsError(Exception):
    """Any failure reported while talking to the Sheets API."""
    pass

def decode(body: dict|bytes|str|None) -> dict:
    """
    Decode a response body into a dict and raise if it carries an error envelope.
    """
    if body is None:
        return {}
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8", errors="replace")
    if isinstance(body, str):
        if not body.strip():
            return {}
        try:
            body = json.loads(body)
        except ValueError as e:
            raise SheetsError(f"unable to decode response: {e}") from e
    if not isinstance(body, dict):
        raise SheetsError(f"unexpected response type: {type(body).__name__}")
    check_error(body)
    return body

def check_error(response: dict) -> None:
    """
    Raise a SheetsError if the decoded response is an API error envelope.
    """
    err = response.get("error")
    if not isinstance(err, dict):
        return
    status = err.get("status", "")
    code = err.get("code", 0)
    try:
        code = int(code or 0)
    except (TypeError, ValueError):
        code = str(code)
    message = err.get("message", "")
    logger.debug("API error %s(%s): %s", status, code, message)
    raise SheetsError(f"error status: {status}, code: {code}, message: {message}")

def from_http_error(e: HttpError) -> SheetsError:
    """
    googleapiclient raises HttpError for any non 2xx, the body of which is
    normally the error envelope.  Fall back to the HttpError text if it isn't.
    """
    try:
        body = json.loads(e.content)
    except (TypeError, ValueError):
        body = None
    if isinstance(body, dict):
        try:
            check_error(body)
        except SheetsError as err:
            return err
    return SheetsError(f"error status: {e.resp.reason}, code: {e.resp.status}, message: {e.reason}")
