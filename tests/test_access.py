import json
from pathlib import Path

import google.auth.exceptions
import pytest

from gsheetsync import access
from gsheetsync.access import gws
from gsheetsync.errors import SheetsError
from gsheetsync.sheets import Service

@pytest.fixture(autouse=True)
def fresh_access():
    gws.reset()
    yield
    gws.reset()

def test_scope_labels():
    assert(gws.get_scope("feeds") == "https://spreadsheets.google.com/feeds")
    assert(gws.get_scope("sheets") == "https://www.googleapis.com/auth/spreadsheets")
    assert(gws.get_scope("https://www.googleapis.com/auth/drive.file") ==
           "https://www.googleapis.com/auth/drive.file")
    assert(gws.get_scope("bogus") == "")

def test_scopes_setter():
    gws.scopes = ["feeds", "bogus", "feeds", "drive"]
    assert(gws.scopes == ["https://spreadsheets.google.com/feeds",
                          "https://www.googleapis.com/auth/drive"])
    assert(not gws.connected)
    assert(gws.append_scopes("sheets-ro"))
    assert(len(gws.scopes) == 3)

def test_config_round_trip(tmp_path):
    gws.config = {"secrets": str(tmp_path / "key.json"), "cache": str(tmp_path / "tokens.json"),
                  "scopes": ["feeds"], "port": "8080"}
    assert(gws.client_secrets == tmp_path / "key.json")
    assert(gws.cred_cache == tmp_path / "tokens.json")
    c = gws.config
    assert(c["scopes"] == ["https://spreadsheets.google.com/feeds"])
    assert(c["port"] == 8080)
    assert(c["server"] == "localhost")

def test_default_secrets():
    assert(gws.client_secrets == Path("client_secret.json"))
    assert(not gws)
    assert(str(gws).startswith("Disconnected"))

def test_connect_without_scopes():
    assert(not gws.connect())

FEEDS = "https://spreadsheets.google.com/feeds"

class FakeServiceAccount():
    """Stands in for service_account.Credentials, recording what it was loaded with."""
    loaded = []
    fail_refresh = False

    def __init__(self, scopes):
        self.scopes = scopes
        self.valid = False

    @classmethod
    def from_service_account_file(cls, filename, scopes=None):
        cls.loaded.append((filename, list(scopes)))
        return cls(scopes)

    def refresh(self, request):
        if self.fail_refresh:
            raise google.auth.exceptions.RefreshError("invalid_grant: account disabled")
        self.valid = True

@pytest.fixture
def fake_google(monkeypatch):
    FakeServiceAccount.loaded = []
    FakeServiceAccount.fail_refresh = False
    built = []
    def fake_build(name, version, credentials=None, cache=None):
        built.append((name, version, credentials))
        return "sheets-resource"
    def no_default(scopes=None):
        raise AssertionError("application default credentials should not be used")
    monkeypatch.setattr(access.service_account, "Credentials", FakeServiceAccount)
    monkeypatch.setattr(access, "build", fake_build)
    monkeypatch.setattr(access.google.auth, "default", no_default)
    return built

def write_key(path, body):
    path.write_text(json.dumps(body), encoding="utf-8")
    return path

def test_from_service_account_key(tmp_path, fake_google):
    key = write_key(tmp_path / "key.json", {"type": "service_account", "client_email": "x@y"})
    svc = Service.from_secret_file(key)
    assert(svc.resource == "sheets-resource")
    assert(FakeServiceAccount.loaded == [(str(key), [FEEDS])])
    assert(fake_google[0][:2] == ("sheets", "v4"))
    assert(gws.connected)
    assert(gws.session_scopes == [FEEDS])

def test_from_missing_secret_file(tmp_path, fake_google):
    with pytest.raises(SheetsError):
        Service.from_secret_file(tmp_path / "nope.json")
    assert(FakeServiceAccount.loaded == [])
    assert(fake_google == [])

def test_from_unrecognised_secret_file(tmp_path, fake_google):
    other = write_key(tmp_path / "other.json", {"hello": "world"})
    with pytest.raises(SheetsError):
        Service.from_secret_file(other)
    garbage = tmp_path / "garbage.json"
    garbage.write_text("not json {", encoding="utf-8")
    with pytest.raises(SheetsError):
        Service.from_secret_file(garbage)
    assert(fake_google == [])

def test_from_secret_file_refresh_failure(tmp_path, fake_google):
    FakeServiceAccount.fail_refresh = True
    key = write_key(tmp_path / "key.json", {"type": "service_account"})
    with pytest.raises(SheetsError) as e:
        Service.from_secret_file(key)
    assert("invalid_grant" in str(e.value))
    assert(isinstance(e.value.__cause__, google.auth.exceptions.RefreshError))
    assert(fake_google == [])

def test_secrets_type(tmp_path):
    assert(gws.secrets_type(tmp_path / "missing.json") == "")
    assert(gws.secrets_type(write_key(tmp_path / "sa.json", {"type": "service_account"})) == "service_account")
    assert(gws.secrets_type(write_key(tmp_path / "oauth.json", {"installed": {}})) == "oauth")
    assert(gws.secrets_type(write_key(tmp_path / "list.json", [1, 2])) == "")
