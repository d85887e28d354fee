from collections.abc import Iterable
from pathlib import Path
import json
import copy
import logging
from functools import wraps

import google.auth
import google.auth.exceptions
from google.auth.transport.requests import Request
from google.oauth2 import service_account
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build, Resource
import googleapiclient.discovery_cache as gws_discovery_cache

logger = logging.getLogger(__name__)

class __SheetsAccess():
    """
    Class encapsulating authenticated access to the Sheets API.
    The secrets file is normally a service account key, in which case we just
    sign JWTs with it.  An OAuth client secrets file also works and will run the
    installed app flow, with the resulting tokens cached so the confirmation
    screens only show up once.  With no secrets file at all we fall back to the
    application default credentials (GOOGLE_APPLICATION_CREDENTIALS etc).

    It makes no sense to have multiple authenticated sessions per application so do
    this as a module singleton and then service retrieval is a simple decorator.
    """

    __SCOPES = {
        "feeds": "https://spreadsheets.google.com/feeds",
        "sheets": "https://www.googleapis.com/auth/spreadsheets",
        "sheets-ro": "https://www.googleapis.com/auth/spreadsheets.readonly",
        "drive-file": "https://www.googleapis.com/auth/drive.file",
        "drive": "https://www.googleapis.com/auth/drive",
        "drive-ro": "https://www.googleapis.com/auth/drive.readonly",
    }
    __SCOPE_URL_PREFIXES = ("https://www.googleapis.com/", "https://spreadsheets.google.com/")

    __DEFAULT_AUTH_PROMPT_MSG = "Please visit this URL to authorize gsheetsync: {url}"
    __DEFAULT_AUTH_FLOW_SUCCESS_MSG = "Authorization complete, you may close this window."
    __DEFAULT_SECRETS = "client_secret.json"
    __DEFAULT_CACHE = str((Path.home() / "gsheetsync_tokens.json").absolute())

    def __init__(self) -> None:
        self.reset()

    def __bool__(self) -> bool:
        """True is we are connected and authenticated"""
        return self.connected

    def __str__(self) -> str:
        if self.connected:
            return f"Connected:{str(self.session_scopes)}"
        return f"Disconnected:{str(self.__scopes)}"

    def __repr__(self) -> str:
        return f"{str(self.__class__)}:{str(self)}"

    @classmethod
    def get_scope(cls, scope: str) -> str:
        """
        Get a scope based on simplified label.
        A raw URL will also be expected.
        """
        s = str(scope)
        sc = cls.__SCOPES.get(s, "")
        if not sc and s.startswith(cls.__SCOPE_URL_PREFIXES):
            sc = s
        return sc

    @property
    def client_secrets(self) -> Path:
        """
        Path to the service account key or OAuth client secrets file.
        """
        return self.__secrets

    @client_secrets.setter
    def client_secrets(self, value: Path|str) -> None:
        """
        If this changes we need to reconnect as we have new credentials.
        """
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__secrets:
            self.__secrets = val
            if self.connected:
                self.connect()

    @property
    def cred_cache(self) -> Path:
        """
        Path to local OAuth token cache.  Unused for service accounts.
        """
        return self.__cache

    @cred_cache.setter
    def cred_cache(self, value: Path|str):
        val = value if isinstance(value, Path) else Path(str(value))
        if val != self.__cache:
            self.__cache = val
            if self.connected:
                self.connect()

    @property
    def connected(self) -> bool:
        return bool(self.__creds) and bool(self.__creds.valid)

    @property
    def session_scopes(self) -> list[str]:
        """
        Scopes held by the current credentials, as opposed to self.scopes
        which is what is requested or to be requested.
        """
        if self.connected:
            return list(self.__creds.scopes or [])
        return []

    @property
    def scopes(self) -> list[str]:
        return self.__scopes

    @scopes.setter
    def scopes(self, value: None|list[str]|str) -> None:
        """
        Override the list of requested scopes.  Unknown labels are dropped.
        """
        slist = []
        if value is not None:
            vals = [value] if isinstance(value, str) or not isinstance(value, Iterable) else value
            for v in vals:
                s = self.get_scope(str(v))
                if s and s not in slist:
                    slist.append(s)
        self.__scopes = slist
        if self.__scopes and self.connected:
            self.refresh()
        else:
            self.__creds = None
            self.__services = {}

    def append_scopes(self, *args) -> bool:
        """
        Adding to the current scope list.
        """
        for a in args:
            b = [a] if isinstance(a, str) or not isinstance(a, Iterable) else a
            for i in b:
                s = self.get_scope(str(i))
                if s and s not in self.__scopes:
                    self.__scopes.append(s)
        return self.refresh()

    @property
    def creds(self):
        """
        Current active access credentials or None
        """
        return self.__creds

    @property
    def services(self) -> dict[str, Resource]:
        return self.__services

    @property
    def config(self) -> dict:
        """
        Get all configuration state as a dict.
        Convenience for getting it all at once for pushing into a json, toml, ini, etc, file.
        """
        return {
            'secrets': str(self.__secrets),
            'cache': str(self.__cache),
            'scopes': list(self.__scopes),
            'server': self.auth_server,
            'port': self.auth_port
        }

    @config.setter
    def config(self, config: dict) -> None:
        """
        Set configuration state from a dict.
        """
        reconnect = False
        v = config.get('port', None)
        if v is not None:
            self.auth_port = int(v)
        v = config.get('server', None)
        if v is not None:
            self.auth_server = str(v)
        v = config.get('scopes', [])
        if v:
            self.__scopes = [s for s in (self.get_scope(x) for x in v) if s]
            reconnect = True
        v = config.get('cache', None)
        if v is not None:
            self.__cache = Path(v)
            reconnect = True
        v = config.get('secrets', None)
        if v is not None:
            self.__secrets = Path(v)
            reconnect = True
        v = config.get('auth_prompt_msg', None)
        if v is not None:
            self.auth_prompt_msg = str(v)
        v = config.get('flow_success_msg', None)
        if v is not None:
            self.auth_flow_success_msg = str(v)
        if reconnect and self.connected:
            self.connect()

    def reset(self) -> None:
        """
        Reset all connection state to defaults.
        """
        self.__secrets = Path(self.__DEFAULT_SECRETS)
        self.__cache = Path(self.__DEFAULT_CACHE)
        self.__discovery_cache = gws_discovery_cache.autodetect()
        self.__creds = None
        self.__scopes = []
        self.__services = {}
        self.auth_server = 'localhost'
        self.auth_port = 0
        self.auth_prompt_msg = self.__DEFAULT_AUTH_PROMPT_MSG
        self.auth_flow_success_msg = self.__DEFAULT_AUTH_FLOW_SUCCESS_MSG

    def refresh(self) -> bool:
        """
        If requested scopes are not all in the current session, reconnect.
        """
        scopes_accounted = all(s in self.session_scopes for s in self.__scopes)
        if self.connected and not scopes_accounted:
            return self.connect()
        return True

    def secrets_type(self, path: Path|None = None) -> str:
        """
        Service account keys say so in a 'type' field, OAuth client files
        have an 'installed' or 'web' section instead.  Empty if the file
        is missing or neither.
        """
        p = self.__secrets if path is None else path
        if not (p.exists() and p.is_file()):
            return ""
        try:
            with open(p, 'r', encoding='utf-8') as f:
                j = json.load(f)
        except ValueError:
            return ""
        if not isinstance(j, dict):
            return ""
        if j.get('type') == 'service_account':
            return 'service_account'
        if 'installed' in j or 'web' in j:
            return 'oauth'
        return ""

    def _connect_service_account(self, scopes: list[str]) -> None:
        logger.debug("loading service account credentials from %s", self.__secrets)
        self.__creds = service_account.Credentials.from_service_account_file(str(self.__secrets),
                                                                              scopes=scopes)
        # a fresh JWT credential has no token until it is refreshed
        self.__creds.refresh(Request())

    def _connect_oauth(self, scopes: list[str]) -> None:
        if self.__cache.exists() and self.__cache.is_file():
            # the cache records what scopes it was issued for, a refresh won't widen them
            cf = self.__cache.resolve()
            with open(cf, 'r', encoding='utf-8') as f:
                j = json.load(f)
            if not all(s in j.get('scopes', []) for s in scopes):
                self.__cache.unlink()
            else:
                self.__creds = Credentials.from_authorized_user_file(str(cf), scopes)
        if not self.connected and self.__creds and self.__creds.refresh_token:
            try:
                self.__creds.refresh(Request())
            except google.auth.exceptions.RefreshError as e:
                logger.warning("failed to refresh stored creds: %s...deleting cred cache and re-authorizing", e)
            if not self.connected:
                self.__cache.unlink(missing_ok=True)
        if not self.connected:
            flow = InstalledAppFlow.from_client_secrets_file(str(self.__secrets), scopes)
            self.__creds = flow.run_local_server(host=self.auth_server, port=self.auth_port,
                                                 authorization_prompt_message=self.auth_prompt_msg,
                                                 success_message=self.auth_flow_success_msg)
        if self.connected:
            user_info = {'refresh_token': self.__creds.refresh_token, 'client_id': self.__creds.client_id,
                         'client_secret': self.__creds.client_secret, 'scopes': scopes}
            with open(self.__cache.resolve(), 'w', encoding='utf-8') as f:
                json.dump(user_info, f, ensure_ascii=False, indent=2)

    def connect(self) -> bool:
        """
        Establish a new authentication session using whatever the secrets file holds.
        """
        self.__creds = None
        self.__services = {}
        if not self.__scopes:
            return False
        requested_scopes = copy.copy(self.__scopes)
        kind = self.secrets_type()
        if kind == 'service_account':
            self._connect_service_account(requested_scopes)
        elif kind == 'oauth':
            self._connect_oauth(requested_scopes)
        else:
            try:
                # looks at the GOOGLE_APPLICATION_CREDENTIALS envvar and
                # other cloud default locations
                self.__creds, _ = google.auth.default(scopes=requested_scopes)
                if not self.__creds.valid:
                    self.__creds.refresh(Request())
            except google.auth.exceptions.DefaultCredentialsError as e:
                logger.warning("no usable credentials found: %s", e)
                self.__creds = None
        return self.connected

    def get_service(self, name: str, version: str) -> Resource|None:
        """
        Build the requested service if not already available, connecting if required.
        Can return None if no connection present.
        """
        if not self.connected:
            self.connect()
        if not self.connected:
            return None
        id = f'{name}:{version}'
        s = self.__services.get(id, None)
        if s is None:
            s = build(name, version, credentials=self.__creds, cache=self.__discovery_cache)
            if s:
                self.__services[id] = s
        return s

gws = __SheetsAccess()

def service(name: str, version: str, *scopes: str):
    """
    Decorator delivering the required API service to a function as the
    'service' keyword argument, unless the caller already passed one.
    param: name: service name
    param: version: service version
    param: scopes: scope labels or URLs the service needs
    """
    def _inner_decorator(f):
        @wraps(f)
        def wrapped(*args, **kwargs):
            if kwargs.get('service') is None:
                gws.append_scopes(*scopes)
                kwargs['service'] = gws.get_service(name, version)
            return f(*args, **kwargs)
        return wrapped
    return _inner_decorator
