"""
Thin wrappers around simple-salesforce and the Salesforce OAuth endpoints.

Everything that talks to Salesforce over the network lives here so the rest
of the app only sees plain dicts and lists.
"""

import asyncio
import functools
import logging
from typing import Any, Dict, List, Optional, Union
from urllib.parse import urlencode

import requests
from simple_salesforce import Salesforce

import config
from services.errors import ServerError

logger = logging.getLogger(__name__)

OAUTH_SCOPE = "api id web refresh_token"

BulkResult = Union[Dict[str, Any], List[Dict[str, Any]]]


class SalesforceOAuth:
    """OAuth 2.0 web-server flow against the Salesforce login host."""

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        login_url: str = "https://login.salesforce.com",
        timeout: float = 120,
    ):
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self.login_url = login_url.rstrip("/")
        self.timeout = timeout

    def authorization_url(self, scope: str = OAUTH_SCOPE) -> str:
        params = {
            "response_type": "code",
            "client_id": self.client_id,
            "redirect_uri": self.redirect_uri,
            "scope": scope,
        }
        return f"{self.login_url}/services/oauth2/authorize?{urlencode(params)}"

    def exchange_code(self, code: str) -> Dict[str, Any]:
        """Trade an authorization code for an access token + instance URL."""
        resp = requests.post(
            f"{self.login_url}/services/oauth2/token",
            data={
                "grant_type": "authorization_code",
                "code": code,
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "redirect_uri": self.redirect_uri,
            },
            timeout=self.timeout,
        )
        resp.raise_for_status()
        token = resp.json()
        if not token.get("access_token") or not token.get("instance_url"):
            raise RuntimeError("Token response is missing access_token or instance_url")
        return token


class SalesforceAdapter:
    """
    One authenticated connection (session id + instance URL).
    Creating it makes no network call.
    """

    def __init__(self, instance_url: str, session_id: str, version: str = "59.0", timeout: float = 120):
        self.instance_url = instance_url.rstrip("/")
        self.session_id = session_id
        self.timeout = timeout
        self.sf = Salesforce(
            instance_url=self.instance_url,
            session_id=session_id,
            version=version,
            session=requests.Session(),
        )

    def identity(self) -> Dict[str, Any]:
        resp = requests.get(
            f"{self.instance_url}/services/oauth2/userinfo",
            headers={"Authorization": f"Bearer {self.session_id}", "Accept": "application/json"},
            timeout=self.timeout,
        )
        resp.raise_for_status()
        return resp.json()

    def describe_global(self) -> Dict[str, Any]:
        return self.sf.describe()

    def describe(self, object_name: str) -> Dict[str, Any]:
        return getattr(self.sf, object_name).describe()

    def create(self, object_name: str, records: List[Dict[str, Any]]) -> BulkResult:
        return getattr(self.sf.bulk, object_name).insert(records)

    def update(self, object_name: str, records: List[Dict[str, Any]]) -> BulkResult:
        # Each record must carry its own Id
        return getattr(self.sf.bulk, object_name).update(records)

    def upsert(self, object_name: str, records: List[Dict[str, Any]], external_id_field: str) -> BulkResult:
        return getattr(self.sf.bulk, object_name).upsert(records, external_id_field)


class SalesforceConnector:
    """Factory handed to the routes; swapped for a fake in tests."""

    def __init__(self, oauth: SalesforceOAuth, version: str = "59.0", timeout: float = 120):
        self.oauth = oauth
        self.version = version
        self.timeout = timeout

    def connect(self, instance_url: str, session_id: str) -> SalesforceAdapter:
        return SalesforceAdapter(instance_url, session_id, version=self.version, timeout=self.timeout)


_connector: Optional[SalesforceConnector] = None


def get_connector() -> SalesforceConnector:
    global _connector
    if _connector is None:
        oauth = SalesforceOAuth(
            client_id=config.SF_CLIENT_ID,
            client_secret=config.SF_CLIENT_SECRET,
            redirect_uri=config.SF_REDIRECT_URI,
            login_url=config.SF_LOGIN_URL,
            timeout=config.SF_TIMEOUT_SECONDS,
        )
        _connector = SalesforceConnector(oauth, version=config.SF_API_VERSION, timeout=config.SF_TIMEOUT_SECONDS)
    return _connector


async def run_adapter_call(func, *args, **kwargs):
    """
    Run a blocking Salesforce call in the default executor, bounded by
    SF_TIMEOUT_SECONDS. A timeout is reported as a ServerError; the worker
    thread is abandoned, not interrupted.
    """
    loop = asyncio.get_running_loop()
    try:
        return await asyncio.wait_for(
            loop.run_in_executor(None, functools.partial(func, *args, **kwargs)),
            timeout=config.SF_TIMEOUT_SECONDS,
        )
    except asyncio.TimeoutError:
        logger.error("Salesforce call %s timed out after %ss", getattr(func, "__name__", func), config.SF_TIMEOUT_SECONDS)
        raise ServerError("Salesforce request timed out")
