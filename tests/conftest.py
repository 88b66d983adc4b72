"""
Pytest fixtures for the CSV loader API.

Provides:
- A fake Salesforce connector that records every adapter call
- An in-memory session store
- A TestClient whose uploads are staged in a per-test temp directory
"""

import os
import tempfile

# Must be set before config is imported
os.environ.setdefault("SESSION_STORE", "memory")
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("UPLOAD_DIR", os.path.join(tempfile.gettempdir(), "sf-loader-test-uploads"))

import pytest
from fastapi.testclient import TestClient

from main import app
from services.file_upload_service import get_upload_dir
from services.salesforce_client import SalesforceOAuth, get_connector
from services.session_service import InMemorySessionStore, get_session_store

USER_INFO = {"user_id": "005xx0000012345", "preferred_username": "alice@example.com", "name": "Alice"}
INSTANCE_URL = "https://example.my.salesforce.com"


class FakeOAuth(SalesforceOAuth):
    def __init__(self, connector):
        super().__init__("client-id", "client-secret", "http://localhost:3000/oauth/callback")
        self.connector = connector

    def exchange_code(self, code):
        self.connector.calls.append(("exchange_code", code))
        if self.connector.error:
            raise self.connector.error
        return {"access_token": "00Doauth", "instance_url": INSTANCE_URL}


class FakeAdapter:
    def __init__(self, connector, instance_url, session_id):
        self.connector = connector
        self.instance_url = instance_url.rstrip("/")
        self.session_id = session_id

    def _call(self, name, *args):
        self.connector.calls.append((name,) + args)
        if self.connector.error:
            raise self.connector.error

    def identity(self):
        self._call("identity")
        return dict(self.connector.user_info)

    def describe_global(self):
        self._call("describe_global")
        return self.connector.global_describe

    def describe(self, object_name):
        self._call("describe", object_name)
        return self.connector.object_describe

    def create(self, object_name, records):
        self._call("create", object_name, records)
        return self.connector.bulk_result

    def update(self, object_name, records):
        self._call("update", object_name, records)
        return self.connector.bulk_result

    def upsert(self, object_name, records, external_id_field):
        self._call("upsert", object_name, records, external_id_field)
        return self.connector.bulk_result


class FakeConnector:
    def __init__(self):
        self.calls = []
        self.error = None
        self.user_info = USER_INFO
        self.global_describe = {"sobjects": []}
        self.object_describe = {"fields": []}
        self.bulk_result = []
        self.oauth = FakeOAuth(self)

    def connect(self, instance_url, session_id):
        return FakeAdapter(self, instance_url, session_id)

    @property
    def call_names(self):
        return [c[0] for c in self.calls]


@pytest.fixture
def connector():
    return FakeConnector()


@pytest.fixture
def session_store():
    return InMemorySessionStore()


@pytest.fixture
def upload_dir(tmp_path):
    path = tmp_path / "uploads"
    path.mkdir()
    return path


@pytest.fixture
def client(connector, session_store, upload_dir):
    app.dependency_overrides[get_connector] = lambda: connector
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_upload_dir] = lambda: str(upload_dir)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
def auth_client(client, connector):
    """A client that already authenticated with a session id."""
    resp = client.post("/api/auth/session", json={"sessionId": "00Dsession", "instanceUrl": INSTANCE_URL})
    assert resp.status_code == 200
    connector.calls.clear()
    return client
