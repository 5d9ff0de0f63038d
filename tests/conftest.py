"""
Shared test fixtures for eduportal.
Swaps the Supabase-backed store and identity service for in-memory fakes.
Zero network calls.
"""
import copy
import itertools
import time

import jwt
import pytest

TEST_JWT_SECRET = "test-jwt-secret-for-eduportal-suite"
ADMIN_EMAIL = "admin@example.com"


class InMemoryDocumentStore:
    """Same interface as DocumentStore, backed by dicts."""

    def __init__(self):
        self.collections = {}
        self._ids = itertools.count(1)

    def _table(self, collection):
        return self.collections.setdefault(collection, {})

    def create_document(self, collection, fields, doc_id=None):
        doc_id = str(doc_id) if doc_id is not None else str(next(self._ids))
        doc = {**copy.deepcopy(fields), "id": doc_id}
        self._table(collection)[doc_id] = doc
        return copy.deepcopy(doc)

    def get_document(self, collection, doc_id):
        doc = self._table(collection).get(str(doc_id))
        return copy.deepcopy(doc) if doc else None

    def list_documents(self, collection, filters=None, order_by=None, descending=False):
        docs = [
            copy.deepcopy(d) for d in self._table(collection).values()
            if all(d.get(k) == v for k, v in (filters or {}).items())
        ]
        if order_by:
            docs.sort(key=lambda d: d.get(order_by) or '', reverse=descending)
        return docs

    def delete_document(self, collection, doc_id):
        return self._table(collection).pop(str(doc_id), None) is not None


class FakeIdentity:
    """Records calls instead of talking to Supabase Auth."""

    def __init__(self, store):
        self.store = store
        self.calls = []

    def sign_in(self, email, password):
        self.calls.append(("sign_in", email))
        if password != "correct-password":
            from eduportal.errors import AuthError
            raise AuthError("Invalid login credentials")
        return {"user_id": "user-1", "email": email, "access_token": "a", "refresh_token": "r"}

    def sign_up(self, email, password, name, semester=None):
        self.calls.append(("sign_up", email, name, semester))
        return {"user_id": "new-user", "email": email, "access_token": None, "refresh_token": None}

    def sign_out(self, access_token):
        self.calls.append(("sign_out", access_token))

    def send_password_reset(self, email):
        self.calls.append(("send_password_reset", email))


@pytest.fixture
def store(monkeypatch):
    """In-memory store installed as the shared document store."""
    import eduportal.services.document_store as document_store
    fake = InMemoryDocumentStore()
    monkeypatch.setattr(document_store, "_store", fake)
    return fake


@pytest.fixture
def identity(monkeypatch, store):
    import eduportal.services.identity as identity_module
    fake = FakeIdentity(store)
    monkeypatch.setattr(identity_module, "_identity", fake)
    return fake


@pytest.fixture
def app(monkeypatch, store, identity):
    from eduportal.app import create_app
    from eduportal.config import config

    monkeypatch.setenv("SUPABASE_JWT_SECRET", TEST_JWT_SECRET)
    monkeypatch.setattr(config, "admin_emails", [ADMIN_EMAIL])

    flask_app = create_app()
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


def make_token(user_id, email, secret=TEST_JWT_SECRET, expires_in=3600):
    return jwt.encode(
        {
            "sub": user_id,
            "email": email,
            "aud": "authenticated",
            "exp": int(time.time()) + expires_in,
        },
        secret,
        algorithm="HS256",
    )


def auth_headers(user_id, email):
    return {"Authorization": "Bearer " + make_token(user_id, email)}


@pytest.fixture
def admin_headers(store):
    return auth_headers("admin-1", ADMIN_EMAIL)


@pytest.fixture
def student(store):
    """A student profile in semester 2."""
    return store.create_document("users", {
        "email": "marie@example.com",
        "name": "Marie Curie",
        "role": "student",
        "semester": "sem-2",
        "created_at": "2026-01-10T09:00:00",
    }, doc_id="student-1")


@pytest.fixture
def student_headers(student):
    return auth_headers(student["id"], student["email"])
