"""Shared fixtures: in-memory collaborators, a frozen clock and an API client."""

import copy
import itertools
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

from app.config import Settings
from app.core.deps import get_clock, get_email_dispatcher, get_identity_provider, get_settings, get_store
from app.core.errors import AlreadyExists, ServiceError, Unauthenticated
from app.db.store import JOB_APPLICATIONS, JOB_POSTINGS, DocumentStore
from app.main import create_app
from app.services.email.dispatcher import EmailDispatcher
from app.services.identity import IdentityProvider

START = datetime(2025, 6, 1, 9, 0, tzinfo=timezone.utc)


class InMemoryDocumentStore(DocumentStore):
    """DocumentStore over plain dicts, with the same matching rules as MongoDB."""

    def __init__(self):
        self.collections: Dict[str, Dict[str, Dict[str, Any]]] = {}

    def _collection(self, name: str) -> Dict[str, Dict[str, Any]]:
        return self.collections.setdefault(name, {})

    @staticmethod
    def _strip(data: Dict[str, Any]) -> Dict[str, Any]:
        return {k: copy.deepcopy(v) for k, v in data.items() if k not in ("id", "_id")}

    @staticmethod
    def _matches(key: str, document: Dict[str, Any], filters: Optional[Dict[str, Any]]) -> bool:
        for field, expected in (filters or {}).items():
            actual = key if field == "id" else document.get(field)
            if isinstance(expected, (list, tuple, set)):
                if actual not in expected:
                    return False
            elif actual != expected:
                return False
        return True

    def seed(self, collection: str, key: str, data: Dict[str, Any]) -> str:
        """Synchronous write for arranging API tests."""
        self._collection(collection)[key] = self._strip(data)
        return key

    def peek(self, collection: str, key: str) -> Optional[Dict[str, Any]]:
        document = self._collection(collection).get(key)
        return None if document is None else {**copy.deepcopy(document), "id": key}

    async def get(self, collection, key):
        return self.peek(collection, key)

    async def set(self, collection, key, data):
        self.seed(collection, key, data)

    async def insert(self, collection, data):
        return self.seed(collection, uuid4().hex, data)

    async def update(self, collection, key, changes, where=None):
        document = self._collection(collection).get(key)
        if document is None or not self._matches(key, document, where):
            return False
        document.update(self._strip(changes))
        return True

    async def increment(self, collection, key, field, amount=1):
        document = self._collection(collection).get(key)
        if document is None:
            return None
        document[field] = document.get(field, 0) + amount
        return document[field]

    async def delete(self, collection, key):
        return self._collection(collection).pop(key, None) is not None

    async def find(self, collection, filters=None, sort=None, limit=None):
        results = [
            {**copy.deepcopy(d), "id": k}
            for k, d in self._collection(collection).items()
            if self._matches(k, d, filters)
        ]
        for field, direction in reversed(list(sort or [])):
            results.sort(
                key=lambda d: (d.get(field) is None, d.get(field) if d.get(field) is not None else 0),
                reverse=direction < 0,
            )
        return results[:limit] if limit else results

    async def count(self, collection, filters=None):
        return len(await self.find(collection, filters))


class RecordingEmailDispatcher(EmailDispatcher):
    """Keeps every message; raises `fail_with` instead when set."""

    def __init__(self):
        self.sent: List[Dict[str, str]] = []
        self.fail_with: Optional[ServiceError] = None
        self._ids = itertools.count(1)

    async def send(self, to_email, to_name, subject, html):
        if self.fail_with is not None:
            raise self.fail_with
        self.sent.append({"to_email": to_email, "to_name": to_name, "subject": subject, "html": html})
        return f"<msg-{next(self._ids)}@test>"

    @property
    def last(self) -> Dict[str, str]:
        return self.sent[-1]


class FakeIdentityProvider(IdentityProvider):
    def __init__(self):
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.tokens: Dict[str, Dict[str, Any]] = {}
        self._ids = itertools.count(1)

    async def create_account(self, email, password, email_verified=True):
        if email in self.accounts:
            raise AlreadyExists("This email is already registered. Please sign in instead.")
        uid = f"uid-{next(self._ids)}"
        self.accounts[email] = {"uid": uid, "password": password, "email_verified": email_verified}
        return uid

    async def verify_token(self, token):
        if token not in self.tokens:
            raise Unauthenticated("Could not validate credentials")
        return dict(self.tokens[token])

    def issue_token(self, uid: str, email: str, admin: bool = False) -> str:
        token = f"token-{uid}"
        claims = {"uid": uid, "email": email}
        if admin:
            claims["admin"] = True
        self.tokens[token] = claims
        return token


class FrozenClock:
    def __init__(self, now: datetime = START):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


def posting_document(clock: FrozenClock, **overrides) -> Dict[str, Any]:
    document = {
        "jobTitle": "Backend Engineer",
        "department": "Engineering",
        "employmentType": "Full-time",
        "location": "Lusaka",
        "jobDescription": "Build recruitment services",
        "experience": "2-5 years",
        "salaryMin": 600000,
        "salaryMax": 900000,
        "requirements": ["Python", "MongoDB"],
        "postedDate": clock(),
        "expiryDateTime": clock() + timedelta(days=30),
    }
    document.update(overrides)
    return document


def application_document(clock: FrozenClock, **overrides) -> Dict[str, Any]:
    document = {
        "jobId": "job-1",
        "jobTitle": "Backend Engineer",
        "department": "Engineering",
        "applicantUid": "uid-applicant",
        "personalDetails": {
            "fullName": "Jane Mwale",
            "email": "jane@example.com",
            "phone": "+260 977 123456",
            "address": "12 Cairo Road, Lusaka",
        },
        "education": [{"degreeLevel": "UG", "institution": "UNZA", "fieldOfStudy": "CS"}],
        "experience": [],
        "skills": ["Python"],
        "resumeUrl": "https://files.example.com/jane.pdf",
        "coverLetter": "I would love to join.",
        "status": "pending",
        "appliedAt": clock(),
    }
    document.update(overrides)
    return document


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def store():
    return InMemoryDocumentStore()


@pytest.fixture
def email():
    return RecordingEmailDispatcher()


@pytest.fixture
def identity():
    return FakeIdentityProvider()


@pytest.fixture
def settings():
    return Settings(OTP_TTL_SECONDS=600, OTP_MAX_ATTEMPTS=3, ADMIN_EMAILS="", BREVO_API_KEY="test-key")


@pytest.fixture
def seed_posting(store, clock):
    def _seed(key: str = "job-1", **overrides) -> str:
        return store.seed(JOB_POSTINGS, key, posting_document(clock, **overrides))
    return _seed


@pytest.fixture
def seed_application(store, clock):
    def _seed(key: str = "app-1", **overrides) -> str:
        return store.seed(JOB_APPLICATIONS, key, application_document(clock, **overrides))
    return _seed


@pytest.fixture
def client(store, email, identity, clock, settings):
    app = create_app(use_lifespan=False)
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_email_dispatcher] = lambda: email
    app.dependency_overrides[get_identity_provider] = lambda: identity
    app.dependency_overrides[get_clock] = lambda: clock
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as c:
        yield c


@pytest.fixture
def admin_headers(identity):
    return {"Authorization": f"Bearer {identity.issue_token('uid-admin', 'hr@example.com', admin=True)}"}


@pytest.fixture
def applicant_headers(identity):
    return {"Authorization": f"Bearer {identity.issue_token('uid-applicant', 'jane@example.com')}"}
