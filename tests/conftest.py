"""Shared fixtures: a throwaway SQLite database, seeded users and fake email senders."""

from __future__ import annotations

import os
import tempfile
import threading
from collections.abc import Iterable
from pathlib import Path

import pytest

TEST_DB_PATH = Path(tempfile.gettempdir()) / "carelink_api_test.db"
os.environ["DATABASE_URL"] = f"sqlite:///{TEST_DB_PATH}"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "30"
os.environ.pop("SENDGRID_API_KEY", None)
os.environ.pop("SENDGRID_SENDER", None)

from carelink.config import get_settings  # noqa: E402

get_settings.cache_clear()

from carelink.application.use_cases.notifications import NotificationDispatcher  # noqa: E402
from carelink.domain.entities import (  # noqa: E402
    ROLE_ADMIN,
    ROLE_CAREGIVER,
    ROLE_CUSTOMER,
    CaregiverProfile,
    Role,
    User,
)
from carelink.infrastructure.database import (  # noqa: E402
    Base,
    SessionLocal,
    engine,
    initialize_database,
)
from carelink.infrastructure.email import EmailSender  # noqa: E402
from carelink.infrastructure.repositories import (  # noqa: E402
    CaregiverRepository,
    RoleRepository,
    UserRepository,
)
from carelink.infrastructure.security import create_user_access_token  # noqa: E402

DASHBOARD_URL = "http://frontend.test/dashboard"


class RecordingEmailSender(EmailSender):
    """Collect outgoing mail instead of delivering it.

    Addresses listed in ``fail_for`` report a delivery failure, addresses in
    ``raise_for`` make ``send`` raise, and addresses in ``block_for`` hang
    until :meth:`release` is called.
    """

    def __init__(
        self,
        *,
        fail_for: Iterable[str] = (),
        raise_for: Iterable[str] = (),
        block_for: Iterable[str] = (),
    ) -> None:
        self.sent: list[dict] = []
        self.fail_for = set(fail_for)
        self.raise_for = set(raise_for)
        self.block_for = set(block_for)
        self._released = threading.Event()
        self._lock = threading.Lock()

    def send(self, recipients, subject, html_body, text_body=None) -> bool:
        address = recipients if isinstance(recipients, str) else ", ".join(recipients)
        if address in self.block_for:
            self._released.wait(timeout=5)
            return True
        if address in self.raise_for:
            raise ConnectionError(f"transport down for {address}")
        with self._lock:
            self.sent.append(
                {"to": address, "subject": subject, "html": html_body, "text": text_body}
            )
        return address not in self.fail_for

    def release(self) -> None:
        self._released.set()

    @property
    def recipients(self) -> list[str]:
        return [message["to"] for message in self.sent]


@pytest.fixture(autouse=True)
def reset_database():
    """Start every test from empty tables."""

    Base.metadata.drop_all(bind=engine)
    initialize_database()
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def roles(db_session) -> dict[str, Role]:
    repository = RoleRepository(db_session)
    return {
        ROLE_CUSTOMER: repository.ensure(ROLE_CUSTOMER, "Customer"),
        ROLE_CAREGIVER: repository.ensure(ROLE_CAREGIVER, "Caregiver"),
        ROLE_ADMIN: repository.ensure(ROLE_ADMIN, "Administrator"),
    }


@pytest.fixture()
def make_user(db_session, roles):
    """Insert a user directly; the stored password is not a usable hash."""

    counter = iter(range(1, 10_000))

    def _make_user(
        role_alias: str = ROLE_CUSTOMER,
        *,
        name: str | None = None,
        email: str | None = None,
        phone: str | None = None,
        is_active: bool = True,
    ) -> User:
        index = next(counter)
        return UserRepository(db_session).create(
            User(
                id=None,
                role=roles[role_alias],
                name=name or f"{role_alias.title()} {index}",
                email=email or f"{role_alias}{index}@example.com",
                password=f"unusable-{index}",
                phone=phone,
                is_active=is_active,
            )
        )

    return _make_user


@pytest.fixture()
def make_caregiver(db_session, make_user):
    """Create a caregiver user with a profile and return ``(user, profile)``."""

    def _make_caregiver(
        *,
        verified: bool = True,
        hourly_rate_cents: int = 2500,
        user: User | None = None,
        **user_fields,
    ) -> tuple[User, CaregiverProfile]:
        owner = user or make_user(ROLE_CAREGIVER, **user_fields)
        profile = CaregiverRepository(db_session).create(
            CaregiverProfile(
                id=None,
                user_id=owner.id,
                verified=verified,
                hourly_rate_cents=hourly_rate_cents,
            )
        )
        return owner, profile

    return _make_caregiver


@pytest.fixture()
def email_sender():
    sender = RecordingEmailSender()
    yield sender
    sender.release()


@pytest.fixture()
def dispatcher(db_session, email_sender) -> NotificationDispatcher:
    return NotificationDispatcher(
        db_session,
        email_sender,
        dashboard_url=DASHBOARD_URL,
        email_timeout=2.0,
    )


@pytest.fixture()
def client(email_sender):
    """Return a test client whose outgoing mail is recorded."""

    from fastapi.testclient import TestClient

    from carelink.interfaces.api.dependencies import get_email_sender
    from main import create_app

    app = create_app()
    app.dependency_overrides[get_email_sender] = lambda: email_sender
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def auth_headers():
    def _auth_headers(user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {create_user_access_token(user)}"}

    return _auth_headers
