"""Shared test infrastructure.

Provides:
- db_session: SQLite in-memory session with all tables created
- client: FastAPI TestClient wired to the same session
- make_user: factory for User rows in any verification state
- make_property: factory for Property rows
- auth_headers: bearer token headers for a user
"""

import os
import tempfile

# Settings are read at import time; point them at throwaway locations first
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MEDIA_ROOT", os.path.join(tempfile.mkdtemp(), "media"))

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from estatehub.core.database import Base, enable_sqlite_foreign_keys, get_db

# Import all model modules so their tables are registered with Base.metadata
import estatehub.models  # noqa: F401

from estatehub.main import app
from estatehub.models import (
    ApprovalStatus,
    EmailStatus,
    IdStatus,
    Property,
    User,
    UserRole,
)
from estatehub.utils.auth import create_access_token, get_password_hash

PASSWORD = "secret123"

# Hashing is slow on purpose; do it once for every factory-built user
_PASSWORD_HASH = get_password_hash(PASSWORD)


# ---------------------------------------------------------------------------
# Database session fixture
# ---------------------------------------------------------------------------

@pytest.fixture
def db_session():
    """SQLite in-memory session with all tables created.

    StaticPool keeps the single in-memory connection shared between the test
    body and the request handlers run by TestClient.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(bind=engine)
    session_factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    session = session_factory()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        # Not used as a context manager so the lifespan never touches the real DB
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------

@pytest.fixture
def make_user(db_session):
    """Factory for User rows. Defaults to a fully verified buyer."""
    counter = {"n": 0}

    def _make(
        role: UserRole = UserRole.BUYER,
        email: str = None,
        name: str = None,
        email_status: EmailStatus = EmailStatus.VERIFIED,
        id_status: IdStatus = None,
        approval_status: ApprovalStatus = ApprovalStatus.APPROVED,
        **kwargs,
    ) -> User:
        counter["n"] += 1
        n = counter["n"]
        if email is None:
            domain = "ds.gmail.com" if role == UserRole.ADMIN else "example.com"
            email = f"{role.value}.{n}@{domain}"
        if id_status is None:
            id_status = IdStatus.NOT_SUBMITTED if role == UserRole.BUYER else IdStatus.VERIFIED

        user = User(
            name=name or f"{role.value.title()} {n}",
            email=email,
            password_hash=_PASSWORD_HASH,
            role=role,
            email_status=email_status,
            id_status=id_status,
            approval_status=approval_status,
            **kwargs,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture
def make_property(db_session):
    """Factory for Property rows owned by ``owner``."""

    def _make(owner: User, **kwargs) -> Property:
        defaults = {
            "title": "Cozy flat",
            "location": "Tashkent, Chilonzor",
            "price": 500.0,
            "rooms": 2,
            "floor": 3,
            "is_verified": True,
            "is_archived": False,
        }
        defaults.update(kwargs)
        prop = Property(owner_id=owner.id, **defaults)
        db_session.add(prop)
        db_session.commit()
        db_session.refresh(prop)
        return prop

    return _make


@pytest.fixture
def auth_headers():
    def _headers(user: User) -> dict:
        token = create_access_token({"sub": str(user.id), "role": user.role.value})
        return {"Authorization": f"Bearer {token}"}

    return _headers
