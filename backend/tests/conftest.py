import pytest
from fastapi.testclient import TestClient
from sqlalchemy import StaticPool, create_engine
from sqlalchemy.orm import sessionmaker

import formcraft.models  # noqa: F401  (registers models with Base.metadata)
from formcraft.core.database import Base, get_db
from formcraft.main import app as fastapi_app
from formcraft.models import User
from formcraft.services.auth import create_access_token, hash_password

# In-memory SQLite, no PostgreSQL needed
TEST_DATABASE_URL = "sqlite://"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def setup_db():
    """Create all tables before each test, drop after."""
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    """Provide a test database session."""
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()


def _create_user(db, email: str) -> User:
    user = User(email=email, name="Test", password_hash=hash_password("strongpassword123"))
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


@pytest.fixture
def user(db) -> User:
    """The form creator used by most tests."""
    return _create_user(db, "creator@example.com")


@pytest.fixture
def other_user(db) -> User:
    return _create_user(db, "intruder@example.com")


@pytest.fixture
def auth_headers(user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(user)}"}


@pytest.fixture
def other_auth_headers(other_user) -> dict:
    return {"Authorization": f"Bearer {create_access_token(other_user)}"}


@pytest.fixture
def client(db):
    """TestClient with overridden DB dependency."""

    def _override_get_db():
        try:
            yield db
        finally:
            pass

    fastapi_app.dependency_overrides[get_db] = _override_get_db
    yield TestClient(fastapi_app)
    fastapi_app.dependency_overrides.clear()
