import os

# Must be in place before smartops.core.config is imported.
os.environ["ENVIRONMENT"] = "test"
os.environ["DATABASE_URL"] = "sqlite+pysqlite:///:memory:"
os.environ["JWT_SECRET_KEY"] = "test-secret-key"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["AUTO_APPLY_MIGRATIONS"] = "false"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from smartops import main
from smartops.core.database import Base, get_db
from smartops.core.metrics import request_metrics
from tests.helpers import auth_headers, register


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    yield factory
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(session_factory):
    db = session_factory()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client(session_factory, monkeypatch):
    monkeypatch.setattr(main, "_startup_tasks", lambda: None)

    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    main.app.dependency_overrides[get_db] = override_get_db
    request_metrics.reset()
    with TestClient(main.app) as test_client:
        yield test_client
    main.app.dependency_overrides.clear()


@pytest.fixture
def owner(client):
    data = register(client)
    return {"token": data["token"], "user": data["user"], "headers": auth_headers(data["token"])}


@pytest.fixture
def other_owner(client):
    data = register(client, email="b@y.com", businessName="Other Shop", subdomain="other-shop")
    return {"token": data["token"], "user": data["user"], "headers": auth_headers(data["token"])}
