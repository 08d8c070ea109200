import os
import tempfile

# Settings are read at import time; point them at throwaway resources first.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("DB_INIT_MODE", "off")
os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "newsroom-tests", "app.log"))

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from newsroom.core.database import Base, get_db
from newsroom.schemas.user import UserRegister
from newsroom.services.user_service import user_service


def _make_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)
    return engine, SessionLocal()


@pytest.fixture()
def db():
    engine, session = _make_session()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture()
def make_user(db):
    def _make(username="reporter", email="reporter@example.com", password="secret123", full_name="Rina Reporter"):
        return user_service.create_user(
            db,
            UserRegister(
                username=username,
                email=email,
                full_name=full_name,
                password=password,
                password_confirm=password,
            ),
        )
    return _make


@pytest.fixture()
def client(db):
    from fastapi.testclient import TestClient
    from newsroom.main import app
    from newsroom.services.login_throttle import login_throttle

    def _override_get_db():
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    login_throttle.reset()
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        login_throttle.reset()
