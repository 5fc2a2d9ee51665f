import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend import app
from prepdeck.database import get_db, init_db
from prepdeck.models.user import User
from prepdeck.services import navigator
from prepdeck.services.auth import create_access_token
from prepdeck.services.cv_parser import CVParser, get_cv_parser


@pytest.fixture
def db_session():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    TestingSession = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSession()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def user(db_session):
    user = User(email="jane@example.com", username="jane")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def other_user(db_session):
    user = User(email="sam@example.com", username="sam")
    db_session.add(user)
    db_session.commit()
    db_session.refresh(user)
    return user


@pytest.fixture
def auth_headers(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture
def cv_parser():
    """Heuristic parser by default; tests swap in a fake Gemini client when needed."""
    return CVParser(client=None)


@pytest.fixture
def client(db_session, cv_parser):
    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_cv_parser] = lambda: cv_parser
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
        navigator._practice_sessions.clear()
