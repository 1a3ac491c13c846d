"""
Shared fixtures: in-memory SQLite database, user/post factories and a
FastAPI TestClient wired to the test session.
"""
import base64
import itertools
import os
import tempfile
from datetime import datetime, timedelta

# Settings are read at import time
os.environ["DB_URL"] = "sqlite://"
os.environ["STORAGE_TYPE"] = "local"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="glooba-uploads-")
os.environ["WEBHOOK_SECRET"] = "whsec_" + base64.b64encode(b"glooba-test-webhook-secret").decode()
os.environ["ADMIN_USER_IDS"] = "user_clerk_admin"
os.environ["AUTH_JWT_KEY"] = "test-secret"
os.environ["AUTH_JWT_ISS"] = ""

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from config.db import enable_sqlite_foreign_keys, get_db
from model import load_all_models
from model.base import Base
from model.social.models import Post
from model.user import User, UserCategory
from src.utils import make_session_token

load_all_models()

BASE_TIME = datetime(2025, 1, 1, 12, 0, 0)


# ===================================================================
# Database
# ===================================================================

@pytest.fixture(scope='function')
def engine():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    enable_sqlite_foreign_keys(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope='function')
def db_session(engine):
    Session = sessionmaker(bind=engine, expire_on_commit=False)
    session = Session()
    yield session
    session.close()


# ===================================================================
# Factories
# ===================================================================

@pytest.fixture
def make_user(db_session):
    counter = itertools.count(1)

    def _make(username=None, is_company=False, categories=(), **fields):
        n = next(counter)
        username = username or f"user{n}"
        fields.setdefault("name", username.title())
        fields.setdefault("created_at", BASE_TIME + timedelta(minutes=n))
        user = User(
            clerk_id=f"user_clerk_{username}",
            email=f"{username}@example.com",
            username=username,
            is_company=is_company,
            **fields,
        )
        for name in categories:
            user.category_links.append(UserCategory(name=name))
        db_session.add(user)
        db_session.commit()
        return user

    return _make


@pytest.fixture
def make_company(make_user):
    def _make(username=None, **fields):
        return make_user(username=username, is_company=True, **fields)

    return _make


@pytest.fixture
def make_post(db_session):
    def _make(author, content="Hello", minutes=0, image=None):
        created = BASE_TIME + timedelta(minutes=minutes)
        post = Post(author_id=author.id, content=content, image=image, created_at=created, updated_at=created)
        db_session.add(post)
        db_session.commit()
        return post

    return _make


# ===================================================================
# HTTP
# ===================================================================

@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {make_session_token(user.clerk_id)}"}

    return _headers


@pytest.fixture
def client(db_session):
    from fastapi.testclient import TestClient
    from src.app import app

    def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
