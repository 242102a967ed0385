import os
import shutil

# app.config가 import되기 전에 테스트 환경을 고정한다.
os.environ["DATABASE_URL"] = "sqlite:///./test_portal.db"
os.environ["REDIS_URL"] = ""
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["MEILI_ENABLED"] = "false"
os.environ["MAIL_ENABLED"] = "false"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["JWT_SECRET"] = "test-secret-key-that-is-long-enough-for-hs256"
os.environ["UPLOAD_DIR"] = "./test_uploads"

import fakeredis
import pytest
from fastapi.testclient import TestClient

from app.config import settings
from app.database import Base, SessionLocal, engine
from app.main import app
from app.models.author import Author
from app.models.taxonomy import Category, Tag
from app.models.user import User
from app.services.auth_service import hash_password
from app.utils import redis_client

PASSWORD = "Passw0rd1"

fake_redis = fakeredis.FakeRedis(decode_responses=True)


@pytest.fixture(autouse=True)
def setup_db():
    redis_client.set_redis(fake_redis)
    fake_redis.flushall()
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    shutil.rmtree(settings.UPLOAD_DIR, ignore_errors=True)


@pytest.fixture
def db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def seed_users(db):
    users = {
        "admin": User(email="admin@example.com", username="admin", name="Admin", role="ADMIN"),
        "moderator": User(email="mod@example.com", username="moderator", name="Moderator", role="MODERATOR"),
        "user": User(email="user@example.com", username="reader", name="Reader", role="USER"),
        "other": User(email="other@example.com", username="other", name="Other", role="USER"),
    }
    password_hash = hash_password(PASSWORD)
    for u in users.values():
        u.password_hash = password_hash
        db.add(u)
    db.commit()
    for u in users.values():
        db.refresh(u)
    return users


@pytest.fixture
def seed_author(db):
    author = Author(name="Jane Writer", slug="jane-writer", bio="Staff writer")
    db.add(author)
    db.commit()
    db.refresh(author)
    return author


@pytest.fixture
def seed_taxonomy(db):
    category = Category(name="Science", slug="science")
    tag = Tag(name="Space", slug="space")
    db.add_all([category, tag])
    db.commit()
    db.refresh(category)
    db.refresh(tag)
    return {"category": category, "tag": tag}


def login(client, username: str, password: str = PASSWORD) -> dict:
    resp = client.post("/api/v1/auth/login", json={"email_or_username": username, "password": password})
    assert resp.status_code == 200, resp.text
    return resp.json()


def get_token(client, username: str) -> str:
    return login(client, username)["access_token"]


def auth_headers(client, username: str) -> dict:
    return {"Authorization": f"Bearer {get_token(client, username)}"}


def create_article(client, headers: dict, author_id: int, title: str = "Hello World", **extra) -> dict:
    payload = {"title": title, "content": "Body text", "author_id": author_id}
    payload.update(extra)
    resp = client.post("/api/v1/articles", json=payload, headers=headers)
    assert resp.status_code == 201, resp.text
    return resp.json()
