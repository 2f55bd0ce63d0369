import os
import tempfile
import uuid

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["DATA_SOURCE"] = "live"
os.environ["AUTH_JWT_SECRET"] = "test-secret"
os.environ["AUTH_JWT_ALGORITHM"] = "HS256"
os.environ["ADMIN_EMAILS"] = "admin@mindcare.test"
os.environ["CHAT_API_KEY"] = "test-key"
os.environ["AUDIO_STORAGE_DIR"] = tempfile.mkdtemp(prefix="mindcare-recordings-")

import pytest
from fastapi.testclient import TestClient
from jose import jwt
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.chat.providers.base import ChatProvider, ChatProviderError
from app.core.database import Base, get_db
from app.core.dependency import get_chat_provider
from app.journals.recorder import RecordingStore, get_recording_store
from app.moderation.db import seed_chat_rules
from main import app


class FakeChatProvider(ChatProvider):
    model_tag = "fake"

    def __init__(self, reply="I'm here for you.", fail=False):
        self.reply = reply
        self.fail = fail
        self.prompts = []

    def complete(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail:
            raise ChatProviderError("backend down")
        return self.reply


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def chat_provider():
    return FakeChatProvider()


@pytest.fixture
def recording_store(tmp_path):
    return RecordingStore(str(tmp_path / "recordings"), max_bytes=1024)


@pytest.fixture
def client(session_factory, chat_provider, recording_store):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    session = session_factory()
    seed_chat_rules(session)
    session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_chat_provider] = lambda: chat_provider
    app.dependency_overrides[get_recording_store] = lambda: recording_store
    yield TestClient(app)
    app.dependency_overrides.clear()


def make_token(user_id, email=None, user_type="user", secret="test-secret"):
    claims = {"sub": str(user_id), "user_metadata": {"user_type": user_type}}
    if email:
        claims["email"] = email
    return jwt.encode(claims, secret, algorithm="HS256")


def bearer(user_id, email=None, user_type="user"):
    return {"Authorization": f"Bearer {make_token(user_id, email, user_type)}"}


@pytest.fixture
def user_id():
    return uuid.uuid4()


@pytest.fixture
def user_headers(user_id):
    return bearer(user_id)


@pytest.fixture
def admin_headers():
    return bearer(uuid.uuid4(), email="admin@mindcare.test")
