import os

os.environ.setdefault("DATABASE_URL", "sqlite:///./test_mindbot.db")
os.environ.setdefault("APP_ENV", "test")
os.environ.setdefault("LINE_CHANNEL_SECRET", "test-line-secret")
os.environ.setdefault("LINE_CHANNEL_ACCESS_TOKEN", "test-line-token")
os.environ.setdefault("TOKEN_SECRET", "test-token-secret")

import pytest
from fastapi.testclient import TestClient
from mindbot.main import app
from mindbot.core.db import Base, engine, SessionLocal
from mindbot.api import deps
from mindbot.services.consultation import seed_psychologists

@pytest.fixture(autouse=True, scope="session")
def setup_db():
    # fresh db for tests
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    with SessionLocal() as db:
        seed_psychologists(db)
    yield
    Base.metadata.drop_all(bind=engine)

@pytest.fixture(autouse=True)
def reset_limiter():
    deps.limiter.store.clear()
    yield
    deps.limiter.store.clear()

@pytest.fixture()
def db():
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()

@pytest.fixture()
def client():
    return TestClient(app)
