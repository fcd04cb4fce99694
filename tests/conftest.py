"""
Pytest configuration and shared fixtures
"""
import os
import random
import string
import tempfile
import uuid
from datetime import timedelta

import pytest

# Set test environment variables before whalewake reads its settings
TEST_TOKEN_KEY = "00112233445566778899aabbccddeeffffeeddccbbaa99887766554433221100"

os.environ["DATABASE_URL"] = (
    f"sqlite:///{os.path.join(tempfile.mkdtemp(), 'whalewake_test.db')}"
)
os.environ["TOKEN_SYMMETRIC_KEY"] = TEST_TOKEN_KEY
os.environ["ACCESS_TOKEN_EXPIRE_MINUTES"] = "15"
os.environ["ENV"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"

from whalewake.db.params import (  # noqa: E402
    CreateUserParams,
    CreateUserProfileParams,
    CreateUserRoleParams,
)
from whalewake.db.init_db import init_db  # noqa: E402
from whalewake.db.session import create_db_engine, create_session_factory  # noqa: E402
from whalewake.db.store import Store  # noqa: E402
from whalewake.models.user import STANDARD_USER_ROLE  # noqa: E402
from whalewake.tokens.jwe_maker import JWETokenMaker  # noqa: E402


def random_string(n: int = 6) -> str:
    return "".join(random.choice(string.ascii_lowercase) for _ in range(n))


def random_email() -> str:
    return f"{random_string(6)}@{random_string(4)}.com"


def random_user_params() -> CreateUserParams:
    return CreateUserParams(
        username=random_string(8),
        email=random_email(),
        password=random_string(16),
    )


def random_profile_params() -> CreateUserProfileParams:
    return CreateUserProfileParams(
        first_name=random_string(6),
        last_name=random_string(6),
        business_name=f"{random_string(5)} llc",
        street_address=f"{random.randint(1, 999)} {random_string(6)} st",
        city=random_string(6),
        state=random.choice(["CA", "NY", "TX"]),
        zip=str(random.randint(10000, 99999)),
        country_code=random.choice(["US", "CA", "MX"]),
    )


def create_random_user(store: Store, role_id: int = STANDARD_USER_ROLE):
    return store.create_user_with_profile_and_role(
        random_user_params(),
        random_profile_params(),
        CreateUserRoleParams(role_id=role_id),
    )


def auth_header(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def db_engine(tmp_path):
    engine = create_db_engine(f"sqlite:///{tmp_path / 'store.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(db_engine):
    return create_session_factory(db_engine)


@pytest.fixture
def store(session_factory):
    return Store(session_factory)


@pytest.fixture
def token_maker():
    return JWETokenMaker(bytes.fromhex(TEST_TOKEN_KEY))


@pytest.fixture
def client():
    from fastapi.testclient import TestClient

    from whalewake.db.base import Base
    from whalewake.db.session import engine
    from whalewake.main import app

    Base.metadata.drop_all(bind=engine)

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def app_store(client):
    return client.app.state.store


@pytest.fixture
def app_token_maker(client):
    return client.app.state.token_maker


@pytest.fixture
def make_token(app_token_maker):
    def _make(user_id: uuid.UUID, role_id: int = STANDARD_USER_ROLE) -> str:
        return app_token_maker.create_token(user_id, role_id, timedelta(minutes=5))
    return _make
