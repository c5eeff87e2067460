import pytest
from fastapi.testclient import TestClient

from dataflow_api.config import AppConfig, get_config
from dataflow_api.db import SQLiteStorage, get_storage
from dataflow_api.main import app
from dataflow_api.services import RandomMetricsGenerator, UsersServiceError, get_realtime_generator, get_users_service


class FakeUsersService:
    """In-memory users service: one known code and one known token"""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.deleted = []
        self.users = {"token-abc": {"id": "u1", "email": "demo@dataflow.com"}}

    def _check(self):
        if self.fail:
            raise UsersServiceError("unreachable")

    def get_oauth_redirect_url(self, provider):
        self._check()
        return f"https://accounts.example.com/{provider}/auth"

    def exchange_code_for_session_token(self, code):
        self._check()
        return "token-abc"

    def get_current_user(self, session_token):
        self._check()
        return self.users.get(session_token)

    def delete_session(self, session_token):
        self._check()
        self.deleted.append(session_token)


@pytest.fixture
def storage(tmp_path):
    return SQLiteStorage(str(tmp_path / "dataflow.db"))


@pytest.fixture
def users_service():
    return FakeUsersService()


@pytest.fixture
def api_config(tmp_path):
    return AppConfig(db_path=str(tmp_path / "dataflow.db"), seed_demo_data=False)


@pytest.fixture
def client(storage, users_service, api_config):
    # Not entered as a context manager, so the lifespan seeder never runs
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_users_service] = lambda: users_service
    app.dependency_overrides[get_config] = lambda: api_config
    generator = RandomMetricsGenerator(seed=7)
    app.dependency_overrides[get_realtime_generator] = lambda: generator
    yield TestClient(app)
    app.dependency_overrides.clear()
