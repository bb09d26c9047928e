import pytest

import routes.upload
from app import create_app
from config import ServerConfig


@pytest.fixture
def root(tmp_path):
    d = tmp_path / "store"
    d.mkdir()
    return d


@pytest.fixture
def make_client(root, monkeypatch):
    """Build a test client; keyword arguments override ServerConfig fields."""
    monkeypatch.setattr(routes.upload, "list_local_ipv4_addresses", lambda: ["192.168.1.10"])

    def _make(**overrides):
        overrides.setdefault("port", 9000)
        overrides.setdefault("root", root)
        app = create_app(ServerConfig(**overrides))
        app.config.update(TESTING=True)
        return app.test_client()

    return _make


@pytest.fixture
def client(make_client):
    return make_client()
