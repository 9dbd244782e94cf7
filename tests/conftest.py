import pytest

from garden import create_app
from garden.extensions import db


def make_app(tmp_path, backend="memory", **overrides):
    config = {
        "TESTING": True,
        "STORE_BACKEND": backend,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "DATA_FILE": str(tmp_path / "data" / "plants.json"),
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "BCRYPT_LOG_ROUNDS": 4,
        "JWT_SECRET_KEY": "test-secret-key-that-is-long-enough-for-hs256",
        "OTEL_ENABLED": False,
        "TERMINAL_ENABLED": False,
        "LOG_LEVEL": "WARNING",
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture(params=["memory", "sql"])
def app(request, tmp_path):
    """App built once per store backend."""
    app = make_app(tmp_path, request.param)
    yield app
    if request.param == "sql":
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def memory_app(tmp_path):
    return make_app(tmp_path, "memory")


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def memory_client(memory_app):
    return memory_app.test_client()


@pytest.fixture
def new_plant(client):
    def create(**fields):
        payload = {"name": "Test Spinach"}
        payload.update(fields)
        res = client.post("/api/plants", json=payload)
        assert res.status_code == 201, res.get_json()
        return res.get_json()["data"]
    return create


@pytest.fixture
def auth_token(client):
    res = client.post("/api/auth/login", json={"username": "user", "password": "admin764"})
    return res.get_json()["token"]
