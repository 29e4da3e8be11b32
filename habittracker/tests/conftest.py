import pytest

from habittracker import create_app
from habittracker.core.auth.auth_service import register_user
from habittracker.core.auth.schemas import RegisterRequest
from habittracker.extensions import db


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def make_app(tmp_path):
    """Build testing apps backed by a local and a cloud SQLite file under tmp_path."""
    created = []

    def _make(**overrides):
        config = {
            "SQLALCHEMY_DATABASE_URI": f"sqlite:///{tmp_path / 'local.db'}",
            "CLOUD_DATABASE_URL": f"sqlite:///{tmp_path / 'cloud.db'}",
        }
        config.update(overrides)
        app = create_app("testing", overrides=config)
        created.append(app)
        return app

    yield _make

    for app in created:
        with app.app_context():
            db.session.remove()
            for engine in db.engines.values():
                engine.dispose()


@pytest.fixture()
def app(make_app):
    """Per-test app with its own pair of databases and a pushed app context."""
    app = make_app()
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.remove()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def user(app):
    """A registered user with a bearer token."""
    result = register_user(
        RegisterRequest(email="tester@example.com", password="secret123", name="Tester")
    )
    return {"user": result["user"], "user_id": result["user"].id, "token": result["token"]}


@pytest.fixture()
def auth_headers(user):
    return {"Authorization": f"Bearer {user['token']}"}
