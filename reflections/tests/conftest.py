import pytest

from reflections import create_app
from reflections.extensions import db

STRONG_PASSWORD = "Str0ng!Pass"


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")
    config.addinivalue_line("markers", "slow: Slow running tests")


def _make_app(tmp_path, **overrides):
    settings = {"DATA_DIR": str(tmp_path / "data")}
    settings.update(overrides)
    return create_app("testing", overrides=settings)


@pytest.fixture()
def app(tmp_path):
    """
    Per-test app on a fresh in-memory database with the relational backend.

    The app context stays pushed for the whole test so services can be
    called directly.
    """
    app = _make_app(tmp_path)
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture(params=["database", "file"])
def backend_app(request, tmp_path):
    """The same app built once per storage backend."""
    app = _make_app(tmp_path, STORAGE_BACKEND=request.param)
    ctx = app.app_context()
    ctx.push()
    try:
        yield app
    finally:
        db.session.remove()
        db.drop_all()
        ctx.pop()


@pytest.fixture()
def storage(backend_app):
    return backend_app.extensions["storage"]


@pytest.fixture()
def identity(app):
    return app.extensions["storage"].identity


def _register(identity, username, password=STRONG_PASSWORD):
    result = identity.register(username, f"{username}@example.com", username.title(), password)
    assert result.success, result.error
    return identity.resolve_token(result.data)


@pytest.fixture()
def make_user(storage):
    """Register a user on the backend under test and return the ``User`` row."""

    def _make(username, password=STRONG_PASSWORD):
        return _register(storage.identity, username, password)

    return _make


@pytest.fixture()
def user(make_user):
    return make_user("alice")


@pytest.fixture()
def other_user(make_user):
    return make_user("bob")
