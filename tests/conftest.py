import pytest

from medtrack import create_app
from medtrack.config import TestingConfig
from medtrack.extensions import db, services as _services


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return _services()


@pytest.fixture
def make_user(services):
    """Create a user straight through the credential store."""
    counter = {"n": 0}

    def _make(role="patient", active=True, password="secret1", name=None, email=None):
        counter["n"] += 1
        n = counter["n"]
        user, failure = services.store.create(
            name or f"User {role} {n}",
            email or f"{role}{n}@example.com",
            password,
            role,
        )
        assert failure is None
        if not active:
            services.store.set_active(user, False)
        return user

    return _make


@pytest.fixture
def bearer(services):
    def _bearer(user):
        return {"Authorization": f"Bearer {services.tokens.issue_access(user.id, user.role)}"}
    return _bearer
