"""
Credential store: email uniqueness, hashing on write, credential checks.
"""

import pytest

from medtrack.model import User
from medtrack.utils.errors import ErrorKind


def test_create_normalizes_email_and_hashes(services):
    user, failure = services.store.create("Ann Lee", "  ANN@X.com ", "secret1")
    assert failure is None
    assert user.email == "ann@x.com"
    assert user.role == "patient"
    assert user.is_active is True
    assert user.refresh_token is None
    assert user.password_hash != "secret1"
    assert services.hasher.verify("secret1", user.password_hash)


def test_email_is_unique(services):
    services.store.create("Ann Lee", "ann@x.com", "secret1")
    user, failure = services.store.create("Other Ann", "Ann@X.com", "secret2")
    assert user is None
    assert failure.kind is ErrorKind.VALIDATION
    assert User.query.count() == 1


def test_unknown_role_rejected(services):
    user, failure = services.store.create("Ann Lee", "ann@x.com", "secret1", role="root")
    assert user is None and failure is not None


def test_hash_failure_persists_nothing(services, monkeypatch):
    def broken(plaintext):
        raise RuntimeError("no entropy")

    monkeypatch.setattr(services.hasher, "hash", broken)
    with pytest.raises(RuntimeError):
        services.store.create("Ann Lee", "ann@x.com", "secret1")
    assert User.query.count() == 0


def test_authenticate(services, make_user):
    user = make_user(email="ann@x.com", password="secret1")
    assert services.store.authenticate("ANN@x.com", "secret1") is user
    assert services.store.authenticate("ann@x.com", "wrong") is None
    assert services.store.authenticate("nobody@x.com", "secret1") is None


def test_set_password_rehashes(services, make_user):
    user = make_user(password="secret1")
    old = user.password_hash
    services.store.set_password(user, "secret2")
    assert user.password_hash != old
    assert services.store.check_password(user, "secret2")
    assert not services.store.check_password(user, "secret1")
