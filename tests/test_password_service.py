"""
Unit tests for the password hasher.
"""

import pytest

from medtrack.services.password_service import PasswordHasher


@pytest.fixture
def hasher():
    return PasswordHasher("pbkdf2:sha256:1000")


def test_verify_accepts_own_hash(hasher):
    digest = hasher.hash("secret1")
    assert hasher.verify("secret1", digest)


def test_verify_rejects_other_password(hasher):
    digest = hasher.hash("other-password")
    assert not hasher.verify("secret1", digest)


def test_digest_is_salted_and_self_describing(hasher):
    a = hasher.hash("secret1")
    b = hasher.hash("secret1")
    assert a != b
    assert a.startswith("pbkdf2:sha256:1000$")
    assert "secret1" not in a


def test_verify_handles_missing_digest(hasher):
    assert not hasher.verify("secret1", "")
    assert not hasher.verify("secret1", None)


def test_bad_method_propagates():
    with pytest.raises(ValueError):
        PasswordHasher("nope").hash("secret1")
