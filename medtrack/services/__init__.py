from dataclasses import dataclass

from ..config import AuthConfig
from .password_service import PasswordHasher
from .session_service import SessionManager, TokenPair
from .token_service import TokenService, TokenFailure, TokenClaims
from .user_store import CredentialStore


@dataclass
class AuthServices:
    config: AuthConfig
    hasher: PasswordHasher
    tokens: TokenService
    store: CredentialStore
    sessions: SessionManager


def build_services(config: AuthConfig, db) -> AuthServices:
    hasher = PasswordHasher(config.password_method)
    tokens = TokenService(config)
    store = CredentialStore(db, hasher)
    return AuthServices(
        config=config,
        hasher=hasher,
        tokens=tokens,
        store=store,
        sessions=SessionManager(tokens, store),
    )


__all__ = [
    "AuthServices",
    "build_services",
    "PasswordHasher",
    "TokenService",
    "TokenFailure",
    "TokenClaims",
    "TokenPair",
    "CredentialStore",
    "SessionManager",
]
