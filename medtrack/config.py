import os
import re
from dataclasses import dataclass
from datetime import timedelta

_DURATION_RE = re.compile(r"^\s*(\d+)\s*([smhd]?)\s*$")
_UNITS = {"": "seconds", "s": "seconds", "m": "minutes", "h": "hours", "d": "days"}


def parse_duration(value) -> timedelta:
    """'15m' -> 15 minutes, '7d' -> 7 days, '30' -> 30 seconds."""
    if isinstance(value, timedelta):
        return value
    if isinstance(value, int):
        return timedelta(seconds=value)
    match = _DURATION_RE.match(str(value or ""))
    if not match:
        raise ValueError(f"Invalid duration: {value!r}")
    amount, unit = match.groups()
    return timedelta(**{_UNITS[unit]: int(amount)})


def _env_flag(name, default=False):
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    JSON_SORT_KEYS = False
    ENV = os.getenv("APP_ENV") or os.getenv("FLASK_ENV", "development")

    JWT_SECRET_KEY = os.environ.get("JWT_SECRET_KEY", "dev-access-secret-change-me")
    JWT_REFRESH_SECRET_KEY = os.environ.get("JWT_REFRESH_SECRET_KEY", "dev-refresh-secret-change-me")
    JWT_ALGORITHM = os.environ.get("JWT_ALGORITHM", "HS256")
    JWT_ACCESS_EXPIRY = os.environ.get("JWT_ACCESS_EXPIRY", "15m")
    JWT_REFRESH_EXPIRY = os.environ.get("JWT_REFRESH_EXPIRY", "7d")

    PASSWORD_HASH_METHOD = os.environ.get("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000")

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_JSON = _env_flag("LOG_JSON", default=True)

    @staticmethod
    def init_app(app):
        if not app.config.get("SQLALCHEMY_DATABASE_URI"):
            os.makedirs(app.instance_path, exist_ok=True)
            app.config["SQLALCHEMY_DATABASE_URI"] = f"sqlite:///{os.path.join(app.instance_path, 'medtrack.db')}"


class TestingConfig(Config):
    TESTING = True
    ENV = "testing"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    JWT_SECRET_KEY = "test-access-secret-0123456789abcdef0123456789"
    JWT_REFRESH_SECRET_KEY = "test-refresh-secret-0123456789abcdef012345678"
    JWT_ACCESS_EXPIRY = "15m"
    JWT_REFRESH_EXPIRY = "7d"
    PASSWORD_HASH_METHOD = "pbkdf2:sha256:1000"
    LOG_LEVEL = "WARNING"
    LOG_JSON = False


@dataclass(frozen=True)
class AuthConfig:
    """Secrets and lifetimes handed to the token service and credential store.

    Access and refresh tokens are signed with different secrets so a leak of
    one cannot be used to forge the other.
    """
    access_secret: str
    refresh_secret: str
    access_ttl: timedelta = timedelta(minutes=15)
    refresh_ttl: timedelta = timedelta(days=7)
    algorithm: str = "HS256"
    password_method: str = "pbkdf2:sha256:600000"

    def __post_init__(self):
        if not self.access_secret or not self.refresh_secret:
            raise ValueError("JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must both be set")
        if self.access_secret == self.refresh_secret:
            raise ValueError("JWT_SECRET_KEY and JWT_REFRESH_SECRET_KEY must differ")

    @classmethod
    def from_mapping(cls, cfg) -> "AuthConfig":
        return cls(
            access_secret=cfg.get("JWT_SECRET_KEY") or "",
            refresh_secret=cfg.get("JWT_REFRESH_SECRET_KEY") or "",
            access_ttl=parse_duration(cfg.get("JWT_ACCESS_EXPIRY", "15m")),
            refresh_ttl=parse_duration(cfg.get("JWT_REFRESH_EXPIRY", "7d")),
            algorithm=cfg.get("JWT_ALGORITHM", "HS256"),
            password_method=cfg.get("PASSWORD_HASH_METHOD", "pbkdf2:sha256:600000"),
        )
