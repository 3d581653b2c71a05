"""
Application-level behavior: health check, error envelope, headers, CLI.
"""

from medtrack.config import TestingConfig
from medtrack import create_app
from medtrack.model import User
from medtrack.utils.api import failure_response
from medtrack.utils.errors import ErrorKind, Failure, internal


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.get_json()["status"] == "ok"


def test_unknown_route_uses_error_envelope(client):
    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"success": False, "message": "Not found - /api/nope"}


def test_security_headers(client):
    resp = client.get("/api/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "DENY"


def test_unhandled_error_includes_stack_outside_production(app, client):
    @app.get("/api/boom")
    def boom():
        raise RuntimeError("kaboom")

    resp = client.get("/api/boom")
    assert resp.status_code == 500
    body = resp.get_json()
    assert body["success"] is False
    assert body["message"] == "Internal Server Error"
    assert "kaboom" in body["stack"]


def test_unhandled_error_hides_stack_in_production():
    class ProductionConfig(TestingConfig):
        ENV = "production"

    app = create_app(ProductionConfig)

    @app.get("/api/boom")
    def boom():
        raise RuntimeError("kaboom")

    resp = app.test_client().get("/api/boom")
    assert resp.status_code == 500
    assert "stack" not in resp.get_json()


def test_create_admin_command(app):
    runner = app.test_cli_runner()
    result = runner.invoke(args=["create-admin", "--email", "Boss@Example.com", "--password", "secret1", "--name", "Boss"])
    assert "Admin created" in result.output
    user = User.query.filter_by(email="boss@example.com").first()
    assert user.role == "admin"

    again = runner.invoke(args=["create-admin", "--email", "boss@example.com", "--password", "secret1", "--name", "Boss"])
    assert "already exists" in again.output


def test_failure_kinds_map_to_statuses(app):
    expected = {
        ErrorKind.VALIDATION: 400,
        ErrorKind.UNAUTHENTICATED: 401,
        ErrorKind.TOKEN_EXPIRED: 401,
        ErrorKind.TOKEN_INVALID: 401,
        ErrorKind.FORBIDDEN: 403,
        ErrorKind.NOT_FOUND: 404,
        ErrorKind.INTERNAL: 500,
    }
    for kind, status in expected.items():
        resp = failure_response(Failure(kind, "nope"))
        assert resp.status_code == status
        assert resp.get_json() == {"success": False, "message": "nope"}


def test_internal_failure_carries_stack(app):
    try:
        raise ValueError("broken")
    except ValueError as e:
        resp = failure_response(internal(), exc=e)
    assert resp.status_code == 500
    assert resp.get_json()["message"] == "Internal Server Error"
    assert "broken" in resp.get_json()["stack"]
