# --- medtrack/utils/api.py ---
import traceback

from flask import current_app, jsonify, request


def api_ok(message=None, **fields):
    body = {"success": True}
    if message is not None:
        body["message"] = message
    body.update(fields)
    return body


def api_error(message, errors=None, stack=None):
    body = {"success": False, "message": message}
    if errors:
        body["errors"] = errors
    if stack and expose_error_details():
        body["stack"] = stack
    return body


def expose_error_details() -> bool:
    return current_app.config.get("ENV") != "production"


# unified response helpers
def ok(message=None, status_code=200, **fields):
    resp = jsonify(api_ok(message, **fields))
    resp.status_code = status_code
    return resp


def err(message, status_code=400, errors=None, exc=None):
    stack = "".join(traceback.format_exception(exc)) if exc is not None else None
    resp = jsonify(api_error(message, errors=errors, stack=stack))
    resp.status_code = status_code
    return resp


def failure_response(failure, exc=None):
    """The one place a Failure kind becomes an HTTP status."""
    return err(failure.message, failure.status, errors=failure.errors, exc=exc)


def _to_int(v, default=None):
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def paginate(query, page, limit):
    """
    page  -> default 1
    limit -> default 10 (cap 100)
    """
    page = max(_to_int(page, 1), 1)
    limit = min(max(_to_int(limit, 10), 1), 100)
    items = query.paginate(page=page, per_page=limit, error_out=False)
    return {
        "count": len(items.items),
        "total": items.total,
        "totalPages": items.pages,
        "currentPage": page,
        "items": items.items,
    }


def json_body():
    """Request JSON as a dict; anything else (missing, list, scalar) is {}."""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}
