# cashdesk/utils/helpers.py
import json
import uuid
from datetime import datetime, timezone

from fastapi import Request

from cashdesk.core.errors import ValidationError


def success_response(data=None, message="Operation successful"):
    return {"success": True, "data": data, "message": message}


def error_response(code, message, details=None):
    return {"success": False, "error": {"code": code, "message": message, "details": details}}


async def read_json_body(request: Request) -> dict:
    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        raise ValidationError("Request body must be valid JSON")
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def parse_uuid(value: str):
    """Return a UUID for a path id, or None when it is not one."""
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None


def generate_transaction_reference() -> str:
    return f"TXN-{uuid.uuid4().hex[:12].upper()}"


def mask_email(email: str) -> str:
    try:
        local, domain = email.split("@")
        if len(local) <= 2:
            local_masked = local[0] + "***"
        else:
            local_masked = local[0] + "***" + local[-1]
        return f"{local_masked}@{domain}"
    except (ValueError, IndexError):
        return "***"


def as_utc_iso(value: datetime) -> str:
    # SQLite hands back naive datetimes; every stored timestamp is UTC
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def like_pattern(term: str) -> str:
    """Substring LIKE pattern with the wildcards in ``term`` escaped by a backslash."""
    escaped = term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"
