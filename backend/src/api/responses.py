"""
Jersey Catalog API - Response Envelope
Every endpoint answers with the same JSON shape:

    {"success": bool, "data": ..., "message": str|null, "error": str|dict|null}
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional

from flask import jsonify


def envelope(data: Any = None,
             status: int = 200,
             message: Optional[str] = None,
             error: Any = None,
             success: Optional[bool] = None):
    """
    Build a Flask (response, status) tuple in the standard envelope.

    success defaults to True for 2xx statuses.
    """
    if success is None:
        success = 200 <= status < 300
    return jsonify({
        "success": success,
        "data": to_json_safe(data),
        "message": message,
        "error": error,
    }), status


def error_response(status: int, error: Any, message: Optional[str] = None):
    return envelope(status=status, error=error, message=message, success=False)


def hide_fields(record: Optional[Dict[str, Any]], hidden: Iterable[str]) -> Optional[Dict[str, Any]]:
    """Copy of record without the hidden columns."""
    if record is None:
        return None
    hidden = set(hidden)
    return {key: value for key, value in record.items() if key not in hidden}


def hide_fields_all(records: Iterable[Dict[str, Any]], hidden: Iterable[str]) -> List[Dict[str, Any]]:
    hidden = tuple(hidden)
    return [hide_fields(record, hidden) for record in records]


def to_json_safe(value: Any) -> Any:
    """Convert DB scalars (Decimal, date, datetime, bytes) for jsonify."""
    if isinstance(value, dict):
        return {key: to_json_safe(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_safe(item) for item in value]
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value
