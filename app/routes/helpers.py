"""Request parsing and response shaping shared by the API blueprints."""
from datetime import datetime
from typing import Optional

from flask import jsonify, request


def parse_date(date_str: str):
    """Parse a date string in YYYY-MM-DD format.

    Args:
        date_str: Date string to parse.

    Returns:
        date object if valid, None otherwise.
    """
    if not date_str:
        return None
    try:
        return datetime.strptime(date_str, '%Y-%m-%d').date()
    except ValueError:
        return None


def parse_bool(value: str, default: bool = False) -> bool:
    """Parse a boolean query parameter."""
    if value is None:
        return default
    return value.lower() in ('true', '1', 'yes')


def parse_int(value: Optional[str], default: int) -> int:
    """Parse an integer query parameter.

    Raises:
        ValueError: If the value is present but not an integer.
    """
    if value in (None, ''):
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"Invalid integer: {value}") from None


def date_range_args() -> tuple[str, str]:
    """Read the required ``start``/``end`` query parameters as ISO dates.

    Raises:
        ValueError: If either is missing or not YYYY-MM-DD.
    """
    start = parse_date(request.args.get('start'))
    end = parse_date(request.args.get('end'))
    if start is None or end is None:
        raise ValueError("start and end are required in YYYY-MM-DD format")
    return start.isoformat(), end.isoformat()


def json_body() -> dict:
    """Return the request JSON object.

    Raises:
        ValueError: If the body is missing or not a JSON object.
    """
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValueError('Request body must be JSON')
    return data


def list_response(rows: list):
    return jsonify({'data': rows, 'count': len(rows)})


def item_response(row: Optional[dict], name: str, status: int = 200):
    """Wrap one record, or 404 if it is missing."""
    if row is None:
        return jsonify({'error': f'{name} not found'}), 404
    return jsonify({'data': row}), status


def done_response(ok: bool, name: str, message: str):
    """Acknowledge a bool-returning operation, or 404 if nothing matched."""
    if not ok:
        return jsonify({'error': f'{name} not found'}), 404
    return jsonify({'message': message})
