from flask import request

from ..errors import ValidationError


def json_body():
    """Request payload from JSON or, failing that, form fields."""
    data = request.get_json(silent=True)
    if data is None:
        data = request.form.to_dict()
    if not isinstance(data, dict):
        raise ValidationError("Expected a JSON object")
    return data


def coerce_amount(data, field):
    """Convert a string amount in ``data[field]`` to float in place."""
    raw = data.get(field)
    if isinstance(raw, str):
        try:
            data[field] = float(raw.strip())
        except ValueError:
            raise ValidationError(f"Invalid {field.replace('_', ' ')}")
    return data
