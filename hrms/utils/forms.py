import json

from flask import jsonify, request
from flask_wtf import FlaskForm
from werkzeug.datastructures import MultiDict


class ApiForm(FlaskForm):
    """FlaskForm fed from JSON bodies; CSRF is handled by the session cookie policy."""

    class Meta:
        csrf = False


def request_formdata():
    """Flatten a JSON body into form data so WTForms validators apply unchanged.

    Lists become comma-separated strings, objects become JSON text and
    ``null`` becomes an empty value (so Optional() fields read as cleared).
    """
    if not request.is_json:
        return request.form
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        return MultiDict()
    items = []
    for key, value in payload.items():
        if value is None:
            items.append((key, ""))
        elif isinstance(value, bool):
            items.append((key, "y" if value else "false"))
        elif isinstance(value, (list, tuple)):
            items.append((key, ",".join(str(v) for v in value)))
        elif isinstance(value, dict):
            items.append((key, json.dumps(value)))
        else:
            items.append((key, str(value)))
    return MultiDict(items)


def split_csv(value):
    if value is None or value == "":
        return []
    if isinstance(value, (list, tuple)):
        return [str(v).strip() for v in value if str(v).strip()]
    s = str(value).strip()
    if s.startswith("["):
        try:
            parsed = json.loads(s)
        except ValueError:
            parsed = None
        if isinstance(parsed, list):
            return [str(v).strip() for v in parsed if str(v).strip()]
    return [p.strip() for p in s.split(",") if p.strip()]


def parse_json_field(value):
    if value is None or value == "":
        return None
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except ValueError:
        return None


def validation_error(form):
    return jsonify({"error": "validation_failed", "details": form.errors}), 422
