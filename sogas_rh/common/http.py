# sogas_rh/common/http.py
from flask import jsonify


def ok(data=None, status=200, message=None, **extra):
    """Success response: flat JSON object, optional human message first."""
    payload = {}
    if message:
        payload["message"] = message
    if isinstance(data, dict):
        payload.update(data)
    elif data is not None:
        payload["data"] = data
    payload.update(extra)
    return jsonify(payload), status


def fail(message="Requête invalide.", status=400, code=None, detail=None):
    err = {"message": message}
    if code: err["code"] = code
    if detail: err["detail"] = detail
    return jsonify(err), status
