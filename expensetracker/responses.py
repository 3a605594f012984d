from flask import jsonify


def success(data=None, message=None, status=200, **extra):
    """Build the ``{success, message?, data?}`` envelope used by every route."""
    body = {"success": True}
    if message:
        body["message"] = message
    if data is not None:
        body["data"] = data
    body.update(extra)
    return jsonify(body), status
