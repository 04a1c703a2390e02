from functools import wraps
from flask import current_app, jsonify
from flask_jwt_extended import get_jwt


def roles_required(*allowed_roles):
    """Reject the request unless the JWT ``role`` claim is one of ``allowed_roles``.

    Must sit below ``jwt_required()``. Works for sync and async views.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            claims = get_jwt()

            if claims.get("role") not in allowed_roles:
                return jsonify({"error": "Forbidden", "message": "Insufficient permissions"}), 403

            return current_app.ensure_sync(fn)(*args, **kwargs)
        return wrapper
    return decorator
