from flask import request, abort
from dateutil.parser import parse, ParserError

from .order import _as_aware


def enforce_optimistic_lock(entity):
    """
    Enforces optimistic locking using the If-Unmodified-Since header.
    Raises 409 Conflict if the entity has been modified since.
    """
    client_ts = request.headers.get("If-Unmodified-Since")
    if not client_ts:
        return  # No optimistic lock requested

    try:
        client_ts = _as_aware(parse(client_ts))
    except (ParserError, OverflowError, ValueError):
        abort(400, description="Invalid If-Unmodified-Since header")

    server_ts = _as_aware(entity.updated_at)

    # HTTP dates carry whole seconds only
    if server_ts.replace(microsecond=0) > client_ts:
        abort(
            409,
            description="Conflict detected. Resource has been modified."
        )
