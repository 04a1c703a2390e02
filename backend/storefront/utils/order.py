from datetime import datetime, timezone
from storefront.extensions import db


_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def next_ordering(model, order_field="ordering"):
    """
    Ordering for a record appended after every existing one.

    max(existing) + 1, or 0 when the table is empty.
    """
    current_max = db.session.query(db.func.max(getattr(model, order_field))).scalar()
    return 0 if current_max is None else current_max + 1


def _as_aware(ts):
    if ts is None:
        return _EPOCH
    if ts.tzinfo is None:
        return ts.replace(tzinfo=timezone.utc)
    return ts


def section_sort_key(ordering, created_at):
    """
    Sort key for homepage sections: ordering ascending, creation time breaks ties.

    Duplicate orderings are allowed. Missing timestamps sort first.
    """
    return (ordering if ordering is not None else 0, _as_aware(created_at))
