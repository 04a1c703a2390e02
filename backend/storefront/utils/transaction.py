from contextlib import contextmanager
from storefront.extensions import db


@contextmanager
def transactional():
    """
    One unit of work on the shared session.

    Commits when the block exits normally; any exception, a failed commit
    included, rolls the session back and propagates.
    """
    session = db.session
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
