"""Transaction scope for multi-statement service operations."""

from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Commit every write made inside the block, or none of them.

    Any exception raised in the block rolls the session back and is
    re-raised unchanged, so domain errors still reach the caller.
    """
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
