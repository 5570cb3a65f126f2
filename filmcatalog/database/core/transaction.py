# filmcatalog/database/core/transaction.py
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.orm import Session


@contextmanager
def transactional(db: Session) -> Iterator[Session]:
    """
    Run the block atomically. Opens a transaction, or a SAVEPOINT when the
    session already has one (request-scoped sessions, tests), so a failed
    block rolls back only its own statements.
    """
    if db.in_transaction():
        with db.begin_nested():
            yield db
    else:
        with db.begin():
            yield db
