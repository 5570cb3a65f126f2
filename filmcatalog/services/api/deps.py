# filmcatalog/services/api/deps.py
from __future__ import annotations
from functools import lru_cache
from typing import Generator, Optional
from fastapi import Depends
from sqlalchemy.orm import Session

from filmcatalog.database.core.main import SessionLocal
from filmcatalog.domain.ports.notification import MailPort
from filmcatalog.services.mail.mailer import build_mailer


@lru_cache(maxsize=1)
def get_mailer() -> Optional[MailPort]:
    """
    Provide the process-wide MailPort (background delivery) via DI.
    None when mail is disabled in settings.
    """
    return build_mailer()


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def transactional_session(db: Session = Depends(get_db)) -> Generator[Session, None, None]:
    """
    Request-scoped transaction. Any service using this session
    participates in the same transaction; service-level writes nest
    as SAVEPOINTs inside it.

    Usage in routers:
      def endpoint(session: Session = Depends(transactional_session)):
          ...
    """
    # Using the Session.begin() context ensures COMMIT on normal exit,
    # and ROLLBACK if an exception bubbles out.
    with db.begin():
        yield db
