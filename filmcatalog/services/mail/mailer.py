# filmcatalog/services/mail/mailer.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from filmcatalog.common.concurrency.background import BackgroundPool, PoolStats
from filmcatalog.common.logging import get_logger
from filmcatalog.common.settings import MailConfig, get_settings
from filmcatalog.domain.ports.notification import MailPort

logger = get_logger(__name__)


@dataclass(frozen=True)
class MailMessage:
    subject: str
    body: str
    sender: str
    recipients: List[str] = field(default_factory=list)


class LoggingMailTransport:
    """Delivery adapter that writes the message to the log."""

    def __init__(self, cfg: Optional[MailConfig] = None) -> None:
        self.cfg = cfg or get_settings().mail

    def send(self, subject: str, body: str) -> None:
        msg = MailMessage(subject=subject, body=body, sender=self.cfg.sender, recipients=list(self.cfg.recipients))
        logger.info("mail: from=%s to=%s subject=%r", msg.sender, ",".join(msg.recipients), msg.subject)
        logger.debug("mail: body=%s", msg.body)


class BackgroundMailer:
    """
    MailPort that hands each message to a small pool and returns at once.
    Failures of the wrapped transport are logged by the pool and never reach
    the caller; a full queue drops the message.
    """

    def __init__(self, transport: MailPort, *, workers: int = 2, max_queue: Optional[int] = None) -> None:
        self.transport = transport
        self._pool = BackgroundPool(name="mail", workers=workers, max_pending=max_queue)

    def send(self, subject: str, body: str) -> None:
        if self._pool.submit(self.transport.send, subject, body) is None:
            logger.warning("mail: queue full, dropped %r", subject)

    def stats(self) -> PoolStats:
        return self._pool.stats()

    def flush(self, timeout: Optional[float] = None) -> bool:
        return self._pool.drain(timeout=timeout)

    def close(self, wait: bool = True) -> None:
        self._pool.shutdown(wait=wait)


def build_mailer(cfg: Optional[MailConfig] = None) -> Optional[BackgroundMailer]:
    cfg = cfg or get_settings().mail
    if not cfg.enabled:
        return None
    return BackgroundMailer(LoggingMailTransport(cfg), workers=cfg.workers, max_queue=cfg.max_queue)
