"""Email senders for claim status-change notifications."""

import smtplib
import threading
from email.message import EmailMessage
from typing import Any, Protocol

from warranty_claims.config.settings import get_email_backend, get_smtp_config
from warranty_claims.observability import get_logger
from warranty_claims.utils.errors import DispatchError

logger = get_logger(__name__)


class EmailSender(Protocol):
    """Anything that can deliver a status update. Raises (or returns False) on failure."""

    def send(self, recipient: str, order_number: str, status: str) -> Any:
        ...


def build_status_message(
    from_address: str,
    recipient: str,
    order_number: str,
    status: str,
) -> EmailMessage:
    """Plain-text status update email for one claim."""
    msg = EmailMessage()
    msg["Subject"] = f"Warranty claim {order_number}: status updated"
    msg["From"] = from_address
    msg["To"] = recipient
    msg.set_content(
        "Hello,\n\n"
        f"The status of your warranty claim for order {order_number} is now: {status}.\n\n"
        "You can check your claim at any time with your order number and email address.\n"
    )
    return msg


class SmtpEmailSender:
    """Sends status updates over SMTP. One connection per message."""

    def __init__(
        self,
        host: str,
        port: int = 587,
        username: str | None = None,
        password: str | None = None,
        use_tls: bool = True,
        from_address: str = "no-reply@warranty.local",
        timeout: float = 10,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.use_tls = use_tls
        self.from_address = from_address
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "SmtpEmailSender":
        return cls(**get_smtp_config())

    def send(self, recipient: str, order_number: str, status: str) -> None:
        msg = build_status_message(self.from_address, recipient, order_number, status)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
                if self.use_tls:
                    smtp.starttls()
                if self.username:
                    smtp.login(self.username, self.password or "")
                smtp.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            raise DispatchError(f"SMTP delivery to {self.host}:{self.port} failed: {e}") from e


class LoggingEmailSender:
    """Development sender: logs each message instead of delivering it and keeps a copy."""

    def __init__(self, from_address: str = "no-reply@warranty.local"):
        self.from_address = from_address
        self.sent: list[EmailMessage] = []
        self._lock = threading.Lock()

    def send(self, recipient: str, order_number: str, status: str) -> None:
        msg = build_status_message(self.from_address, recipient, order_number, status)
        with self._lock:
            self.sent.append(msg)
        logger.info("Email not delivered (log backend): %s", msg["Subject"])


def build_email_sender(backend: str | None = None) -> EmailSender:
    """Construct the sender named by EMAIL_BACKEND ('smtp' or 'log')."""
    backend = (backend or get_email_backend()).lower()
    if backend == "smtp":
        return SmtpEmailSender.from_env()
    if backend == "log":
        return LoggingEmailSender(from_address=get_smtp_config()["from_address"])
    raise ValueError(f"Unknown email backend: {backend}")
