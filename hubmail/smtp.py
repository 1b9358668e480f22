"""
SMTP dispatcher
Builds HTML messages and hands them to smtplib, one connection per call
"""

import logging
import smtplib
import ssl
import uuid
from dataclasses import dataclass
from email.message import EmailMessage
from email.utils import parseaddr
from typing import Iterable

from .email_templates import render_layout
from .exceptions import ConfigurationError, DeliveryError

logger = logging.getLogger(__name__)

IMPLICIT_TLS_PORT = 465


@dataclass(frozen=True)
class SmtpSettings:
    host: str
    port: int
    username: str
    password: str
    from_address: str

    @property
    def implicit_tls(self) -> bool:
        return self.port == IMPLICIT_TLS_PORT


def new_smtp(host: str, port: int, username: str, password: str, from_address: str = "") -> SmtpSettings:
    """Build SMTP settings; a blank from address falls back to the username"""
    if not from_address:
        from_address = username
    return SmtpSettings(
        host=host,
        port=port,
        username=username,
        password=password,
        from_address=from_address,
    )


def get_references(from_address: str) -> str:
    """Synthetic References header so mail clients group our messages into one thread"""
    local, sep, domain = parseaddr(from_address)[1].rpartition("@")
    if not sep or not local or not domain:
        raise ConfigurationError(f"Invalid from address: {from_address!r}")
    return f"<{local}.{uuid.uuid4()}@{domain}>"


def build_message(
    settings: SmtpSettings,
    to: str,
    subject: str,
    body: str,
    user_agent: str,
) -> EmailMessage:
    message = EmailMessage()
    message["From"] = settings.from_address
    message["To"] = to
    message["Subject"] = subject
    message["References"] = get_references(settings.from_address)
    message["User-Agent"] = user_agent
    message.set_content(body, subtype="html")
    return message


def _connect(settings: SmtpSettings) -> smtplib.SMTP:
    """Open a connection, picking the TLS mode from the port.

    465 speaks TLS from the first byte. Every other port starts in plaintext
    and upgrades with STARTTLS whenever the server offers it.
    """
    context = ssl.create_default_context()
    if settings.implicit_tls:
        return smtplib.SMTP_SSL(settings.host, settings.port, context=context)

    server = smtplib.SMTP(settings.host, settings.port)
    try:
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls(context=context)
            server.ehlo()
    except (smtplib.SMTPException, OSError):
        server.close()
        raise
    return server


def _close(server: smtplib.SMTP) -> None:
    """End the session; messages are already accepted, so QUIT failures are not delivery failures"""
    try:
        server.quit()
    except (smtplib.SMTPException, OSError) as e:
        logger.warning(f"SMTP QUIT failed, closing socket: {e}")
        server.close()


def send_messages(settings: SmtpSettings, messages: Iterable[EmailMessage]) -> None:
    """Deliver prebuilt messages over a single connection"""
    messages = list(messages)
    server = None
    try:
        server = _connect(settings)
        server.login(settings.username, settings.password)
        for message in messages:
            server.send_message(message)
    except (smtplib.SMTPException, OSError) as e:
        if server is not None:
            server.close()
        logger.error(f"❌ SMTP send via {settings.host}:{settings.port} failed: {e}")
        raise DeliveryError(f"Failed to send email: {e}", cause=e) from e

    _close(server)
    logger.info(f"✅ Sent {len(messages)} email(s) via {settings.host}:{settings.port}")


def send(settings: SmtpSettings, to: str, subject: str, body: str, user_agent: str) -> None:
    """Send one HTML email. Raises DeliveryError on any transport failure."""
    message = build_message(settings, to, subject, body, user_agent)
    send_messages(settings, [message])


def render(
    settings: SmtpSettings,
    to: str,
    subject: str,
    content: str,
    system_name: str,
    user_agent: str,
) -> None:
    """Wrap a content fragment in the outer layout, then send it"""
    body = render_layout(content, system_name)
    send(settings, to, subject, body, user_agent)
