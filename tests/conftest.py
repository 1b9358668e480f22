"""
Shared pytest fixtures: a recording stand-in for smtplib connections,
a fully populated MailConfig and a lightweight compiled layout.
"""

import smtplib

import pytest

from hubmail import email_templates
from hubmail.config import MailConfig


class FakeConnection:
    """Records what the dispatcher does with an SMTP connection"""

    def __init__(self, recorder, host, port, implicit_tls, context=None):
        self.recorder = recorder
        self.host = host
        self.port = port
        self.implicit_tls = implicit_tls
        self.context = context
        self.started_tls = False
        self.logged_in_as = None
        self.sent = []
        self.quit_called = False
        self.closed = False

    def ehlo(self, name=""):
        return 250, b"ok"

    def has_extn(self, opt):
        return opt.lower() in self.recorder.extensions

    def starttls(self, context=None):
        self.started_tls = True
        self.context = context
        return 220, b"ready"

    def login(self, user, password):
        if self.recorder.fail_login:
            raise smtplib.SMTPAuthenticationError(535, b"authentication failed")
        self.logged_in_as = (user, password)

    def send_message(self, msg):
        if self.recorder.fail_send:
            raise smtplib.SMTPRecipientsRefused({msg["To"]: (550, b"no such user")})
        self.sent.append(msg)

    def quit(self):
        self.quit_called = True
        if self.recorder.fail_quit:
            raise smtplib.SMTPServerDisconnected("Connection unexpectedly closed")
        self.closed = True

    def close(self):
        self.closed = True


class SmtpRecorder:
    def __init__(self):
        self.connections = []
        self.extensions = {"starttls", "auth"}
        self.refuse_connect = False
        self.fail_login = False
        self.fail_send = False
        self.fail_quit = False

    def _open(self, host, port, implicit_tls, context=None):
        if self.refuse_connect:
            raise ConnectionRefusedError(111, "Connection refused")
        connection = FakeConnection(self, host, port, implicit_tls, context=context)
        self.connections.append(connection)
        return connection

    def plain(self, host="", port=0, *args, **kwargs):
        return self._open(host, port, implicit_tls=False)

    def ssl(self, host="", port=0, *args, context=None, **kwargs):
        return self._open(host, port, implicit_tls=True, context=context)

    @property
    def last(self):
        return self.connections[-1]

    @property
    def sent(self):
        return [msg for connection in self.connections for msg in connection.sent]


@pytest.fixture
def smtp_server(monkeypatch):
    """Replace smtplib connections with recorders; nothing touches the network"""
    recorder = SmtpRecorder()
    monkeypatch.setattr(smtplib, "SMTP", recorder.plain)
    monkeypatch.setattr(smtplib, "SMTP_SSL", recorder.ssl)
    return recorder


@pytest.fixture(autouse=True)
def plain_layout(monkeypatch):
    """Compiled layout stub so tests do not depend on MJML output"""
    email_templates.get_compiled_layout.cache_clear()
    monkeypatch.setattr(
        email_templates,
        "compile_mjml_to_html",
        lambda mjml_content: f"<html><body>{email_templates.CONTENT_PLACEHOLDER}</body></html>",
    )
    yield
    email_templates.get_compiled_layout.cache_clear()


@pytest.fixture
def mail_config() -> MailConfig:
    return MailConfig(
        smtp_server="smtp.example.com",
        smtp_port=587,
        smtp_account="noreply@example.com",
        smtp_token="s3cret",
        smtp_from="",
        system_name="One Hub",
        server_address="https://hub.example.com",
        verification_valid_minutes=10,
        version="1.2.3",
    )
