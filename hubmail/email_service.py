"""
Transactional Email Service
Password reset, verification code and quota warning emails sent with the
system SMTP account
"""

from typing import Optional

from .config import MailConfig, get_mail_config
from .email_templates import (
    password_reset_template,
    quota_warning_template,
    verification_code_template,
)
from .exceptions import ConfigurationError
from .smtp import SmtpSettings, new_smtp, render


def get_system_smtp(config: Optional[MailConfig] = None) -> SmtpSettings:
    """Build SMTP settings from the system configuration.

    Raises ConfigurationError when server, port, account or token is unset.
    """
    config = config or get_mail_config()
    if not (config.smtp_server and config.smtp_port and config.smtp_account and config.smtp_token):
        raise ConfigurationError("SMTP is not configured")

    return new_smtp(
        config.smtp_server,
        config.smtp_port,
        config.smtp_account,
        config.smtp_token,
        config.smtp_from,
    )


def _render(config: MailConfig, settings: SmtpSettings, to: str, subject: str, content: str) -> None:
    render(
        settings,
        to,
        subject,
        content,
        system_name=config.system_name,
        user_agent=config.user_agent,
    )


def send_password_reset_email(
    user_name: str, email: str, link: str, config: Optional[MailConfig] = None
) -> None:
    """Send the password reset link"""
    config = config or get_mail_config()
    settings = get_system_smtp(config)

    subject = f"{config.system_name} password reset"
    content = password_reset_template(user_name, link, config.verification_valid_minutes)
    _render(config, settings, email, subject, content)


def send_verification_code_email(email: str, code: str, config: Optional[MailConfig] = None) -> None:
    """Send an email verification code"""
    config = config or get_mail_config()
    settings = get_system_smtp(config)

    subject = f"{config.system_name} email verification"
    content = verification_code_template(code, config.verification_valid_minutes)
    _render(config, settings, email, subject, content)


def send_quota_warning_email(
    user_name: str,
    email: str,
    quota: int,
    no_more_quota: bool = False,
    config: Optional[MailConfig] = None,
) -> None:
    """Warn a user that their quota is low, or already used up"""
    config = config or get_mail_config()
    settings = get_system_smtp(config)

    subject = "Your quota has been used up" if no_more_quota else "Your quota is running low"
    top_up_link = config.top_up_link
    content = quota_warning_template(user_name, subject, quota, top_up_link)
    _render(config, settings, email, subject, content)
