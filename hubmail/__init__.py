"""hubmail - transactional email over SMTP"""

__version__ = "0.1.0"

from .email_service import (  # noqa: E402
    get_system_smtp,
    send_password_reset_email,
    send_quota_warning_email,
    send_verification_code_email,
)
from .exceptions import ConfigurationError, DeliveryError, MailError, TemplateError  # noqa: E402

__all__ = [
    "ConfigurationError",
    "DeliveryError",
    "MailError",
    "TemplateError",
    "get_system_smtp",
    "send_password_reset_email",
    "send_quota_warning_email",
    "send_verification_code_email",
]
