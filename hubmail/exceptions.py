"""
Mail errors
All failures are raised to the caller; nothing in this package retries.
"""

from typing import Optional


class MailError(Exception):
    """Base class for every error raised by hubmail"""


class ConfigurationError(MailError):
    """Required SMTP settings are missing or malformed"""


class TemplateError(MailError):
    """The email layout could not be compiled"""


class DeliveryError(MailError):
    """The SMTP server could not be reached, refused the login or rejected the message"""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
