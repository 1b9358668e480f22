import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from . import __version__

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _int_env(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, default))
    except (TypeError, ValueError):
        return default


# SMTP Configuration
SMTP_SERVER = os.getenv("SMTP_SERVER", "")
SMTP_PORT = _int_env("SMTP_PORT", 0)
SMTP_ACCOUNT = os.getenv("SMTP_ACCOUNT", "")
SMTP_TOKEN = os.getenv("SMTP_TOKEN", "")
# Optional display "from" address, falls back to SMTP_ACCOUNT when blank
SMTP_FROM = os.getenv("SMTP_FROM", "")

# Branding and links
SYSTEM_NAME = os.getenv("SYSTEM_NAME", "One Hub")
SERVER_ADDRESS = os.getenv("SERVER_ADDRESS", "http://localhost:3000").rstrip("/")
APP_VERSION = os.getenv("APP_VERSION", __version__)
# Written into User-Agent after the version, blank to omit
PROJECT_URL = os.getenv("PROJECT_URL", "https://github.com/MartialBE/one-hub")

# Verification codes and reset links share the same validity window
VERIFICATION_VALID_MINUTES = _int_env("VERIFICATION_VALID_MINUTES", 10)


@dataclass(frozen=True)
class MailConfig:
    """Snapshot of the settings the mail senders read at call time"""

    smtp_server: str = ""
    smtp_port: int = 0
    smtp_account: str = ""
    smtp_token: str = ""
    smtp_from: str = ""
    system_name: str = "One Hub"
    server_address: str = "http://localhost:3000"
    verification_valid_minutes: int = 10
    version: str = __version__
    project_url: str = "https://github.com/MartialBE/one-hub"

    @property
    def user_agent(self) -> str:
        agent = f"{self.system_name} {self.version}"
        if self.project_url:
            agent = f"{agent} // {self.project_url}"
        return agent

    @property
    def top_up_link(self) -> str:
        return f"{self.server_address.rstrip('/')}/topup"

    @classmethod
    def from_env(cls) -> "MailConfig":
        """Re-read the environment instead of the values captured at import"""
        return cls(
            smtp_server=os.getenv("SMTP_SERVER", ""),
            smtp_port=_int_env("SMTP_PORT", 0),
            smtp_account=os.getenv("SMTP_ACCOUNT", ""),
            smtp_token=os.getenv("SMTP_TOKEN", ""),
            smtp_from=os.getenv("SMTP_FROM", ""),
            system_name=os.getenv("SYSTEM_NAME", "One Hub"),
            server_address=os.getenv("SERVER_ADDRESS", "http://localhost:3000").rstrip("/"),
            verification_valid_minutes=_int_env("VERIFICATION_VALID_MINUTES", 10),
            version=os.getenv("APP_VERSION", __version__),
            project_url=os.getenv("PROJECT_URL", "https://github.com/MartialBE/one-hub"),
        )


def get_mail_config() -> MailConfig:
    return MailConfig(
        smtp_server=SMTP_SERVER,
        smtp_port=SMTP_PORT,
        smtp_account=SMTP_ACCOUNT,
        smtp_token=SMTP_TOKEN,
        smtp_from=SMTP_FROM,
        system_name=SYSTEM_NAME,
        server_address=SERVER_ADDRESS,
        verification_valid_minutes=VERIFICATION_VALID_MINUTES,
        version=APP_VERSION,
        project_url=PROJECT_URL,
    )
