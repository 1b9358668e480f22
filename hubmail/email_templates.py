"""
Email Templates
The outer layout is written in MJML and compiled once per system name.
Content fragments are plain HTML dropped into the compiled layout as-is.
"""

import io
import logging
from functools import lru_cache

from mjml import mjml_to_html

from .exceptions import TemplateError

logger = logging.getLogger(__name__)

THEME = {
    "primary": "#58a6ff",
    "background": "#f6f8fa",
    "card_bg": "#ffffff",
    "text_primary": "#24292f",
    "text_secondary": "#3b434b",
    "text_muted": "#858585",
    "border": "#e2e8f0",
}

# Marks where the content fragment goes in the compiled layout
CONTENT_PLACEHOLDER = "%%HUBMAIL_CONTENT%%"


def get_base_template(system_name: str) -> str:
    """Base MJML layout wrapper for all emails"""
    return f"""
    <mjml>
      <mj-head>
        <mj-title>{system_name}</mj-title>
        <mj-attributes>
          <mj-all font-family="-apple-system, BlinkMacSystemFont, 'Segoe UI', 'Helvetica Neue', Arial, sans-serif" />
          <mj-text font-size="16px" line-height="1.6" color="{THEME['text_secondary']}" />
        </mj-attributes>
        <mj-style>
          .button {{
            display: inline-block;
            padding: 12px 32px;
            border-radius: 6px;
            background-color: {THEME['primary']};
            text-decoration: none;
          }}
        </mj-style>
      </mj-head>
      <mj-body background-color="{THEME['background']}">
        <!-- Header -->
        <mj-section background-color="{THEME['card_bg']}" padding="32px 20px 0 20px">
          <mj-column>
            <mj-text font-size="22px" font-weight="600" color="{THEME['text_primary']}" padding="0 40px">
              {system_name}
            </mj-text>
            <mj-divider border-color="{THEME['border']}" border-width="1px" padding="24px 40px 0 40px" />
          </mj-column>
        </mj-section>

        <!-- Main Content -->
        <mj-section background-color="{THEME['card_bg']}" padding="24px 40px 48px 40px">
          <mj-column>
            <mj-text>
              {CONTENT_PLACEHOLDER}
            </mj-text>
          </mj-column>
        </mj-section>

        <!-- Footer -->
        <mj-section padding="32px 20px">
          <mj-column>
            <mj-text align="center" font-size="13px" color="#94a3b8" padding="0">
              This email was sent automatically by {system_name}. Please do not reply.
            </mj-text>
          </mj-column>
        </mj-section>
      </mj-body>
    </mjml>
    """


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(io.StringIO(mjml_content.strip()))
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise TemplateError(f"Failed to compile MJML template: {e}") from e

    # mjml_to_html returns a mapping with 'html' and 'errors' keys
    if isinstance(result, dict):
        errors, html = result.get("errors"), result.get("html", "")
    else:
        errors, html = getattr(result, "errors", None), getattr(result, "html", str(result))
    if errors:
        logger.warning(f"MJML compilation warnings: {errors}")
    return html


@lru_cache(maxsize=8)
def get_compiled_layout(system_name: str) -> str:
    html = compile_mjml_to_html(get_base_template(system_name))
    if CONTENT_PLACEHOLDER not in html:
        raise TemplateError("Compiled layout lost its content placeholder")
    return html


def render_layout(content: str, system_name: str) -> str:
    """Wrap an HTML fragment in the outer layout.

    The fragment is inserted verbatim: it is neither compiled nor escaped.
    """
    return get_compiled_layout(system_name).replace(CONTENT_PLACEHOLDER, content, 1)


# ============================================
# Content fragments
# Values are interpolated without HTML escaping
# ============================================


def password_reset_template(user_name: str, link: str, valid_minutes: int) -> str:
    """Password reset fragment"""
    return f"""<p style="font-size: 30px">Hi <strong>{user_name},</strong></p>
    <p>
        You are resetting your password. Click the button below to choose a new one.
    </p>

    <p style="text-align: center; font-size: 13px;">
        <a target="__blank" href="{link}" class="button" style="color: #ffffff;">Reset password</a>
    </p>

    <p style="color: {THEME['text_muted']}; padding-top: 15px;">
        If the button does not work, copy the link below into your browser<br> {link}
    </p>
    <p style="color: {THEME['text_muted']};">The reset link is valid for {valid_minutes} minutes. If you did not request this, please ignore this email.</p>"""


def verification_code_template(code: str, valid_minutes: int) -> str:
    """Email verification code fragment"""
    return f"""
    <p>
        You are verifying your email address. Your verification code is:
    </p>

    <p style="text-align: center; font-size: 30px; color: {THEME['primary']};">
        <strong>{code}</strong>
    </p>

    <p style="color: {THEME['text_muted']}; padding-top: 15px;">
        The code is valid for {valid_minutes} minutes. If you did not request this, please ignore this email.
    </p>"""


def quota_warning_template(user_name: str, notice: str, quota: int, top_up_link: str) -> str:
    """Quota warning fragment, used both for a low and an exhausted balance"""
    return f"""<p style="font-size: 30px">Hi <strong>{user_name},</strong></p>
        <p>
            {notice}. Your remaining quota is {quota}. Please top up to keep your service running.
        </p>

        <p style="text-align: center; font-size: 13px;">
            <a target="__blank" href="{top_up_link}" class="button" style="color: #ffffff;">Top up</a>
        </p>

        <p style="color: {THEME['text_muted']}; padding-top: 15px;">
            If the button does not work, copy the link below into your browser<br> {top_up_link}
        </p>"""
