"""
SMTP email service for admin-created account credentials.
"""

from __future__ import annotations

import html
import smtplib
import ssl
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional

import structlog

from taskhub.core.simple_config import settings

logger = structlog.get_logger()

TEMP_PASSWORD_SUBJECT = "Your New Account Credentials"

TEMP_PASSWORD_HTML = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; padding: 20px; border: 1px solid #eee;">
  <h2 style="color: #2b6cb0;">Account Created</h2>
  <p>Hello {name},</p>
  <p>An administrator has created an account for you. Your login credentials are:</p>
  <div style="background: #f7fafc; padding: 15px; border-radius: 5px;">
    <p><strong>Email:</strong> {email}</p>
    <p><strong>Temporary Password:</strong> <span style="color: #e53e3e; font-family: monospace;">{password}</span></p>
  </div>
  <p style="margin-top: 20px;">Please login and change your password immediately.</p>
</div>
"""


class EmailService:
    def __init__(self) -> None:
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.smtp_from = settings.SMTP_FROM
        self.smtp_from_name = settings.SMTP_FROM_NAME
        self.smtp_use_tls = settings.SMTP_USE_TLS
        self.smtp_use_ssl = settings.SMTP_USE_SSL
        self.smtp_timeout = settings.SMTP_TIMEOUT_SECONDS
        self.max_retries = settings.SMTP_MAX_RETRIES

    def _is_configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_port and self.smtp_from)

    def _build_connection(self):
        if self.smtp_use_ssl:
            context = ssl.create_default_context()
            return smtplib.SMTP_SSL(
                host=self.smtp_host,
                port=self.smtp_port,
                timeout=self.smtp_timeout,
                context=context,
            )

        smtp = smtplib.SMTP(
            host=self.smtp_host,
            port=self.smtp_port,
            timeout=self.smtp_timeout,
        )
        if self.smtp_use_tls:
            context = ssl.create_default_context()
            smtp.starttls(context=context)
        return smtp

    def send_email(self, *, to_email: str, subject: str, text_body: str, html_body: Optional[str] = None) -> None:
        if not self._is_configured():
            raise RuntimeError("SMTP is not configured. Set SMTP_* environment variables.")

        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = formataddr((self.smtp_from_name, self.smtp_from))
        message["To"] = to_email
        message.set_content(text_body)

        if html_body:
            message.add_alternative(html_body, subtype="html")

        last_error: Optional[Exception] = None

        for attempt in range(1, self.max_retries + 1):
            try:
                with self._build_connection() as smtp:
                    if self.smtp_user and self.smtp_password:
                        smtp.login(self.smtp_user, self.smtp_password)
                    smtp.send_message(message)

                logger.info("Email sent", to=to_email, subject=subject, attempt=attempt)
                return
            except Exception as exc:  # noqa: BLE001
                last_error = exc
                logger.warning(
                    "Email send attempt failed",
                    to=to_email,
                    subject=subject,
                    attempt=attempt,
                    max_retries=self.max_retries,
                    error=str(exc),
                )

        raise RuntimeError(f"Failed to send email after {self.max_retries} attempts: {last_error}")

    def send_temporary_password_email(self, *, to_email: str, name: str, temporary_password: str) -> None:
        text_body = (
            f"Hello {name},\n\n"
            "An administrator has created an account for you. Your login credentials are:\n"
            f"Email: {to_email}\n"
            f"Temporary Password: {temporary_password}\n\n"
            "Please login and change your password immediately.\n"
        )
        html_body = TEMP_PASSWORD_HTML.format(
            name=html.escape(name),
            email=html.escape(to_email),
            password=html.escape(temporary_password),
        )

        self.send_email(
            to_email=to_email,
            subject=TEMP_PASSWORD_SUBJECT,
            text_body=text_body,
            html_body=html_body,
        )


email_service = EmailService()
