"""SMTP email adapter: delivers payout mail through an authenticated relay."""

from email.utils import make_msgid

import emails
import structlog
from notifications.channel.email_port import EmailPort
from shared.config import MailSettings

logger = structlog.get_logger(__name__)


class SMTPEmailAdapter(EmailPort):
    def __init__(self, settings: MailSettings, message_factory=emails.Message):
        self.settings = settings
        self._message_factory = message_factory

    def smtp_options(self) -> dict:
        options = {
            "host": self.settings.host,
            "port": self.settings.port,
            "timeout": self.settings.timeout_seconds,
        }
        if self.settings.use_tls:
            options["tls"] = True
        if self.settings.username:
            options["user"] = self.settings.username
            options["password"] = self.settings.password.get_secret_value()
        return options

    def build_message(self, subject: str, body: str, html_body: str | None = None, message_id: str | None = None):
        return self._message_factory(
            message_id=message_id or make_msgid(),
            subject=subject,
            text=body,
            html=html_body,
            mail_from=self.settings.sender,
        )

    def send(self, to: str, subject: str, body: str, html_body: str | None = None) -> dict:
        message_id = make_msgid()
        message = self.build_message(subject, body, html_body, message_id)
        response = message.send(to=to, smtp=self.smtp_options())

        if not response.success:
            error = str(response.error) if response.error else f"SMTP status {response.status_code}"
            logger.warning("SMTP delivery failed", to=to, error=error)
            return {"message_id": None, "status": "failed", "error": error}

        return {"message_id": message_id, "status": "sent"}
