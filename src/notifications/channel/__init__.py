"""Channel adapter registry: pluggable email dispatch.

Provides singleton access to the email adapter. Uses the fake adapter by
default; the SMTP adapter is selected with ``MARKETPLACE_MAIL__ADAPTER=smtp``.
"""

from notifications.channel.email_port import EmailPort
from shared.config import get_settings

_email_channel: EmailPort | None = None


def get_email_channel() -> EmailPort:
    """Return the configured email adapter (singleton)."""
    global _email_channel
    if _email_channel is None:
        mail = get_settings().mail
        if mail.adapter == "smtp":
            from notifications.channel.smtp_email import SMTPEmailAdapter

            _email_channel = SMTPEmailAdapter(mail)
        elif mail.adapter == "fake":
            from notifications.channel.fake_email import FakeEmailAdapter

            _email_channel = FakeEmailAdapter()
        else:
            raise ValueError(f"Unknown mail adapter: {mail.adapter}")

    return _email_channel


def set_email_channel(channel: EmailPort) -> None:
    """Install a specific email adapter."""
    global _email_channel
    _email_channel = channel


def reset_channels():
    """Reset the channel singleton (useful for testing)."""
    global _email_channel
    _email_channel = None
