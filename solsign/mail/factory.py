from solsign.config.settings import Settings
from solsign.mail.base import BaseMailer
from solsign.mail.log_mailer import LogMailer
from solsign.mail.smtp_mailer import SmtpMailer


class MailerFactory:
    """Creates the configured mail adapter."""

    PROVIDERS = ("log", "smtp")

    @classmethod
    def create(cls, settings: Settings) -> BaseMailer:
        provider = settings.mail_provider.lower()
        if provider == "log":
            return LogMailer()
        if provider == "smtp":
            return SmtpMailer(
                host=settings.smtp_host,
                port=settings.smtp_port,
                username=settings.smtp_username,
                password=settings.smtp_password,
                use_tls=settings.smtp_use_tls,
            )
        raise ValueError(
            f"Unknown mail provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
        )
