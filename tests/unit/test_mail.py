import smtplib
from email.message import EmailMessage
from unittest.mock import MagicMock, patch

import pytest

from solsign.config.settings import Settings
from solsign.mail import templates
from solsign.mail.exceptions import MailDeliveryError
from solsign.mail.factory import MailerFactory
from solsign.mail.log_mailer import LogMailer
from solsign.mail.smtp_mailer import SmtpMailer


def _code_message() -> EmailMessage:
    return templates.verification_code_message(
        sender="noreply@solsign.app",
        recipient="alice@example.com",
        username="alice_01",
        code="482913",
        ttl_minutes=15,
        reward_amount=8.0,
        symbol="SSIGN",
    )


def _plain(message: EmailMessage) -> str:
    return message.get_body(preferencelist=("plain",)).get_content()


class TestTemplates:
    def test_code_message(self) -> None:
        message = _code_message()

        assert message["To"] == "alice@example.com"
        assert message["From"] == "noreply@solsign.app"
        assert "Verification Code" in message["Subject"]
        body = _plain(message)
        assert "482913" in body
        assert "15 minutes" in body
        assert "8 SSIGN" in body
        assert "482913" in message.get_body(preferencelist=("html",)).get_content()

    def test_success_message(self) -> None:
        message = templates.verification_success_message(
            sender="noreply@solsign.app",
            recipient="alice@example.com",
            username="alice_01",
            reward_amount=8.0,
            symbol="SSIGN",
            explorer_url="https://explorer.solana.com/tx/sig?cluster=devnet",
            client_url="http://localhost:5173",
        )

        body = _plain(message)
        assert "Verification Complete" in message["Subject"]
        assert "https://explorer.solana.com/tx/sig?cluster=devnet" in body
        assert "http://localhost:5173/wallet" in body


class TestLogMailer:
    def test_body_only_logged_at_debug(self) -> None:
        with patch("solsign.mail.log_mailer.Log") as mock_log:
            LogMailer().send(_code_message())

        info_text = " ".join(str(call.args[0]) for call in mock_log.info.call_args_list)
        assert "alice@example.com" in info_text
        assert "482913" not in info_text
        assert "482913" in mock_log.debug.call_args[0][0]


class TestSmtpMailer:
    def test_sends_with_starttls_and_login(self) -> None:
        smtp = MagicMock()
        with patch("solsign.mail.smtp_mailer.smtplib.SMTP") as mock_smtp:
            mock_smtp.return_value.__enter__.return_value = smtp
            mailer = SmtpMailer(host="smtp.test", port=587, username="u", password="p")
            message = _code_message()
            mailer.send(message)

        mock_smtp.assert_called_once_with("smtp.test", 587, timeout=30)
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("u", "p")
        smtp.send_message.assert_called_once_with(message)

    def test_skips_tls_and_login_when_not_configured(self) -> None:
        smtp = MagicMock()
        with patch("solsign.mail.smtp_mailer.smtplib.SMTP") as mock_smtp:
            mock_smtp.return_value.__enter__.return_value = smtp
            SmtpMailer(host="localhost", port=25, use_tls=False).send(_code_message())

        smtp.starttls.assert_not_called()
        smtp.login.assert_not_called()

    def test_smtp_error_becomes_delivery_error(self) -> None:
        smtp = MagicMock()
        smtp.send_message.side_effect = smtplib.SMTPRecipientsRefused({})
        with patch("solsign.mail.smtp_mailer.smtplib.SMTP") as mock_smtp:
            mock_smtp.return_value.__enter__.return_value = smtp
            with pytest.raises(MailDeliveryError, match="alice@example.com"):
                SmtpMailer(host="smtp.test", port=587).send(_code_message())

    def test_connection_refused_becomes_delivery_error(self) -> None:
        with patch(
            "solsign.mail.smtp_mailer.smtplib.SMTP",
            side_effect=ConnectionRefusedError("refused"),
        ):
            with pytest.raises(MailDeliveryError):
                SmtpMailer(host="smtp.test", port=587).send(_code_message())


class TestMailerFactory:
    def test_log_provider(self) -> None:
        assert isinstance(MailerFactory.create(Settings(mail_provider="log")), LogMailer)

    def test_smtp_provider_is_case_insensitive(self) -> None:
        assert isinstance(MailerFactory.create(Settings(mail_provider="SMTP")), SmtpMailer)

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown mail provider"):
            MailerFactory.create(Settings(mail_provider="carrier-pigeon"))
