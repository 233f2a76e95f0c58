"""SMTP mail transport for reminder emails."""

import smtplib
from email.mime.text import MIMEText
from typing import Optional, Protocol

import config
from logger import logger


class MailTransport(Protocol):
    """Anything that can deliver a plain-text email."""

    def deliver(self, to_address: str, subject: str, body: str) -> bool:
        ...


class SmtpTransport:
    """Deliver mail through an SMTP server over STARTTLS or implicit TLS."""

    def __init__(
        self,
        host: Optional[str] = None,
        port: Optional[int] = None,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        timeout: float = 30,
        use_ssl: Optional[bool] = None,
    ):
        self.host = host if host is not None else config.EMAIL_HOST
        self.port = port or config.EMAIL_PORT
        self.username = username if username is not None else config.EMAIL_USER
        self.password = password if password is not None else config.EMAIL_PASS
        self.sender = sender or config.EMAIL_FROM or self.username
        self.timeout = timeout
        self.use_ssl = use_ssl if use_ssl is not None else config.EMAIL_USE_SSL

    @property
    def configured(self) -> bool:
        return bool(self.host and self.sender)

    def build_message(self, to_address: str, subject: str, body: str) -> MIMEText:
        msg = MIMEText(body, "plain", "utf-8")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to_address
        return msg

    def deliver(self, to_address: str, subject: str, body: str) -> bool:
        """Send one email.

        Over plain SMTP the connection is upgraded with STARTTLS only when the
        server advertises it.

        Returns:
            True if the server accepted the message

        Raises:
            smtplib.SMTPException, OSError: On connection or protocol failure
        """
        if not self.configured:
            logger.warning("SMTP not configured, reminder email not sent")
            return False

        msg = self.build_message(to_address, subject, body)
        if self.use_ssl:
            connection = smtplib.SMTP_SSL(self.host, self.port, timeout=self.timeout)
        else:
            connection = smtplib.SMTP(self.host, self.port, timeout=self.timeout)

        with connection as smtp:
            if not self.use_ssl:
                smtp.ehlo()
                if smtp.has_extn("starttls"):
                    smtp.starttls()
                    smtp.ehlo()
                else:
                    logger.debug(f"{self.host} does not offer STARTTLS, sending unencrypted")
            if self.username and self.password:
                smtp.login(self.username, self.password)
            refused = smtp.send_message(msg)

        if refused:
            logger.warning(f"SMTP server refused recipients: {list(refused)}")
            return False
        return True
