"""
Alert delivery over email.

Notifier composes one AlertMessage per recipient and hands it to a mail
transport. A failed recipient is logged and skipped; the rest are still
attempted.
"""
from __future__ import annotations

import asyncio
import logging
import smtplib
import ssl
from dataclasses import dataclass
from email.message import EmailMessage
from typing import Optional, Protocol, Sequence

from server_watchdog.errors import MailDispatchError
from server_watchdog.monitoring.models import EndpointDescriptor

logger = logging.getLogger(__name__)

ALERT_SUBJECT = "RTO Server Control"
ALERT_BODY_TEMPLATE = "Server {name} potentially down, please check."
DEFAULT_SMTP_PORT = 587
SMTP_TIMEOUT = 30.0  # seconds


@dataclass(frozen=True)
class AlertMessage:
    """A single alert email."""

    sender: str
    recipient: str
    subject: str
    body: str


class MailTransport(Protocol):
    """Anything that can deliver an AlertMessage."""

    async def send(self, message: AlertMessage) -> None:
        """Deliver one message, raising MailDispatchError on failure."""
        ...


class SmtpMailTransport:
    """
    Sends alerts through an SMTP relay over STARTTLS.

    A new SMTP session is opened for every message. smtplib is blocking, so
    each send runs in a worker thread to keep sibling monitors running.

    Usage:
        transport = SmtpMailTransport(
            relay_host="smtp.example.com",
            username="watchdog@example.com",
            password="...",
        )
        await transport.send(message)
    """

    def __init__(
        self,
        relay_host: str,
        username: str,
        password: str,
        port: int = DEFAULT_SMTP_PORT,
        timeout: float = SMTP_TIMEOUT,
        ssl_context: Optional[ssl.SSLContext] = None,
    ) -> None:
        """
        Initialize the transport.

        Args:
            relay_host: SMTP relay hostname
            username: Login for the relay (also the sender address)
            password: Password for the relay
            port: Submission port (STARTTLS)
            timeout: Socket timeout for the SMTP session
            ssl_context: TLS context (system defaults if None)
        """
        if not relay_host:
            raise ValueError("relay_host is required")
        self._relay_host = relay_host
        self._username = username
        self._password = password
        self._port = port
        self._timeout = timeout
        self._ssl_context = ssl_context or ssl.create_default_context()

    async def send(self, message: AlertMessage) -> None:
        await asyncio.to_thread(self._send_blocking, message)

    def _send_blocking(self, message: AlertMessage) -> None:
        try:
            email = EmailMessage()
            email["From"] = message.sender
            email["To"] = message.recipient
            email["Subject"] = message.subject
            email.set_content(message.body)

            with smtplib.SMTP(self._relay_host, self._port, timeout=self._timeout) as server:
                server.starttls(context=self._ssl_context)
                server.login(self._username, self._password)
                server.send_message(email)
        except (smtplib.SMTPException, OSError, ValueError) as e:
            raise MailDispatchError(message.recipient, str(e)) from e


def build_alert_body(endpoint: EndpointDescriptor) -> str:
    return ALERT_BODY_TEMPLATE.format(name=endpoint.name)


class Notifier:
    """
    Emails every recipient that an endpoint looks down.

    Usage:
        notifier = Notifier(transport, sender="watchdog@example.com")
        delivered = await notifier.notify(endpoint, ["ops@example.com"])
    """

    def __init__(
        self,
        transport: MailTransport,
        sender: str,
        subject: str = ALERT_SUBJECT,
    ) -> None:
        self._transport = transport
        self._sender = sender
        self._subject = subject

    def compose(self, endpoint: EndpointDescriptor, recipient: str) -> AlertMessage:
        """Build the alert for one recipient."""
        return AlertMessage(
            sender=self._sender,
            recipient=recipient,
            subject=self._subject,
            body=build_alert_body(endpoint),
        )

    async def notify(
        self,
        endpoint: EndpointDescriptor,
        recipients: Sequence[str],
    ) -> int:
        """
        Send one alert per recipient, in order.

        Each recipient gets exactly one attempt. Failures are logged and do
        not stop the remaining recipients.

        Args:
            endpoint: Endpoint that crossed the failure threshold
            recipients: Email addresses to notify

        Returns:
            Number of messages delivered
        """
        if not recipients:
            logger.warning(f"No recipients configured, alert for {endpoint.name} not sent")
            return 0

        delivered = 0
        for recipient in recipients:
            message = self.compose(endpoint, recipient)
            try:
                await self._transport.send(message)
            except MailDispatchError as e:
                logger.error(f"Alert for {endpoint.name} not delivered: {e}")
                continue
            except Exception as e:
                logger.error(f"Unexpected error sending alert for {endpoint.name} to {recipient}: {e}")
                continue

            delivered += 1
            logger.info(f"Alert for {endpoint.name} sent to {recipient}")

        return delivered
