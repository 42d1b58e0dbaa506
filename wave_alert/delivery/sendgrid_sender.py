"""Email delivery via SendGrid.

Sends the composite wave report as one email addressed to every recipient.
Requires environment variable:
- SENDGRID_API_KEY
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """Error delivering the report email."""
    pass


@dataclass
class EmailResult:
    """Result of a successful send."""
    recipients: list[str] = field(default_factory=list)
    status_code: Optional[int] = None
    message_id: Optional[str] = None


class SendGridSender:
    """Sends report emails via SendGrid."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "Wave Alert",
        client=None,
    ):
        """Initialize SendGrid sender.

        Args:
            api_key: SendGrid API key. Defaults to SENDGRID_API_KEY env var.
            from_email: Sender email address. Defaults to SENDGRID_FROM_EMAIL env var.
            from_name: Sender display name.
            client: Pre-built SendGridAPIClient, mainly for tests.
        """
        self.api_key = api_key or os.environ.get("SENDGRID_API_KEY")
        self.from_email = from_email or os.environ.get("SENDGRID_FROM_EMAIL", "wave-alert@example.com")
        self.from_name = from_name

        self._client = client

    @property
    def is_configured(self) -> bool:
        """Check if SendGrid credentials are configured."""
        return bool(self.api_key) or self._client is not None

    def _get_client(self):
        """Get or create SendGrid client."""
        if self._client is None:
            if not self.is_configured:
                raise DeliveryError(
                    "SendGrid not configured. Set SENDGRID_API_KEY environment variable."
                )
            from sendgrid import SendGridAPIClient
            self._client = SendGridAPIClient(self.api_key)
        return self._client

    def send_report(
        self,
        recipients: list[str],
        subject: str,
        text_content: str,
        html_content: Optional[str] = None,
    ) -> EmailResult:
        """Send one email to all recipients.

        Args:
            recipients: Email addresses, all placed on the same message
            subject: Email subject
            text_content: Plain text body
            html_content: Optional HTML body

        Returns:
            EmailResult with status and message id

        Raises:
            DeliveryError: If unconfigured, no recipients, or the send fails
        """
        if not recipients:
            raise DeliveryError("No recipients configured. Set ALERT_TO_EMAILS.")

        from sendgrid.helpers.mail import Content, Email, Mail, To

        try:
            message = Mail(
                from_email=Email(self.from_email, self.from_name),
                to_emails=[To(address) for address in recipients],
                subject=subject,
            )
            # text/plain must precede text/html
            message.add_content(Content("text/plain", text_content))
            if html_content:
                message.add_content(Content("text/html", html_content))

            client = self._get_client()
            response = client.send(message)
        except DeliveryError:
            raise
        except Exception as e:
            raise DeliveryError(f"SendGrid send failed: {e}") from e

        if not 200 <= response.status_code < 300:
            raise DeliveryError(f"SendGrid returned status {response.status_code}")

        message_id = response.headers.get("X-Message-Id")
        logger.info(f"Email sent to {len(recipients)} recipient(s): {message_id}")

        return EmailResult(
            recipients=list(recipients),
            status_code=response.status_code,
            message_id=message_id,
        )
