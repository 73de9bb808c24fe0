"""Email service: ticket confirmation mails over SMTP.

In dev mode messages are logged instead of delivered.
"""

from __future__ import annotations

import html
import logging
import smtplib
import ssl
from dataclasses import dataclass
from datetime import UTC, datetime
from decimal import Decimal
from email.message import EmailMessage
from email.utils import formataddr
from typing import Any

from lotterypay.services.numbers import format_ticket_numbers

logger = logging.getLogger(__name__)

CONFIRMATION_SUBJECT = "Bevestiging van uw loterij deelname - {brand}"

CONFIRMATION_TEXT = """\
{brand} - Bevestiging van uw deelname

Beste {customer_name},

Bedankt voor uw deelname aan {brand}! Uw betaling is succesvol ontvangen.

Bestelling details:
Aantal loten: {unit_count}
Totaalbedrag: €{amount}
Ticket ID: {ticket_id}

Uw lotnummers:
{numbers}

Bewaar deze e-mail goed! U heeft deze nodig om uw prijs op te halen indien u wint.

Veel succes!

---
Dit is een automatisch gegenereerde e-mail.
© {year} {brand}
"""

CONFIRMATION_HTML = """\
<!DOCTYPE html>
<html>
<head><meta charset="utf-8"></head>
<body style="font-family: Arial, sans-serif; line-height: 1.6; color: #333;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: #4CAF50; color: white; padding: 20px; text-align: center;">
      <h1>{brand}</h1>
      <p>Bevestiging van uw deelname</p>
    </div>
    <div style="background-color: #f9f9f9; padding: 20px; margin-top: 20px;">
      <h2>Beste {customer_name},</h2>
      <p>Bedankt voor uw deelname aan {brand}! Uw betaling is succesvol ontvangen.</p>
      <div style="background-color: #e8f5e9; padding: 15px; margin: 15px 0;">
        <strong>Bestelling details:</strong><br>
        Aantal loten: {unit_count}<br>
        Totaalbedrag: &euro;{amount}<br>
        Ticket ID: {ticket_id}
      </div>
      <h3>Uw lotnummers:</h3>
      <div style="background-color: white; padding: 15px; border-left: 4px solid #4CAF50;">
        <pre style="font-size: 14px; margin: 0;">{numbers}</pre>
      </div>
      <p>Bewaar deze e-mail goed! U heeft deze nodig om uw prijs op te halen indien u wint.</p>
      <p><strong>Veel succes!</strong></p>
    </div>
    <p style="text-align: center; font-size: 12px; color: #666;">
      Dit is een automatisch gegenereerde e-mail. &copy; {year} {brand}
    </p>
  </div>
</body>
</html>
"""


@dataclass
class SMTPConfig:
    host: str
    port: int
    user: str = ""
    password: str = ""
    secure: bool = False  # implicit TLS (port 465)
    timeout: float = 10.0


class EmailService:
    """Sends ticket confirmation mails."""

    def __init__(
        self,
        smtp: SMTPConfig | None,
        from_email: str,
        from_name: str = "De Boss Loterij",
        dev_mode: bool = False,
    ) -> None:
        self.smtp = smtp
        self.from_email = from_email
        self.from_name = from_name
        self.dev_mode = dev_mode or smtp is None

    def build_confirmation(self, ticket: dict[str, Any]) -> EmailMessage:
        """Compose the plain-text + HTML confirmation for a paid ticket."""
        amount = Decimal(str(ticket["amount"])).quantize(Decimal("0.01"))
        fields = {
            "brand": self.from_name,
            "customer_name": ticket["customer_name"],
            "unit_count": ticket["unit_count"],
            "amount": f"{amount:.2f}",
            "ticket_id": ticket["ticket_id"],
            "numbers": format_ticket_numbers(ticket["numbers"]),
            "year": datetime.now(tz=UTC).year,
        }

        msg = EmailMessage()
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = ticket["customer_email"]
        msg["Subject"] = CONFIRMATION_SUBJECT.format(brand=self.from_name)
        msg.set_content(CONFIRMATION_TEXT.format(**fields))
        escaped = {k: html.escape(str(v)) for k, v in fields.items()}
        msg.add_alternative(CONFIRMATION_HTML.format(**escaped), subtype="html")
        return msg

    def send_ticket_confirmation(self, ticket: dict[str, Any]) -> bool:
        """Send the confirmation mail. Returns False (and logs) on failure."""
        try:
            msg = self.build_confirmation(ticket)
            self._send(msg)
        except Exception:
            logger.exception(
                "Failed to send confirmation email for ticket %s", ticket.get("ticket_id")
            )
            return False
        logger.info("Confirmation email sent for ticket %s", ticket["ticket_id"])
        return True

    def verify_connection(self) -> bool:
        """Open and close an SMTP session to check the configuration."""
        if self.dev_mode:
            return True
        try:
            with self._connect():
                pass
        except (OSError, smtplib.SMTPException):
            logger.exception("SMTP connection check failed")
            return False
        return True

    def _connect(self) -> smtplib.SMTP:
        """Open an authenticated session; plain connections upgrade via STARTTLS."""
        if self.smtp is None:
            raise RuntimeError("SMTP is not configured")
        cls = smtplib.SMTP_SSL if self.smtp.secure else smtplib.SMTP
        conn = cls(self.smtp.host, self.smtp.port, timeout=self.smtp.timeout)
        try:
            if not self.smtp.secure:
                conn.ehlo()
                if conn.has_extn("starttls"):
                    conn.starttls(context=ssl.create_default_context())
                    conn.ehlo()
            if self.smtp.user:
                conn.login(self.smtp.user, self.smtp.password)
        except Exception:
            conn.close()
            raise
        return conn

    def _send(self, msg: EmailMessage) -> None:
        if self.dev_mode:
            logger.info(
                "[DEV EMAIL] To: %s | Subject: %s | Body: %s",
                msg["To"],
                msg["Subject"],
                msg.get_body(preferencelist=("plain",)).get_content()[:200],
            )
            return
        with self._connect() as conn:
            conn.send_message(msg)
