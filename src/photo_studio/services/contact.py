"""Contact-form email service."""

import logging
from dataclasses import dataclass

from jinja2 import Environment, select_autoescape

from photo_studio.adapters.resend_email_client import EmailClient, EmailDeliveryError
from photo_studio.domain.contact import ContactMessage
from photo_studio.errors import BadRequestError, ServiceUnavailableError

logger = logging.getLogger(__name__)

_jinja_env = Environment(autoescape=select_autoescape(default_for_string=True))


@dataclass
class ContactService:
    """Forwards contact-form messages to the studio's inbox."""

    email_client: EmailClient | None
    recipient: str | None
    sender: str

    async def send(self, message: ContactMessage) -> dict[str, object]:
        """Render and send a contact message."""
        if self.email_client is None:
            raise ServiceUnavailableError("Email API is not configured on this server")
        if not self.recipient:
            raise ServiceUnavailableError("RESEND_EMAIL is not configured")
        try:
            return await self.email_client.send(
                sender=self.sender,
                to=[self.recipient],
                subject=f"Ny henvendelse fra {message.first_name}",
                html=render_contact_email(message),
            )
        except EmailDeliveryError as exc:
            logger.warning("Contact email rejected", extra={"error": str(exc)})
            raise BadRequestError(str(exc) or "Failed to send email") from exc


def render_contact_email(message: ContactMessage) -> str:
    """Render the HTML body for a contact message."""
    return _CONTACT_TEMPLATE.render(message=message)


_LABEL = "color: #666; font-size: 14px; font-weight: 600; margin-bottom: 4px;"
_VALUE = "color: #333; font-size: 15px;"

_CONTACT_TEMPLATE = _jinja_env.from_string(
    """<!DOCTYPE html>
<html>
  <head><meta charset="utf-8" /></head>
  <body style="font-family: HelveticaNeue,Helvetica,Arial,sans-serif; background-color: #f6f9fc;">
    <div style="background-color: #ffffff; margin: 0 auto; padding: 40px 20px; max-width: 600px;">
      <h1 style="color: #000; font-size: 24px; font-weight: 600; margin-bottom: 16px;">
        Ny henvendelse fra {{ message.first_name }}
      </h1>
      <p style="{{ value_style }} margin-bottom: 16px;">
        Du har mottatt en ny melding fra kontaktskjemaet ditt.
      </p>
      {% for label, value in [
        ("Navn", message.first_name),
        ("E-post", message.email),
        ("Telefon", message.phone_number),
        ("Kategori", message.category),
      ] %}
      <div style="margin-bottom: 16px;">
        <div style="{{ label_style }}">{{ label }}</div>
        <div style="{{ value_style }}">{{ value }}</div>
      </div>
      {% endfor %}
      <div style="{{ label_style }}">Melding</div>
      <p style="{{ value_style }} line-height: 24px; white-space: pre-wrap;">{{ message.message }}</p>
    </div>
  </body>
</html>
""",
    globals={"label_style": _LABEL, "value_style": _VALUE},
)
