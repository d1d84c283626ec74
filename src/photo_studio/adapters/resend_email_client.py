"""Resend email API client."""

from dataclasses import dataclass
from typing import Protocol

import httpx


class EmailDeliveryError(Exception):
    """The email provider rejected a message."""


class EmailClient(Protocol):
    """Interface for transactional email delivery."""

    async def send(
        self, *, sender: str, to: list[str], subject: str, html: str
    ) -> dict[str, object]:
        """Send an HTML email and return the provider's response payload."""


@dataclass
class HttpxResendClient(EmailClient):
    """HTTPX-backed Resend client."""

    api_key: str
    http_client: httpx.AsyncClient
    base_url: str = "https://api.resend.com"

    @classmethod
    def create(cls, api_key: str) -> "HttpxResendClient":
        """Create a Resend client with a managed httpx session."""
        return cls(api_key=api_key, http_client=httpx.AsyncClient())

    async def send(
        self, *, sender: str, to: list[str], subject: str, html: str
    ) -> dict[str, object]:
        """Send an email through the Resend API."""
        response = await self.http_client.post(
            f"{self.base_url}/emails",
            headers={"Authorization": f"Bearer {self.api_key}"},
            json={"from": sender, "to": to, "subject": subject, "html": html},
            timeout=10,
        )
        if response.is_error:
            raise EmailDeliveryError(_error_message(response))
        return response.json()

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return f"Email provider returned {response.status_code}"
    if isinstance(payload, dict) and payload.get("message"):
        return str(payload["message"])
    return f"Email provider returned {response.status_code}"
