"""Domain models for the contact form."""

from dataclasses import dataclass


@dataclass(frozen=True)
class ContactMessage:
    """A visitor's message from the contact form."""

    first_name: str
    email: str
    phone_number: str
    category: str
    message: str
