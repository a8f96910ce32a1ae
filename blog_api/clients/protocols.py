"""Protocol definitions for outbound collaborators."""

from collections.abc import Awaitable
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class EmailSender(Protocol):
    """
    Protocol for email delivery implementations.

    ``EmailClient`` (Gmail API) and ``LogOnlyEmailSender`` conform to it; tests
    substitute a mock.
    """

    def send_email(self, to: str, subject: str, body: str) -> Awaitable[Any]:
        """Deliver a plain text email to a single recipient."""
        ...
