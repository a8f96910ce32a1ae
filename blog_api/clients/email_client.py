"""Email client for Gmail API integration with OAuth2 authentication."""

from asyncio import get_running_loop
from base64 import urlsafe_b64encode
from email.message import EmailMessage
from email.utils import parseaddr
from logging import getLogger
from os import chmod
from pathlib import Path
from re import compile as re_compile
from stat import S_IRUSR, S_IRWXG, S_IRWXO, S_IWUSR
from threading import Lock
from typing import Any, cast

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from googleapiclient.discovery import Resource, build
from googleapiclient.errors import HttpError

from blog_api.configs import file_logger, settings
from blog_api.decorators import with_retry
from blog_api.errors import ConfigurationError, EmailAuthenticationError, SendingError

logger = file_logger(getLogger(__name__))

# Regex pattern for header injection prevention
_HEADER_INJECTION_PATTERN = re_compile(r"[\r\n]")


def validate_address(email: str) -> str:
    """
    Validate an email address and reject header injection.

    Args:
        email: Address to validate.

    Returns:
        The bare address.

    Raises:
        ValueError: If the address is invalid or contains line breaks.
    """
    if _HEADER_INJECTION_PATTERN.search(email):
        mssg = "Email contains invalid characters (potential header injection)"
        raise ValueError(mssg)

    _, addr = parseaddr(email)
    if not addr or "@" not in addr:
        mssg = f"Invalid email address: {email}"
        raise ValueError(mssg)
    return addr


def sanitize_header(value: str) -> str:
    """Strip line breaks from a header value."""
    return _HEADER_INJECTION_PATTERN.sub("", value)


class EmailClient:
    """
    Sends emails through the Gmail API.

    The service is built lazily from the stored OAuth token on first use and
    the blocking API call runs in the default executor.
    """

    def __init__(self, token_file: Path | None = None, sender: str | None = None) -> None:
        self.token_file = token_file or settings.GMAIL_TOKEN_FILE
        self.sender = sender or str(settings.MAIL_FROM)
        self._credentials: Credentials | None = None
        self._service: Resource | None = None
        # Guards lazy service construction across executor threads
        self._service_lock: Lock = Lock()

    def _validate_token_file_permissions(self) -> None:
        """Restrict the token file to its owner (600) when it is readable by others."""
        if not self.token_file.exists():
            return

        try:
            mode = self.token_file.stat().st_mode
            if mode & (S_IRWXG | S_IRWXO):
                logger.warning("Token file has insecure permissions, fixing to owner-only access")
                chmod(self.token_file, S_IRUSR | S_IWUSR)
        except OSError:
            logger.exception("Failed to validate token file permissions")

    def _get_credentials(self) -> Credentials:
        """
        Load the stored OAuth2 credentials, refreshing them when expired.

        Returns:
            Valid OAuth2 credentials.

        Raises:
            EmailAuthenticationError: If the token is corrupt or refresh fails.
            ConfigurationError: If the token file is missing or unusable.
        """
        self._validate_token_file_permissions()

        creds: Credentials | None = None
        if self.token_file.exists():
            try:
                creds = Credentials.from_authorized_user_file(
                    str(self.token_file),
                    settings.GMAIL_SCOPES,
                )
            except ValueError as e:
                mssg = "Token file is corrupt."
                logger.exception(mssg)
                raise EmailAuthenticationError(mssg) from e

        if creds is None:
            logger.error("Token file not found or invalid.")
            mssg = f"Valid token not found at {self.token_file}"
            raise ConfigurationError(mssg)

        if not creds.valid:
            if not (creds.expired and creds.refresh_token):
                mssg = f"Token at {self.token_file} is invalid and cannot be refreshed"
                raise ConfigurationError(mssg)
            logger.info("Refreshing expired Gmail access token.")
            try:
                creds.refresh(Request())
            except GoogleAuthError as e:
                logger.exception("Token refresh failed.")
                mssg = "Token expired and refresh failed."
                raise EmailAuthenticationError(mssg) from e

        return creds

    @property
    def service(self) -> Resource:
        """
        Lazy-load the Gmail API service with double-checked locking.

        Raises:
            ConfigurationError: If service cannot be initialized.
        """
        if self._service is None:
            with self._service_lock:
                if self._service is None:
                    self._credentials = self._get_credentials()
                    self._service = build(
                        "gmail",
                        "v1",
                        credentials=self._credentials,
                        cache_discovery=False,
                    )
        if self._service is None:
            mssg = "Failed to initialize Gmail service"
            raise ConfigurationError(mssg)
        return self._service

    def _create_message(self, to: str, subject: str, body: str) -> dict[str, str]:
        """
        Build a MIME message encoded for the Gmail API.

        Raises:
            ValueError: If an address is invalid.
        """
        message = EmailMessage()
        message.set_content(body)
        message["To"] = validate_address(to)
        message["From"] = validate_address(self.sender)
        message["Subject"] = sanitize_header(subject)

        return {"raw": urlsafe_b64encode(message.as_bytes()).decode()}

    def send_sync(self, to: str, subject: str, body: str) -> dict[str, Any]:
        """
        Blocking send. Should not be called directly within an async route.

        Raises:
            SendingError: If the message is invalid or the API refuses it.
        """
        try:
            message_body = self._create_message(to, subject, body)
        except ValueError as error:
            raise SendingError(str(error)) from error

        try:
            # The discovery-built resource has no static type for .users()
            service = cast(Any, self.service)
            result = service.users().messages().send(userId="me", body=message_body).execute()
        except HttpError as error:
            logger.exception("Google API Error")
            mssg = f"Google API refused request: {error}"
            raise SendingError(mssg) from error

        logger.info(f"Email sent. ID: {result.get('id')}")
        return result

    @with_retry(base_delay=0.5, max_delay=4)
    async def send_email(self, to: str, subject: str, body: str) -> dict[str, Any]:
        """Send an email off the event loop, retrying dropped connections and timeouts."""
        loop = get_running_loop()
        return await loop.run_in_executor(None, self.send_sync, to, subject, body)


class LogOnlyEmailSender:
    """Stand-in used when ``MAIL_ENABLED`` is off: records the send in the log only."""

    async def send_email(self, to: str, subject: str, body: str) -> dict[str, Any]:
        logger.info(f"Email delivery disabled, skipping '{subject}' to {validate_address(to)}")
        return {}
