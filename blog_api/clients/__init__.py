from blog_api.clients.email_client import EmailClient, LogOnlyEmailSender
from blog_api.clients.protocols import EmailSender

__all__ = ["EmailClient", "EmailSender", "LogOnlyEmailSender"]
