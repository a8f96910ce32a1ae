"""Plain text bodies for the account emails."""

from blog_api.configs import settings

type EmailContent = tuple[str, str]


def welcome_email(username: str) -> EmailContent:
    subject = f"Welcome to {settings.APP_NAME}"
    body = (
        f"Hi {username},\n\n"
        f"Thanks for joining {settings.APP_NAME}. Your account is ready, "
        "so log in and publish your first post.\n"
    )
    return subject, body


def reset_token_email(token: str) -> EmailContent:
    subject = "Your password reset token"
    body = (
        "A password reset was requested for your account.\n\n"
        f"Reset token: {token}\n\n"
        f"The token expires in {settings.PASSWORD_RESET_EXPIRE_MINUTES} minutes. "
        "If you did not ask for a reset, ignore this email.\n"
    )
    return subject, body


def reset_confirmation_email(username: str) -> EmailContent:
    subject = "Your password has been changed"
    body = (
        f"Hi {username},\n\n"
        "Your password was reset successfully. If this was not you, "
        "reset it again right away.\n"
    )
    return subject, body
