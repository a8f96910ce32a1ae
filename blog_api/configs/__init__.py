from blog_api.configs.logger import file_logger
from blog_api.configs.settings import (
    CONFIG_MAP,
    DEFAULT_ERROR_MESSAGE,
    TOKEN_COOKIE_NAME,
    LimiterConfig,
    PasswordHashConfig,
    settings,
)

__all__ = [
    "CONFIG_MAP",
    "DEFAULT_ERROR_MESSAGE",
    "TOKEN_COOKIE_NAME",
    "LimiterConfig",
    "PasswordHashConfig",
    "file_logger",
    "settings",
]
