"""Utility helper functions."""

from blog_api.utils.helpers import (
    get_summary,
    host,
    parse_positive_int,
    split_csv,
    success_response,
    time_taken,
    today_str,
)

__all__ = [
    "get_summary",
    "host",
    "parse_positive_int",
    "split_csv",
    "success_response",
    "time_taken",
    "today_str",
]
