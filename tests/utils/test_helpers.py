# tests/utils/test_helpers.py
"""Tests for blog_api/utils/helpers.py module."""

import re
from time import perf_counter
from uuid import UUID

import orjson
import pytest

from blog_api.schemas import AuthorResponse
from blog_api.utils.helpers import (
    parse_positive_int,
    split_csv,
    success_response,
    time_taken,
    today_str,
)


class TestTodayStr:
    def test_format_matches_expected_pattern(self) -> None:
        result = today_str()
        assert re.match(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}$", result), result


class TestTimeTaken:
    def test_reports_milliseconds(self) -> None:
        assert time_taken(perf_counter()).endswith("ms")


class TestParsePositiveInt:
    """Lenient paging parameter parsing."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [(None, 10), ("", 10), ("abc", 10), ("0", 10), ("-3", 10), ("2.5", 10), ("7", 7)],
    )
    def test_falls_back_to_default(self, value: str | None, expected: int) -> None:
        assert parse_positive_int(value, 10) == expected

    def test_maximum_is_applied(self) -> None:
        assert parse_positive_int("500", 10, maximum=100) == 100


class TestSplitCsv:
    def test_splits_and_drops_blanks(self) -> None:
        assert split_csv("python, fastapi,,  ") == ["python", "fastapi"]

    def test_missing_value(self) -> None:
        assert split_csv(None) == []


class TestSuccessResponse:
    def test_models_are_dumped(self) -> None:
        author = AuthorResponse(id=UUID(int=1), username="johndoe", profile_pic=None)
        response = success_response("Done", 201, item=author, count=2)

        assert response.status_code == 201
        assert orjson.loads(response.body) == {
            "message": "Done",
            "item": {
                "id": "00000000-0000-0000-0000-000000000001",
                "username": "johndoe",
                "profilePic": None,
            },
            "count": 2,
        }
