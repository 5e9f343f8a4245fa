"""Tests for fieldconf.keys module."""

import pytest

from fieldconf.keys import camel_split, env_name, join_prefix


class TestCamelSplit:
    """Tests for camel_split."""

    @pytest.mark.parametrize(
        "name,expected",
        [
            ("", []),
            ("fooBar", ["foo", "Bar"]),
            ("FOOBar", ["FOO", "Bar"]),
            ("foo", ["foo"]),
            ("Foo", ["Foo"]),
            ("FOO", ["FOO"]),
            ("max_retries", ["max", "retries"]),
            ("HTTPServerURL", ["HTTP", "Server", "URL"]),
            ("dbHost2", ["db", "Host2"]),
            ("v2Api", ["v2", "Api"]),
            ("__private", ["private"]),
        ],
    )
    def test_segments(self, name, expected):
        assert camel_split(name) == expected


class TestEnvName:
    """Tests for env_name."""

    def test_camel_case(self):
        assert env_name("maxRetries") == "MAX_RETRIES"

    def test_snake_case(self):
        assert env_name("max_retries") == "MAX_RETRIES"

    def test_acronym(self):
        assert env_name("APIKey") == "API_KEY"

    def test_empty(self):
        assert env_name("") == ""


class TestJoinPrefix:
    """Tests for join_prefix."""

    def test_joins_with_underscore(self):
        assert join_prefix("APP", "PORT") == "APP_PORT"

    def test_empty_prefix(self):
        assert join_prefix("", "PORT") == "PORT"

    def test_empty_name(self):
        assert join_prefix("APP", "") == "APP"
