"""Tests for fieldconf.utils.env_utils module."""

import pytest

from fieldconf.utils.env_utils import (
    MASK,
    EnvVarExpansionError,
    expand_env_vars,
    is_sensitive_key,
    mask_value,
)


class TestIsSensitiveKey:
    """Tests for is_sensitive_key."""

    @pytest.mark.parametrize(
        "key", ["API_TOKEN", "db_password", "SECRET", "api_key", "apiKey", "db.password", "GITHUB_PAT"]
    )
    def test_sensitive(self, key):
        assert is_sensitive_key(key) is True

    @pytest.mark.parametrize("key", ["PORT", "HOST", "log_level", "DB_PATH", "KEY_PREFIX", "TOKENIZER"])
    def test_not_sensitive(self, key):
        assert is_sensitive_key(key) is False


class TestMaskValue:
    """Tests for mask_value."""

    def test_masks(self):
        assert mask_value("hunter2") == MASK

    def test_empty_stays_empty(self):
        assert mask_value("") == ""


class TestExpandEnvVars:
    """Tests for expand_env_vars."""

    def test_expands_string(self):
        assert expand_env_vars("http://${HOST}:80", environ={"HOST": "db"}) == "http://db:80"

    def test_nested_structures(self):
        value = {"db": {"hosts": ["${A}", "${B}"]}, "port": 5432}

        result = expand_env_vars(value, environ={"A": "a", "B": "b"})

        assert result == {"db": {"hosts": ["a", "b"]}, "port": 5432}

    def test_missing_kept_when_not_strict(self):
        assert expand_env_vars("${MISSING}", environ={}) == "${MISSING}"

    def test_missing_raises_when_strict(self):
        with pytest.raises(EnvVarExpansionError, match="MISSING"):
            expand_env_vars("${MISSING}", strict=True, environ={})

    def test_strict_error_includes_context(self):
        with pytest.raises(EnvVarExpansionError, match="in db.host"):
            expand_env_vars({"host": "${MISSING}"}, strict=True, context="db", environ={})

    def test_strict_error_hides_sensitive_context(self):
        with pytest.raises(EnvVarExpansionError) as exc_info:
            expand_env_vars("${MISSING}", strict=True, context="api_token", environ={})

        assert "api_token" not in str(exc_info.value)

    def test_fallback_used_when_unset(self):
        assert expand_env_vars("${PORT:-8080}", environ={}) == "8080"

    def test_fallback_ignored_when_set(self):
        assert expand_env_vars("${PORT:-8080}", environ={"PORT": "9000"}) == "9000"

    def test_fallback_satisfies_strict(self):
        assert expand_env_vars("${HOST:-}", strict=True, environ={}) == ""
