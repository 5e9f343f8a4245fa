"""Tests for fieldconf.conf module."""

from dataclasses import dataclass, field

import pytest

from fieldconf.conf import (
    Config,
    collect_params_from_env,
    env_names,
    env_names_no_defaults,
    env_report,
    env_to_map,
    env_var,
    env_var_optional,
    env_var_strict,
    fetch_params,
    param_env_field,
    param_names,
    process_env,
    pstore_key,
)
from fieldconf.field import conf, fields
from fieldconf.resolver import ResolveMode
from fieldconf.sources.pstore import MappingParameterStore
from fieldconf.utils.errors import (
    BackendError,
    FieldConfError,
    MissingRequiredValueError,
    NotFoundError,
    ResolutionErrors,
)


@dataclass
class Database:
    host: str = conf("default:localhost")
    password: str = conf("required,mask")


@dataclass
class AppSettings:
    app_name: str = conf("env:APP_NAME,no-prefix")
    region: str = conf("env:AWS_REGION,no-prefix")
    port: int = conf("default:8080")
    api_key: str = conf("required")
    sentry_dsn: str = conf("pstore:global")
    shared_url: str = conf("pstore:/shared/url")
    internal: str = conf("env:-,default:x")
    debug_dump: str = conf("no-print,default:on")
    db: Database = field(default_factory=Database)


class Level:
    """Needs a constructor argument; set() fills the name."""

    def __init__(self, name):
        self.name = name

    def set(self, value):
        self.name = value


@dataclass
class WithLevel:
    level: Level | None = conf("default:info")


@dataclass
class Simple:
    name: str = conf("default:svc")
    count: int = conf("default:1")


def _field(spec, name):
    return next(f for f in fields(spec) if f.name == name)


class TestProcessEnv:
    """Tests for process_env."""

    def test_capability_type_with_constructor_args(self):
        spec = WithLevel()

        process_env(spec, environ={})

        assert spec.level.name == "info"

    def test_populates_from_environ(self):
        spec = Simple()

        process_env(spec, environ={"COUNT": "3"})

        assert spec.name == "svc"
        assert spec.count == 3

    def test_prefix(self):
        spec = Simple()

        process_env(spec, "billing", environ={"BILLING_NAME": "bill"})

        assert spec.name == "bill"

    def test_required_missing(self):
        with pytest.raises(MissingRequiredValueError):
            process_env(AppSettings(), environ={})

    def test_aggregate_mode(self):
        with pytest.raises(ResolutionErrors) as exc_info:
            process_env(AppSettings(), environ={}, mode=ResolveMode.AGGREGATE)

        assert {e.field_name for e in exc_info.value.errors} == {"api_key", "password"}


class TestPstoreKey:
    """Tests for pstore_key."""

    def test_default_path(self):
        assert pstore_key(_field(AppSettings(), "port"), "billing", "PORT") == "/billing/PORT"

    def test_global(self):
        f = _field(AppSettings(), "sentry_dsn")

        assert pstore_key(f, "billing", "SENTRY_DSN") == "/global/SENTRY_DSN"

    def test_explicit(self):
        f = _field(AppSettings(), "shared_url")

        assert pstore_key(f, "billing", "SHARED_URL") == "/shared/url"


class TestParamNames:
    """Tests for param_names."""

    def test_skips_defaults_reserved_and_excluded(self):
        result = param_names("billing", AppSettings())

        assert result == [
            "/billing/API_KEY",
            "/global/SENTRY_DSN",
            "/shared/url",
            "/billing/DB_PASSWORD",
        ]

    def test_include_defaults(self):
        result = param_names("billing", AppSettings(), skip_defaults=False)

        assert "/billing/PORT" in result
        assert "/billing/DB_HOST" in result
        assert "/billing/APP_NAME" not in result

    def test_empty_app_title(self):
        with pytest.raises(FieldConfError, match="app_title is empty"):
            param_names("", AppSettings())


class TestCollectParams:
    """Tests for collect_params_from_env and param_env_field."""

    def test_collects_values(self):
        environ = {"API_KEY": "k", "DB_PASSWORD": "p", "SENTRY_DSN": "dsn"}

        result = collect_params_from_env("billing", AppSettings(), environ=environ)

        assert result == {
            "/billing/API_KEY": "k",
            "/global/SENTRY_DSN": "dsn",
            "/shared/url": "",
            "/billing/DB_PASSWORD": "p",
        }

    def test_includes_defaults_when_asked(self):
        environ = {"API_KEY": "k", "DB_PASSWORD": "p"}

        result = collect_params_from_env("billing", AppSettings(), False, environ=environ)

        assert result["/billing/PORT"] == "8080"

    def test_set_variable_overrides_skipped_default(self):
        environ = {"API_KEY": "k", "DB_PASSWORD": "p", "PORT": "9000"}

        result = collect_params_from_env("billing", AppSettings(), environ=environ)

        assert result["/billing/PORT"] == "9000"
        assert "/billing/DB_HOST" not in result

    def test_param_names_still_skip_defaults(self):
        assert "/billing/PORT" not in param_names("billing", AppSettings())

    def test_required_missing(self):
        with pytest.raises(MissingRequiredValueError):
            collect_params_from_env("billing", AppSettings(), environ={})

    def test_empty_app_title(self):
        with pytest.raises(FieldConfError):
            collect_params_from_env("", AppSettings(), environ={})

    def test_param_env_field_default(self):
        f = _field(AppSettings(), "port")

        assert param_env_field("billing", "PORT", f, environ={}) == ("/billing/PORT", "8080")

    def test_param_env_field_env_value(self):
        f = _field(AppSettings(), "port")

        assert param_env_field("billing", "PORT", f, environ={"PORT": "1"}) == ("/billing/PORT", "1")


class TestFetchParams:
    """Tests for fetch_params."""

    def test_reads_store(self):
        store = MappingParameterStore(
            {
                "/billing/API_KEY": "k",
                "/global/SENTRY_DSN": "dsn",
                "/shared/url": "u",
                "/billing/DB_PASSWORD": "p",
            }
        )

        result = fetch_params("billing", AppSettings(), store)

        assert result["/global/SENTRY_DSN"] == "dsn"
        assert len(result) == 4

    def test_fail_fast(self):
        with pytest.raises(BackendError):
            fetch_params("billing", AppSettings(), MappingParameterStore({}))

    def test_aggregate(self):
        store = MappingParameterStore({"/billing/API_KEY": "k"})

        with pytest.raises(ResolutionErrors) as exc_info:
            fetch_params("billing", AppSettings(), store, mode=ResolveMode.AGGREGATE)

        assert len(exc_info.value.errors) == 3


class TestEnvListing:
    """Tests for env_names, env_to_map and env_report."""

    def test_env_names(self):
        assert env_names(AppSettings()) == [
            "PORT",
            "API_KEY",
            "SENTRY_DSN",
            "SHARED_URL",
            "DEBUG_DUMP",
            "DB_HOST",
            "DB_PASSWORD",
        ]

    def test_env_names_no_defaults(self):
        assert env_names_no_defaults(AppSettings()) == [
            "API_KEY",
            "SENTRY_DSN",
            "SHARED_URL",
            "DB_PASSWORD",
        ]

    def test_env_to_map(self):
        environ = {"API_KEY": "k", "DB_PASSWORD": "p"}

        result = env_to_map(AppSettings(), environ=environ)

        assert result["PORT"] == "8080"
        assert result["API_KEY"] == "k"
        assert result["SENTRY_DSN"] == ""
        assert "APP_NAME" not in result

    def test_env_to_map_required_missing(self):
        with pytest.raises(MissingRequiredValueError):
            env_to_map(AppSettings(), environ={"API_KEY": "k"})

    def test_env_report_masks_and_hides(self):
        environ = {"API_KEY": "k", "DB_PASSWORD": "hunter2"}

        report = env_report(AppSettings(), environ=environ)

        assert report["DB_PASSWORD"] == "********"
        assert "DEBUG_DUMP" not in report
        assert report["API_KEY"] == "k"

    def test_env_report_tolerates_missing_required(self):
        report = env_report(AppSettings(), environ={})

        assert report["API_KEY"] == ""
        assert report["DB_PASSWORD"] == ""


class TestEnvVar:
    """Tests for the direct environment helpers."""

    def test_env_var(self):
        assert env_var("X", environ={"X": ""}) == ""

    def test_env_var_missing(self):
        with pytest.raises(NotFoundError, match=r"env var \(X\) is not set"):
            env_var("X", environ={})

    def test_env_var_strict_rejects_empty(self):
        with pytest.raises(FieldConfError, match="is empty"):
            env_var_strict("X", environ={"X": ""})

    def test_env_var_strict(self):
        assert env_var_strict("X", environ={"X": "v"}) == "v"

    def test_env_var_optional(self):
        assert env_var_optional("X", environ={}) == ""


class TestConfig:
    """Tests for the Config facade."""

    def test_defaults(self):
        config = Config(Simple())

        assert config.prefix == ""
        assert config.is_prefix_enabled is False
        assert config.skip_defaults is True

    def test_prefix_flows_through(self):
        config = Config(Simple(), prefix="svc", environ={"SVC_COUNT": "9"})

        config.process_env()

        assert config.data.count == 9
        assert config.env_names() == ["SVC_NAME", "SVC_COUNT"]
        assert config.is_prefix_enabled is True

    def test_defaults_toggle(self):
        config = Config(Simple(), environ={})

        assert config.param_names("app") == []
        config.mark_defaults_as_included()
        assert config.param_names("app") == ["/app/NAME", "/app/COUNT"]
        config.mark_defaults_as_excluded()
        assert config.skip_defaults is True

    def test_report_and_map(self):
        config = Config(Simple(), environ={"NAME": "n"})

        assert config.env_to_map() == {"NAME": "n", "COUNT": "1"}
        assert config.env_report() == {"NAME": "n", "COUNT": "1"}
        assert config.env_names_no_defaults() == []

    def test_collect_and_fetch(self):
        config = Config(Simple(), skip_defaults=False, environ={"COUNT": "2"})

        assert config.collect_params_from_env("app") == {"/app/NAME": "svc", "/app/COUNT": "2"}
        store = MappingParameterStore({"/app/NAME": "a", "/app/COUNT": "b"})
        assert config.fetch_params("app", store) == {"/app/NAME": "a", "/app/COUNT": "b"}
