"""Tests for fieldconf.sources.cli module."""

from dataclasses import dataclass

import click
import pytest
from click.testing import CliRunner

from fieldconf.conf import bind_cli, process_cli
from fieldconf.field import conf
from fieldconf.sources.cli import ClickFlagSource, param_name
from fieldconf.sources.files import DictSource
from fieldconf.utils.errors import BackendError, ResolutionErrors


@dataclass
class ServeSettings:
    host: str = conf("cli:host,cli-s:H,cli-u:address to bind,default:127.0.0.1")
    port: int = conf("cli:port,default:8080")
    verbose: bool = conf("cli:verbose,cli-s:V,default:false")
    log_level: str = conf("cli:log-level,default:info")
    workers: int = conf("default:1")


@dataclass
class Clashing:
    first: str = conf("cli:name")
    second: str = conf("cli:name")


@dataclass
class BadBoolDefault:
    flag: bool = conf("cli:flag,default:maybe")


@dataclass
class RequiresToken:
    token: str = conf("cli:token,required")
    count: int = conf("cli:count")


def _command(spec, environ=None, files=None) -> click.Command:
    @click.command()
    @click.pass_context
    def serve(ctx, **_):
        process_cli(ctx, spec, environ=environ or {}, files=files)
        click.echo(f"{spec!r}")

    bind_cli(serve, spec)
    return serve


class TestBindCli:
    """Tests for bind_cli."""

    def test_only_cli_fields_bound(self):
        command = click.Command("serve")

        bound = bind_cli(command, ServeSettings())

        assert [f.name for f in bound] == ["host", "port", "verbose", "log_level"]
        assert [p.name for p in command.params] == ["host", "port", "verbose", "log_level"]

    def test_options_carry_short_flag_usage_and_default(self):
        command = click.Command("serve")
        bind_cli(command, ServeSettings())
        host = command.params[0]

        assert "--host" in host.opts
        assert "-H" in host.opts
        assert host.help == "address to bind"
        assert host.default == "127.0.0.1"

    def test_bool_is_switch(self):
        command = click.Command("serve")
        bind_cli(command, ServeSettings())
        verbose = command.params[2]

        assert verbose.is_flag is True
        assert "--no-verbose" in verbose.secondary_opts
        assert verbose.default is False

    def test_duplicate_flag_rejected(self):
        with pytest.raises(BackendError, match="already defined"):
            bind_cli(click.Command("x"), Clashing())

    def test_invalid_bool_default(self):
        with pytest.raises(BackendError, match="invalid default"):
            bind_cli(click.Command("x"), BadBoolDefault())

    def test_param_name(self):
        assert param_name("log-level") == "log_level"


class TestProcessCli:
    """Resolution through a click command."""

    def test_flags_override_environment(self):
        spec = ServeSettings()
        runner = CliRunner()

        result = runner.invoke(
            _command(spec, environ={"PORT": "9000", "HOST": "0.0.0.0"}),
            ["--port", "7000", "-V"],
        )

        assert result.exit_code == 0, result.output
        assert spec.port == 7000
        assert spec.verbose is True
        assert spec.host == "0.0.0.0"

    def test_flag_defaults_do_not_beat_environment(self):
        spec = ServeSettings()

        result = CliRunner().invoke(_command(spec, environ={"LOG_LEVEL": "warn"}), [])

        assert result.exit_code == 0, result.output
        assert spec.log_level == "warn"
        assert spec.host == "127.0.0.1"
        assert spec.workers == 1

    def test_empty_flag_falls_through_to_environment(self):
        spec = ServeSettings()

        result = CliRunner().invoke(_command(spec, environ={"PORT": "9000"}), ["--port", ""])

        assert result.exit_code == 0, result.output
        assert spec.port == 9000

    def test_empty_flag_falls_through_to_default(self):
        spec = ServeSettings()

        result = CliRunner().invoke(_command(spec), ["--port", ""])

        assert result.exit_code == 0, result.output
        assert spec.port == 8080

    def test_files_used_below_environment(self):
        spec = ServeSettings()
        files = DictSource({"workers": 4, "log_level": "debug"})

        result = CliRunner().invoke(_command(spec, files=files), [])

        assert result.exit_code == 0, result.output
        assert spec.workers == 4
        assert spec.log_level == "debug"

    def test_errors_aggregated(self):
        spec = RequiresToken()

        result = CliRunner().invoke(_command(spec), ["--count", "many"])

        assert isinstance(result.exception, ResolutionErrors)
        assert len(result.exception.errors) == 2


class TestClickFlagSource:
    """Tests for ClickFlagSource."""

    def test_unknown_flag(self):
        ctx = click.Context(click.Command("x"))

        assert ClickFlagSource(ctx).lookup("missing") == ("", False)

    def test_reports_commandline_source(self):
        seen = {}

        @click.command()
        @click.option("--level", default="info")
        @click.pass_context
        def cmd(ctx, level):
            seen["lookup"] = ClickFlagSource(ctx).lookup("level")

        CliRunner().invoke(cmd, ["--level", "debug"])
        assert seen["lookup"] == ("debug", True)

        CliRunner().invoke(cmd, [])
        assert seen["lookup"] == ("info", False)
