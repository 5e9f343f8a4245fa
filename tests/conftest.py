"""Shared pytest fixtures for fieldconf tests."""

from pathlib import Path

import pytest


@pytest.fixture
def environ() -> dict[str, str]:
    """An isolated environment mapping for sources that accept ``environ``."""
    return {}


@pytest.fixture
def config_yaml(tmp_path: Path) -> Path:
    """Create a YAML config file with nested sections."""
    config_file = tmp_path / "config.yaml"
    config_file.write_text(
        """# fieldconf test configuration
name: from-file
port: 7000
tags:
  - alpha
  - beta
db:
  host: db.internal
  maxConns: 25
limits:
  cpu: 2
  mem: 512
"""
    )
    return config_file


@pytest.fixture
def config_json(tmp_path: Path) -> Path:
    """Create a JSON config file."""
    config_file = tmp_path / "config.json"
    config_file.write_text('{"name": "from-json", "db": {"host": "json.internal"}}')
    return config_file
