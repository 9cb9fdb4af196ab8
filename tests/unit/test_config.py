"""Tests for the YAML config loader."""

from __future__ import annotations

from pathlib import Path

import pytest

from hivewatch.config.loader import load_config
from hivewatch.config.schema import HivewatchConfig
from hivewatch.errors import ConfigurationError


def test_missing_file_gives_defaults(tmp_path: Path) -> None:
    assert load_config(tmp_path / "nope.yaml") == HivewatchConfig()
    assert load_config(None) == HivewatchConfig()


def test_full_document(tmp_path: Path) -> None:
    cfg_path = tmp_path / "hivewatch.yaml"
    cfg_path.write_text(
        """discovery:
  tmux_binary: /usr/local/bin/tmux
  timeout_seconds: 0.5
  poll_interval_seconds: 3
metrics:
  latency_window: 500
logging:
  debug: true
  json: true
""",
        encoding="utf-8",
    )
    cfg = load_config(cfg_path)
    assert cfg.discovery.tmux_binary == "/usr/local/bin/tmux"
    assert cfg.discovery.timeout_seconds == 0.5
    assert cfg.discovery.poll_interval_seconds == 3
    assert cfg.metrics.latency_window == 500
    assert cfg.logging.debug is True
    assert cfg.logging.json is True


def test_unknown_keys_are_ignored(tmp_path: Path) -> None:
    cfg_path = tmp_path / "c.yaml"
    cfg_path.write_text("discovery:\n  colour: blue\nextra: 1\n", encoding="utf-8")
    assert load_config(cfg_path) == HivewatchConfig()


def test_non_mapping_document_gives_defaults(tmp_path: Path) -> None:
    cfg_path = tmp_path / "c.yaml"
    cfg_path.write_text("- just\n- a list\n", encoding="utf-8")
    assert load_config(cfg_path) == HivewatchConfig()


def test_null_latency_window_means_unbounded(tmp_path: Path) -> None:
    cfg_path = tmp_path / "c.yaml"
    cfg_path.write_text("metrics:\n  latency_window: null\n", encoding="utf-8")
    assert load_config(cfg_path).metrics.latency_window is None


@pytest.mark.parametrize(
    ("text", "key"),
    [
        ("discovery:\n  timeout_seconds: -1\n", "discovery.timeout_seconds"),
        ("discovery:\n  timeout_seconds: soon\n", "discovery.timeout_seconds"),
        ("discovery:\n  poll_interval_seconds: 0\n", "discovery.poll_interval_seconds"),
        ("discovery:\n  tmux_binary: ''\n", "discovery.tmux_binary"),
        ("metrics:\n  latency_window: 0\n", "metrics.latency_window"),
        ("metrics:\n  latency_window: true\n", "metrics.latency_window"),
        ("logging:\n  debug: yes please\n", "logging.debug"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, text: str, key: str) -> None:
    cfg_path = tmp_path / "c.yaml"
    cfg_path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as info:
        load_config(cfg_path)
    assert info.value.key == key


def test_unparseable_yaml_raises(tmp_path: Path) -> None:
    cfg_path = tmp_path / "c.yaml"
    cfg_path.write_text("discovery: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_config(cfg_path)
