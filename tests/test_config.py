"""
Tests for import-time configuration: env overrides in config.py and the
dependency boundary of the parsing helpers.
"""

import importlib.util
import sys
from pathlib import Path

import pytest

from config_options import Misconfiguration

SENDER_DIR = Path(__file__).resolve().parent.parent / "eth_sender"


def _load_isolated(module_name: str, alias: str):
    """Execute a module file under a fresh name, leaving sys.modules untouched."""
    spec = importlib.util.spec_from_file_location(alias, SENDER_DIR / f"{module_name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


class TestTickOverride:
    def test_default(self, monkeypatch):
        monkeypatch.delenv("GAS_ADJUSTER_TICK_SECONDS", raising=False)
        cfg = _load_isolated("config", "config_under_test")
        assert cfg.GAS_ADJUSTER_TICK_SECONDS == 15

    def test_override(self, monkeypatch):
        monkeypatch.setenv("GAS_ADJUSTER_TICK_SECONDS", "5")
        cfg = _load_isolated("config", "config_under_test")
        assert cfg.GAS_ADJUSTER_TICK_SECONDS == 5

    @pytest.mark.parametrize("raw", ["0", "-10", "ten"])
    def test_rejects_non_positive_or_malformed(self, monkeypatch, raw):
        monkeypatch.setenv("GAS_ADJUSTER_TICK_SECONDS", raw)
        with pytest.raises(Misconfiguration) as exc_info:
            _load_isolated("config", "config_under_test")
        assert exc_info.value.name == "GAS_ADJUSTER_TICK_SECONDS"


def test_deployed_defaults_to_true(monkeypatch):
    monkeypatch.delenv("DEPLOYED", raising=False)
    cfg = _load_isolated("config", "config_under_test")
    assert cfg.DEPLOYED is True


def test_parsing_helpers_do_not_need_web_stack(monkeypatch):
    # A None entry in sys.modules makes any import of that name fail.
    monkeypatch.setitem(sys.modules, "fastapi", None)
    monkeypatch.setitem(sys.modules, "fastapi.responses", None)

    options = _load_isolated("config_options", "config_options_under_test")

    monkeypatch.setenv("ETH_GAS_TEST_SETTING", "30")
    assert options.parse_env("ETH_GAS_TEST_SETTING", int) == 30
