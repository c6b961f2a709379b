"""Tests for configuration loading."""

import pytest
from pydantic import ValidationError

from swedbank_pi.config import GatewayConfig, load_config
from swedbank_pi.constants import DEFAULT_MAX_SIGNATURE_AGE


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in ("SWEDBANK_GATEWAY_URL", "SWEDBANK_MERCHANT_ID", "SWEDBANK_COUNTRY"):
        monkeypatch.delenv(name, raising=False)


def test_load_config_from_env(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text(
        """
merchant_id: SELLER123
country: ee
algorithm: ES256
locale: ET
private_key_path: /etc/swedbank/merchant.pem
"""
    )
    monkeypatch.setenv("SWEDBANK_PI_CONFIG", str(config_path))

    config = load_config()
    assert config.merchant_id == "SELLER123"
    assert config.country == "EE"
    assert config.algorithm == "ES256"
    assert config.locale == "et"
    assert config.private_key_path == "/etc/swedbank/merchant.pem"
    assert config.max_signature_age == DEFAULT_MAX_SIGNATURE_AGE == 120


def test_load_config_defaults_without_file(tmp_path):
    config = load_config(str(tmp_path / "absent.yaml"))
    assert config == GatewayConfig()
    assert config.resolved_base_url == "https://pi.swedbank.com"


def test_environment_overrides(tmp_path, monkeypatch):
    monkeypatch.setenv("SWEDBANK_GATEWAY_URL", "https://proxy.example.com/bank/")
    monkeypatch.setenv("SWEDBANK_MERCHANT_ID", "ENV1")
    monkeypatch.setenv("SWEDBANK_COUNTRY", "lt")

    config = load_config(str(tmp_path / "absent.yaml"))
    assert config.merchant_id == "ENV1"
    assert config.country == "LT"
    assert config.resolved_base_url == "https://proxy.example.com/bank"


def test_explicit_base_url_wins_over_environment(tmp_path, monkeypatch):
    config_path = tmp_path / "config.yaml"
    config_path.write_text("base_url: https://custom.example.com/\n")
    monkeypatch.setenv("SWEDBANK_GATEWAY_URL", "https://proxy.example.com")

    assert load_config(str(config_path)).resolved_base_url == "https://custom.example.com"


def test_sandbox_url_in_test_mode():
    config = GatewayConfig(test_mode=True)
    assert config.resolved_base_url == "https://pi-playground.swedbank.com/sandbox"


def test_unknown_algorithm_rejected():
    with pytest.raises(ValidationError, match="Unsupported algorithm"):
        GatewayConfig(algorithm="HS256")
