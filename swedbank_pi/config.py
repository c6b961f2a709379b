from __future__ import annotations

import os
from typing import Optional

import yaml
from pydantic import BaseModel, field_validator

from .constants import DEFAULT_MAX_SIGNATURE_AGE, PRODUCTION_BASE_URL, SANDBOX_BASE_URL
from .security.algorithms import ALGORITHMS, DEFAULT_ALGORITHM


class GatewayConfig(BaseModel):
    """Merchant agreement and connection settings."""

    merchant_id: str = ""
    country: str = "LV"
    private_key: str = ""
    private_key_path: Optional[str] = None
    bank_public_key: str = ""
    bank_public_key_path: Optional[str] = None
    algorithm: str = DEFAULT_ALGORITHM
    locale: str = "en"
    test_mode: bool = False
    base_url: Optional[str] = None
    max_signature_age: int = DEFAULT_MAX_SIGNATURE_AGE
    timeout: float = 30.0

    @field_validator("country")
    @classmethod
    def _upper_country(cls, value: str) -> str:
        return value.upper()

    @field_validator("locale")
    @classmethod
    def _lower_locale(cls, value: str) -> str:
        return value.lower()

    @field_validator("algorithm")
    @classmethod
    def _known_algorithm(cls, value: str) -> str:
        if value not in ALGORITHMS:
            raise ValueError(
                f"Unsupported algorithm: {value}. Supported: {', '.join(ALGORITHMS)}"
            )
        return value

    @property
    def resolved_base_url(self) -> str:
        """API root without a trailing slash."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return SANDBOX_BASE_URL if self.test_mode else PRODUCTION_BASE_URL


def load_config(path: Optional[str] = None) -> GatewayConfig:
    """Load configuration from YAML file.

    Args:
        path: Optional path to config file. Falls back to SWEDBANK_PI_CONFIG env
            variable or 'config.yaml' in the current directory.
    """

    config_path = path or os.getenv("SWEDBANK_PI_CONFIG", "config.yaml")
    if os.path.exists(config_path):
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}
        config = GatewayConfig(**data)
    else:
        config = GatewayConfig()

    env_url = os.getenv("SWEDBANK_GATEWAY_URL")
    if env_url and not config.base_url:
        config.base_url = env_url
    env_merchant = os.getenv("SWEDBANK_MERCHANT_ID")
    if env_merchant:
        config.merchant_id = env_merchant
    env_country = os.getenv("SWEDBANK_COUNTRY")
    if env_country:
        config.country = env_country.upper()
    return config
