"""Step 1: list of banks available under the merchant agreement."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from ..constants import PROVIDERS_PATH
from .base import BankRequest, BankResponse


class FetchProvidersResponse(BankResponse):
    def is_successful(self) -> bool:
        return super().is_successful() and isinstance(self.data, (list, dict))

    @property
    def providers(self) -> List[Dict[str, Any]]:
        # V3 returns a bare array; older payloads wrap it in "providers"
        if isinstance(self.data, list):
            items = self.data
        elif isinstance(self.data, dict):
            items = self.data.get("providers") or []
        else:
            items = []
        return [item for item in items if isinstance(item, dict)]

    def get_provider(self, bic: str) -> Optional[Dict[str, Any]]:
        """Find a provider by ``bic``, falling back to its ``id``."""
        for provider in self.providers:
            if provider.get("bic") == bic or provider.get("id") == bic:
                return provider
        return None

    def providers_by_country(self, country: str) -> List[Dict[str, Any]]:
        return [p for p in self.providers if p.get("country") == country.upper()]

    def is_provider_available(self, bic: str) -> bool:
        return self.get_provider(bic) is not None

    def provider_names(self, locale: str = "en", use_long_name: bool = False) -> Dict[str, str]:
        """Map each provider BIC to its display name in ``locale``.

        Falls back to the English name, then ``name``, then the BIC itself.
        """
        name_type = "longNames" if use_long_name else "shortNames"
        names: Dict[str, str] = {}
        for provider in self.providers:
            bic = provider.get("bic")
            if not bic:
                continue
            localized = (provider.get("names") or {}).get(name_type) or {}
            names[bic] = localized.get(locale) or localized.get("en") or provider.get("name") or bic
        return names


class FetchProvidersRequest(BankRequest):
    """``GET /public/api/v3/agreement/providers``.

    The body is empty and the signature covers the empty string. No ``[]``
    placeholder body is sent with the GET, matching the status call.
    """

    http_method = "GET"
    response_class = FetchProvidersResponse

    def endpoint(self) -> str:
        return self.gateway.config.resolved_base_url + PROVIDERS_PATH
