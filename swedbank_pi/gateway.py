"""Swedbank Payment Initiation API V3 gateway.

API endpoints:
  - GET /public/api/v3/agreement/providers - available banks (step 1)
  - POST /public/api/v3/transactions/providers/{bic} - initiate payment (step 2)
  - GET /public/api/v3/transactions/{id}/status - payment status (step 3)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from .config import GatewayConfig, load_config
from .messages import (
    FetchProvidersRequest,
    FetchProvidersResponse,
    FetchTransactionRequest,
    FetchTransactionResponse,
    PurchaseParameters,
    PurchaseRequest,
    PurchaseResponse,
)
from .observers import ExchangeObserver, LoggingObserver
from .providers import ProviderResolver, resolve_provider
from .security.keys import KeyProvider

logger = logging.getLogger(__name__)


class Gateway:
    """Entry point for signed calls to the bank.

    Use as an async context manager so the HTTP client is closed::

        async with Gateway(load_config()) as gateway:
            providers = await gateway.get_providers()
    """

    name = "Swedbank"

    def __init__(
        self,
        config: Optional[GatewayConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
        observer: Optional[ExchangeObserver] = None,
        resolver: Optional[ProviderResolver] = None,
        keys: Optional[KeyProvider] = None,
    ) -> None:
        self.config = config or load_config()
        self.keys = keys or KeyProvider.from_config(self.config)
        self.observer = observer or LoggingObserver()
        self.resolver = resolver
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(timeout=self.config.timeout)

    async def __aenter__(self) -> "Gateway":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()

    def resolve_provider(self, payment_type: Optional[str]) -> str:
        return resolve_provider(payment_type, self.resolver)

    async def get_providers(self) -> FetchProvidersResponse:
        """List the banks available under the merchant agreement."""
        return await FetchProvidersRequest(self).send()

    async def purchase(self, **parameters: Any) -> PurchaseResponse:
        """Initiate a payment.

        Keyword arguments are the fields of
        :class:`~swedbank_pi.messages.PurchaseParameters`. When ``provider``
        is omitted it is resolved from ``payment_type``.
        """
        request = PurchaseRequest(self, PurchaseParameters(**parameters))
        params = request.parameters
        logger.info(f"Initiating {params.amount} {params.currency} payment via {request.provider}")
        return await request.send()

    async def fetch_transaction(self, transaction_reference: str) -> FetchTransactionResponse:
        """Fetch the status of a payment by the bank's transaction id."""
        return await FetchTransactionRequest(self, transaction_reference).send()

    async def complete_purchase(self, transaction_reference: str) -> FetchTransactionResponse:
        """Handle the customer's return from the bank; alias of :meth:`fetch_transaction`."""
        return await self.fetch_transaction(transaction_reference)
