"""Mapping of application payment types to provider BIC codes."""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable

from .constants import DEFAULT_BIC


@runtime_checkable
class ProviderResolver(Protocol):
    """Maps an application-specific payment type to a provider BIC."""

    def resolve(self, payment_type: str) -> Optional[str]:
        ...


class MappingResolver:
    """Resolver backed by a static ``payment_type -> BIC`` table."""

    def __init__(self, mapping: dict[str, str]) -> None:
        self.mapping = dict(mapping)

    def resolve(self, payment_type: str) -> Optional[str]:
        return self.mapping.get(payment_type)


def resolve_provider(
    payment_type: Optional[str], resolver: Optional[ProviderResolver] = None
) -> str:
    """Return the BIC for ``payment_type``.

    Without a payment type the Swedbank default BIC is used. Otherwise the
    resolver's answer wins when it has one, and the payment type itself is
    assumed to already be a BIC.
    """
    if not payment_type:
        return DEFAULT_BIC

    if resolver is not None:
        resolved = resolver.resolve(payment_type)
        if resolved:
            return resolved

    return payment_type
