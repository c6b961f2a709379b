"""Step 2: initiate a payment with the selected provider."""

from __future__ import annotations

from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional

from pydantic import BaseModel, Field, field_validator

from ..constants import PURCHASE_PATH
from ..validation import (
    require,
    validate_amount,
    validate_currency,
    validate_https_url,
    validate_locale,
    validate_remittance,
)
from .base import BankRequest, BankResponse

if TYPE_CHECKING:
    from ..gateway import Gateway


class PurchaseParameters(BaseModel):
    """Caller-supplied purchase fields."""

    provider: Optional[str] = None
    amount: Optional[str] = None
    currency: str = "EUR"
    return_url: Optional[str] = None
    notification_url: Optional[str] = None
    locale: Optional[str] = None
    description: Optional[str] = None
    reference: Optional[str] = None
    payment_type: Optional[str] = Field(
        default=None, description="Application payment type resolved to a BIC"
    )

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float, Decimal)) and not isinstance(value, bool):
            return str(value)
        return value

    @field_validator("locale")
    @classmethod
    def _lower_locale(cls, value: Optional[str]) -> Optional[str]:
        return value.lower() if value else value


class PurchaseResponse(BankResponse):
    """The payment is never complete here; the customer must authorise it."""

    def is_successful(self) -> bool:
        return False

    def is_redirect(self) -> bool:
        return super().is_successful() and bool(self.redirect_url)

    @property
    def redirect_url(self) -> Optional[str]:
        return self._url("redirect")

    @property
    def redirect_method(self) -> str:
        return "GET"

    @property
    def status_url(self) -> Optional[str]:
        return self._url("status")

    def _url(self, kind: str) -> Optional[str]:
        urls = self._get("urls")
        if not isinstance(urls, dict):
            return None
        return urls.get(kind)


class PurchaseRequest(BankRequest):
    """``POST /public/api/v3/transactions/providers/{bic}``."""

    http_method = "POST"
    response_class = PurchaseResponse

    def __init__(self, gateway: "Gateway", parameters: PurchaseParameters) -> None:
        super().__init__(gateway)
        self.parameters = parameters

    @property
    def provider(self) -> str:
        if self.parameters.provider:
            return self.parameters.provider
        return self.gateway.resolve_provider(self.parameters.payment_type)

    @property
    def locale(self) -> str:
        return self.parameters.locale or self.gateway.config.locale

    def validate(self) -> None:
        """Raise :class:`~swedbank_pi.validation.InvalidRequestError` on bad input."""
        p = self.parameters
        require(
            provider=self.provider,
            amount=p.amount,
            currency=p.currency,
            returnUrl=p.return_url,
            notificationUrl=p.notification_url,
            locale=self.locale,
        )
        validate_amount(p.amount)
        validate_currency(p.currency)
        validate_locale(self.locale)
        validate_https_url(p.return_url, "Redirect URL")
        validate_https_url(p.notification_url, "Notification URL")
        validate_remittance(p.description, p.reference, self.gateway.config.country)

    def get_data(self) -> Dict[str, Any]:
        self.validate()
        p = self.parameters
        data: Dict[str, Any] = {
            "amount": p.amount,
            "currency": p.currency,
            "redirectUrl": p.return_url,
            "notificationUrl": p.notification_url,
            "locale": self.locale,
        }
        if p.description:
            data["description"] = p.description
        if p.reference:
            data["reference"] = p.reference
        return data

    def endpoint(self) -> str:
        return self.gateway.config.resolved_base_url + PURCHASE_PATH.format(bic=self.provider)
