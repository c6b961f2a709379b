"""Field checks applied to purchase requests before they are signed."""

from __future__ import annotations

import re
from decimal import Decimal
from typing import Optional

from pydantic import HttpUrl, TypeAdapter, ValidationError

from .constants import (
    MAX_DESCRIPTION_LENGTH,
    MAX_REFERENCE_LENGTH,
    MAX_URL_LENGTH,
    SUPPORTED_CURRENCIES,
    SUPPORTED_LOCALES,
)

_AMOUNT_RE = re.compile(r"^\d+(\.\d{1,2})?$")
_RF_RE = re.compile(r"^RF\d{2}[A-Z0-9]{1,23}$", re.IGNORECASE)
_url_adapter = TypeAdapter(HttpUrl)


class InvalidRequestError(ValueError):
    """A request parameter is missing or does not satisfy the API rules."""


def require(**fields: object) -> None:
    """Raise for the first empty value in ``fields``."""
    for name, value in fields.items():
        if value is None or value == "":
            raise InvalidRequestError(f"The {name} parameter is required")


def validate_amount(amount: str) -> None:
    if not _AMOUNT_RE.match(amount) or Decimal(amount) <= 0:
        raise InvalidRequestError(
            "Amount must be a positive number with up to 2 decimal places (e.g., 10.00)"
        )


def validate_currency(currency: str) -> None:
    if currency not in SUPPORTED_CURRENCIES:
        raise InvalidRequestError("Invalid currency. Only EUR is supported in V3 API")


def validate_locale(locale: str) -> None:
    if locale not in SUPPORTED_LOCALES:
        raise InvalidRequestError(f"Invalid locale. Supported: {', '.join(SUPPORTED_LOCALES)}")


def validate_https_url(url: str, label: str) -> None:
    """Check that ``url`` is an absolute HTTPS URL within the length limit."""
    if len(url) > MAX_URL_LENGTH:
        raise InvalidRequestError(
            f"{label} exceeds maximum length of {MAX_URL_LENGTH} characters"
        )
    try:
        _url_adapter.validate_python(url)
    except ValidationError:
        raise InvalidRequestError(f"{label} is not a valid URL format") from None
    if not url.lower().startswith("https://"):
        raise InvalidRequestError(f"{label} must use HTTPS protocol")


def is_valid_rf_reference(reference: str) -> bool:
    """Check an ISO 11649 creditor reference (``RF`` + check digits + body)."""
    if not _RF_RE.match(reference):
        return False
    rearranged = (reference[4:] + reference[:4]).upper()
    numeric = "".join(str(int(char, 36)) for char in rearranged)
    return int(numeric) % 97 == 1


def validate_remittance(
    description: Optional[str], reference: Optional[str], country: str
) -> None:
    """Check description and structured reference rules for ``country``.

    Estonian domestic payments may carry both; elsewhere only one of the two
    is allowed.
    """
    if description and len(description) > MAX_DESCRIPTION_LENGTH:
        raise InvalidRequestError(
            f"Description exceeds maximum length of {MAX_DESCRIPTION_LENGTH} characters"
        )

    if reference:
        if reference.startswith("RF") and not is_valid_rf_reference(reference):
            raise InvalidRequestError(
                "Invalid RF reference number format (must be ISO11649 compliant)"
            )
        if len(reference) > MAX_REFERENCE_LENGTH:
            raise InvalidRequestError(
                f"Reference exceeds maximum length of {MAX_REFERENCE_LENGTH} characters"
            )

    if country.upper() != "EE" and description and reference:
        raise InvalidRequestError(
            "For cross-border or Latvia/Lithuania payments, provide either "
            "description or reference, but not both"
        )
