"""Step 3: poll the status of an initiated payment."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, Optional

from ..constants import FAILED_STATUSES, PENDING_STATUSES, SUCCESS_STATUSES, TRANSACTION_STATUS_PATH
from ..validation import require
from .base import BankRequest, BankResponse

if TYPE_CHECKING:
    from ..gateway import Gateway


class FetchTransactionResponse(BankResponse):
    """Status of a payment as reported by the bank."""

    @property
    def status(self) -> Optional[str]:
        return self._get("status")

    def is_successful(self) -> bool:
        return super().is_successful() and self.status in SUCCESS_STATUSES

    def is_pending(self) -> bool:
        return self.status in PENDING_STATUSES

    def is_failed(self) -> bool:
        return self.status in FAILED_STATUSES

    def is_cancelled(self) -> bool:
        return self.status == "CANCELLED_BY_USER"

    @property
    def transaction_reference(self) -> Optional[str]:
        return self._get("transactionId")

    @property
    def transaction_id(self) -> Optional[str]:
        return self.transaction_reference

    @property
    def amount(self) -> Optional[str]:
        return self._get("amount")

    @property
    def currency(self) -> Optional[str]:
        return self._get("currency")

    @property
    def debtor_name(self) -> Optional[str]:
        return self._get("debtor")

    @property
    def debtor_account(self) -> Optional[str]:
        return self._get("debtorAccount")

    @property
    def debtor_bic(self) -> Optional[str]:
        return self._get("debtorBic")

    provider = debtor_bic

    @property
    def creditor_name(self) -> Optional[str]:
        return self._get("creditor")

    @property
    def creditor_account(self) -> Optional[str]:
        return self._get("creditorAccount")

    @property
    def creditor_bic(self) -> Optional[str]:
        return self._get("creditorBic")

    @property
    def description(self) -> Optional[str]:
        return self._get("description")

    @property
    def reference(self) -> Optional[str]:
        return self._get("reference")

    @property
    def reference_type(self) -> Optional[str]:
        return self._get("referenceType")

    @property
    def remittance_information(self) -> Optional[str]:
        return self.description or self.reference

    @property
    def end_to_end_id(self) -> Optional[str]:
        return self._get("endToEndIdentification")

    @property
    def payment_type(self) -> Optional[str]:
        return self._get("paymentType")

    @property
    def created_at(self) -> Optional[str]:
        return self._get("createdAt")

    @property
    def status_updated_at(self) -> Optional[str]:
        return self._get("statusUpdatedAt")

    @property
    def status_checked_at(self) -> Optional[str]:
        return self._get("statusCheckedAt")

    @property
    def error_details(self) -> Optional[str]:
        return self._get("errorDetails")

    @property
    def error_labels(self) -> Optional[Dict[str, str]]:
        return self._get("errorLabels")

    @property
    def rejection_reason(self) -> Optional[str]:
        """``errorDetails``, else the first localised ``errorLabels`` entry."""
        if self.error_details:
            return self.error_details
        labels = self.error_labels
        if isinstance(labels, dict) and labels:
            return next(iter(labels.values())) or None
        if isinstance(labels, list) and labels:
            return labels[0] or None
        return None

    def payment_details(self) -> Dict[str, Any]:
        return {
            "transactionId": self.transaction_reference,
            "status": self.status,
            "amount": self.amount,
            "currency": self.currency,
            "paymentType": self.payment_type,
            "debtorBic": self.debtor_bic,
            "debtor": self.debtor_name,
            "debtorAccount": self.debtor_account,
            "creditorBic": self.creditor_bic,
            "creditor": self.creditor_name,
            "creditorAccount": self.creditor_account,
            "reference": self.reference,
            "referenceType": self.reference_type,
            "description": self.description,
            "endToEndIdentification": self.end_to_end_id,
            "createdAt": self.created_at,
            "statusUpdatedAt": self.status_updated_at,
            "statusCheckedAt": self.status_checked_at,
            "errorDetails": self.error_details,
            "errorLabels": self.error_labels,
        }


class FetchTransactionRequest(BankRequest):
    """``GET /public/api/v3/transactions/{id}/status``.

    Sent without a body; the signature covers the empty string.
    """

    http_method = "GET"
    response_class = FetchTransactionResponse

    def __init__(self, gateway: "Gateway", transaction_reference: Optional[str]) -> None:
        super().__init__(gateway)
        self.transaction_reference = transaction_reference

    def get_data(self) -> None:
        require(transactionReference=self.transaction_reference)
        return None

    def endpoint(self) -> str:
        return self.gateway.config.resolved_base_url + TRANSACTION_STATUS_PATH.format(
            reference=self.transaction_reference
        )

    def log_context(self) -> Dict[str, Any]:
        return {"transaction_id": self.transaction_reference}

