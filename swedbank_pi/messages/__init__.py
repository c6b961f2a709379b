"""Request and response messages for the Payment Initiation API V3."""

from .base import BankRequest, BankResponse, encode_body
from .providers import FetchProvidersRequest, FetchProvidersResponse
from .purchase import PurchaseParameters, PurchaseRequest, PurchaseResponse
from .transaction import FetchTransactionRequest, FetchTransactionResponse

__all__ = [
    "BankRequest",
    "BankResponse",
    "FetchProvidersRequest",
    "FetchProvidersResponse",
    "FetchTransactionRequest",
    "FetchTransactionResponse",
    "PurchaseParameters",
    "PurchaseRequest",
    "PurchaseResponse",
    "encode_body",
]
