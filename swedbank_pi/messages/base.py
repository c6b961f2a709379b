"""Signed request/response exchange shared by all API calls."""

from __future__ import annotations

import abc
import json
import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any, Dict, List, Optional

import httpx

from ..constants import SIGNATURE_HEADER
from ..security import jws
from ..security.exceptions import JwsError

if TYPE_CHECKING:
    from ..gateway import Gateway

logger = logging.getLogger(__name__)


def encode_body(data: Optional[Dict[str, Any]]) -> bytes:
    """Serialize a request body exactly as it will be signed and sent."""
    if not data:
        return b""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


class BankResponse:
    """Parsed API response plus the outcome of its signature check."""

    def __init__(
        self,
        request: Optional["BankRequest"],
        data: Any,
        status_code: int = 200,
        signature_valid: Optional[bool] = None,
        signature_error: Optional[str] = None,
    ) -> None:
        self.request = request
        self.data = data if data is not None else {}
        self.status_code = status_code
        self.signature_valid = signature_valid
        self.signature_error = signature_error

    def _get(self, key: str) -> Any:
        return self.data.get(key) if isinstance(self.data, dict) else None

    @property
    def signature_invalid(self) -> bool:
        return self.signature_valid is False

    def is_successful(self) -> bool:
        return (
            200 <= self.status_code < 300
            and self._get("error") is None
            and not self.signature_invalid
        )

    @property
    def message(self) -> Optional[str]:
        if self.signature_invalid:
            msg = "Invalid response signature from bank"
            if self.signature_error:
                msg += f": {self.signature_error}"
            return msg
        for key in ("error", "message"):
            if self._get(key) is not None:
                return str(self._get(key))

        messages: List[str] = []
        for error in self._error_group("general"):
            if "message" in error:
                messages.append(error["message"])
        for error in self._error_group("fields"):
            if "field" in error and "message" in error:
                messages.append(f"{error['field']}: {error['message']}")
            elif "message" in error:
                messages.append(error["message"])
        if messages:
            return "; ".join(messages)

        errors = self._get("errors")
        if isinstance(errors, list):
            collected = []
            for error in errors:
                if isinstance(error, dict) and "message" in error:
                    collected.append(error["message"])
                elif isinstance(error, str):
                    collected.append(error)
            return "; ".join(collected)
        return None

    @property
    def code(self) -> Optional[str]:
        if self._get("code") is not None:
            return str(self._get("code"))
        for group in ("general", "fields"):
            for error in self._error_group(group):
                if "code" in error:
                    return str(error["code"])
        for error in _dict_items(self._get("errors")):
            if "code" in error:
                return str(error["code"])
        return None

    @property
    def transaction_reference(self) -> Optional[str]:
        return self._get("id")

    @property
    def transaction_id(self) -> Optional[str]:
        return self._get("merchantTransactionId")

    def _error_group(self, group: str) -> List[Dict[str, Any]]:
        error_messages = self._get("errorMessages")
        if not isinstance(error_messages, dict):
            return []
        return _dict_items(error_messages.get(group))

    @property
    def field_errors(self) -> Dict[str, str]:
        return {
            e["field"]: e["message"]
            for e in self._error_group("fields")
            if "field" in e and "message" in e
        }

    @property
    def general_errors(self) -> Dict[str, str]:
        return {
            e["code"]: e["message"]
            for e in self._error_group("general")
            if "code" in e and "message" in e
        }


def _dict_items(value: Any) -> List[Dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, dict)]


class BankRequest(abc.ABC):
    """One signed call to the Payment Initiation API."""

    http_method = "POST"
    response_class = BankResponse

    def __init__(self, gateway: "Gateway") -> None:
        self.gateway = gateway

    @abc.abstractmethod
    def endpoint(self) -> str:
        """Absolute URL of the call; signed verbatim."""
        raise NotImplementedError

    def get_data(self) -> Optional[Dict[str, Any]]:
        """Body of the call, or ``None`` for an empty body."""
        return None

    def log_context(self) -> Dict[str, Any]:
        """Extra fields added to every observer record."""
        return {}

    def create_response(
        self,
        data: Any,
        status_code: int,
        signature_valid: Optional[bool] = None,
        signature_error: Optional[str] = None,
    ) -> BankResponse:
        return self.response_class(self, data, status_code, signature_valid, signature_error)

    async def send(self) -> BankResponse:
        """Sign, send and verify the call.

        Signing errors propagate. Transport failures are reported as an
        error response with status 500. A response whose signature is
        rejected is still returned, marked ``signature_invalid``.
        """
        config = self.gateway.config
        observer = self.gateway.observer
        body = encode_body(self.get_data())
        url = self.endpoint()

        signature = jws.sign(
            body,
            url,
            config.merchant_id,
            config.country,
            self.gateway.keys.get_signing_key(),
            config.algorithm,
        )

        observer.on_request(
            {
                "method": self.http_method,
                "url": url,
                "body": body,
                "jws_signature": signature,
                "merchant_id": config.merchant_id,
                "country": config.country,
                "algorithm": config.algorithm,
                **self.log_context(),
            }
        )

        headers = {"Accept": "application/json", SIGNATURE_HEADER: signature}
        if self.http_method == "POST":
            headers["Content-Type"] = "application/json"

        try:
            http_response = await self.gateway.client.request(
                self.http_method, url, headers=headers, content=body or None
            )
        except httpx.HTTPError as e:
            logger.error(f"{self.http_method} {url} failed: {e}")
            observer.on_response(
                {
                    "error": True,
                    "error_message": str(e),
                    "exception_class": type(e).__name__,
                    "timestamp": _timestamp(),
                    **self.log_context(),
                }
            )
            return self.create_response({"error": str(e), "status": "ERROR"}, 500)

        raw_body = http_response.content
        try:
            data = json.loads(raw_body) if raw_body else {}
        except ValueError:
            data = {}

        signature_valid, signature_error = self._verify_response(http_response, raw_body)

        observer.on_response(
            {
                "status": http_response.status_code,
                "body": raw_body,
                "signature_valid": signature_valid is not False,
                "signature_error": signature_error,
                "response_data": data,
                "timestamp": _timestamp(),
                **self.log_context(),
            }
        )
        return self.create_response(
            data, http_response.status_code, signature_valid, signature_error
        )

    def _verify_response(self, http_response: httpx.Response, raw_body: bytes) -> tuple:
        token = http_response.headers.get(SIGNATURE_HEADER)
        if token is None:
            return None, None
        if not token:
            return False, "No signature header found"
        try:
            valid = jws.verify(
                token,
                raw_body,
                self.gateway.keys.get_verification_key(),
                self.gateway.config.max_signature_age,
            )
        except JwsError as exc:
            logger.warning(f"Response signature rejected for {self.endpoint()}: {exc}")
            return False, str(exc)
        if not valid:
            logger.warning(
                f"JWS signature verification failed - payload length: {len(raw_body)}, "
                f"signature length: {len(token)}"
            )
            return False, "Signature does not match response body"
        return True, None


def _timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
