"""Hooks notified about every signed exchange with the bank."""

from __future__ import annotations

import json
import logging
from typing import Any, Dict, Protocol, runtime_checkable

logger = logging.getLogger("swedbank_pi.exchange")


@runtime_checkable
class ExchangeObserver(Protocol):
    """Receives request and response records from the gateway.

    Records never contain key material; bodies are included as sent or
    received so that signature failures can be diagnosed.
    """

    def on_request(self, record: Dict[str, Any]) -> None:
        ...

    def on_response(self, record: Dict[str, Any]) -> None:
        ...


class NullObserver:
    """Discards all events."""

    def on_request(self, record: Dict[str, Any]) -> None:
        pass

    def on_response(self, record: Dict[str, Any]) -> None:
        pass


def _pretty_body(record: Dict[str, Any]) -> Dict[str, Any]:
    pretty = dict(record)
    body = pretty.get("body")
    if isinstance(body, (bytes, str)) and body:
        try:
            pretty["body"] = json.loads(body)
        except ValueError:
            pretty["body"] = body.decode("utf-8", "replace") if isinstance(body, bytes) else body
    elif isinstance(body, bytes):
        pretty["body"] = ""
    return pretty


class LoggingObserver:
    """Writes exchange records to the ``swedbank_pi.exchange`` logger at DEBUG."""

    def __init__(self, log: logging.Logger = logger) -> None:
        self.log = log

    def on_request(self, record: Dict[str, Any]) -> None:
        if not self.log.isEnabledFor(logging.DEBUG):
            return
        self.log.debug(
            f"Swedbank V3 API Request: {json.dumps(_pretty_body(record), indent=4, default=str)}"
        )

    def on_response(self, record: Dict[str, Any]) -> None:
        if not self.log.isEnabledFor(logging.DEBUG):
            return
        pretty = _pretty_body(record)
        # parsed data duplicates the body
        if "response_data" in pretty:
            pretty.pop("body", None)
        self.log.debug(f"Swedbank V3 API Response: {json.dumps(pretty, indent=4, default=str)}")
