"""swedbank-pi: Swedbank Payment Initiation API V3 client with detached JWS signing."""

from .config import GatewayConfig, load_config
from .gateway import Gateway
from .observers import ExchangeObserver, LoggingObserver, NullObserver
from .providers import MappingResolver, ProviderResolver, resolve_provider
from .security import (
    InvalidKey,
    JwsError,
    MalformedToken,
    SigningFailed,
    StaleSignature,
    UnsupportedAlgorithm,
    sign,
    verify,
)
from .validation import InvalidRequestError

__version__ = "0.1.0"
__all__ = [
    "ExchangeObserver",
    "Gateway",
    "GatewayConfig",
    "InvalidKey",
    "InvalidRequestError",
    "JwsError",
    "LoggingObserver",
    "MalformedToken",
    "MappingResolver",
    "NullObserver",
    "ProviderResolver",
    "SigningFailed",
    "StaleSignature",
    "UnsupportedAlgorithm",
    "load_config",
    "resolve_provider",
    "sign",
    "verify",
]
