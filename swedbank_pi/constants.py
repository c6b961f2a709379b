PRODUCTION_BASE_URL = "https://pi.swedbank.com"
SANDBOX_BASE_URL = "https://pi-playground.swedbank.com/sandbox"

PROVIDERS_PATH = "/public/api/v3/agreement/providers"
PURCHASE_PATH = "/public/api/v3/transactions/providers/{bic}"
TRANSACTION_STATUS_PATH = "/public/api/v3/transactions/{reference}/status"

SIGNATURE_HEADER = "x-jws-signature"
DEFAULT_MAX_SIGNATURE_AGE = 120

# Swedbank Latvia
DEFAULT_BIC = "HABALV22"

SUPPORTED_LOCALES = ("en", "et", "lv", "lt", "ru")
SUPPORTED_CURRENCIES = ("EUR",)
MAX_URL_LENGTH = 2048
MAX_DESCRIPTION_LENGTH = 140
MAX_REFERENCE_LENGTH = 25

SUCCESS_STATUSES = frozenset({"EXECUTED", "SETTLED"})
PENDING_STATUSES = frozenset(
    {
        "NOT_INITIATED",
        "INITIAL",
        "STARTED",
        "IN_PROGRESS",
        "IN_AUTHENTICATION",
        "IN_CONFIRMATION",
        "IN_DOUBLE_SIGNING",
        "UNKNOWN",
    }
)
FAILED_STATUSES = frozenset({"ABANDONED", "FAILED", "CANCELLED_BY_USER", "EXPIRED"})
