"""
Swish Python SDK

Python bindings for the Swish merchant API: create and fetch payment
requests and refunds over mutual TLS.
"""

# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

from .client import SwishClient               # Sync client
from .async_client import AsyncSwishClient    # Async client
from .config import SWISH_PRODUCTION_URL, SWISH_TEST_URL, SwishConfig
from .errors import (
    ErrorCode,
    RequestErrorDetail,
    SwishClientError,
    SwishConnectionError,
    SwishIdentityError,
    SwishParseError,
    SwishRequestError,
)
from .models import (
    CreatedPayment,
    CreatedRefund,
    Currency,
    Payment,
    PaymentParams,
    Refund,
    RefundParams,
    Status,
)

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"

__all__ = [
    "SwishClient",
    "AsyncSwishClient",
    "SwishConfig",
    "SWISH_PRODUCTION_URL",
    "SWISH_TEST_URL",
    # Params & results
    "PaymentParams",
    "RefundParams",
    "CreatedPayment",
    "CreatedRefund",
    "Payment",
    "Refund",
    "Status",
    "Currency",
    # Errors
    "ErrorCode",
    "RequestErrorDetail",
    "SwishClientError",
    "SwishConnectionError",
    "SwishIdentityError",
    "SwishParseError",
    "SwishRequestError",
]
