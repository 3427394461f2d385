from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer
from pydantic.alias_generators import to_camel

# Swish caps the free-text message shown to the payer
MAX_MESSAGE_LENGTH = 50

_CENTS = Decimal("0.01")


class Currency(str, Enum):
    """SEK is currently the only currency supported by Swish."""

    SEK = "SEK"


class Status(str, Enum):
    CREATED = "CREATED"
    PAID = "PAID"
    DECLINED = "DECLINED"
    ERROR = "ERROR"
    CANCELLED = "CANCELLED"
    VALIDATED = "VALIDATED"
    INITIATED = "INITIATED"
    DEBITED = "DEBITED"


class _SwishModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Request params
# ---------------------------------------------------------------------------

class _RequestParams(_SwishModel):
    amount: Decimal = Field(gt=0, decimal_places=2)
    currency: Currency = Currency.SEK
    callback_url: Optional[str] = None
    message: Optional[str] = Field(default=None, max_length=MAX_MESSAGE_LENGTH)

    @field_serializer("amount")
    def _serialize_amount(self, amount: Decimal) -> str:
        return f"{amount.quantize(_CENTS)}"

    def to_payload(self) -> Dict[str, Any]:
        """JSON body sent to Swish: camelCase keys, unset fields left out."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class PaymentParams(_RequestParams):
    """
    Params used to create a new payment request.

    `payee_alias` and `callback_url` fall back to the merchant alias and
    callback URL of the client configuration when left unset. Leave
    `payer_alias` unset for m-commerce, set it for e-commerce.
    """

    payee_alias: Optional[str] = None
    payee_payment_reference: Optional[str] = None
    payer_alias: Optional[str] = None


class RefundParams(_RequestParams):
    """
    Params used to create a refund of an earlier payment.

    The merchant is the payer of a refund, so `payer_alias` falls back to the
    configured merchant alias.
    """

    original_payment_reference: str = Field(min_length=1)
    payer_alias: Optional[str] = None
    payee_alias: Optional[str] = None
    payer_payment_reference: Optional[str] = None


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

class CreatedPayment(_SwishModel):
    """Returned when a payment request is successfully created at Swish."""

    id: str
    location: str
    # Only present for m-commerce payment requests
    request_token: Optional[str] = None


class CreatedRefund(_SwishModel):
    """Returned when a refund is successfully created at Swish."""

    id: str
    location: str


class Payment(_SwishModel):
    """A payment request as returned by Swish."""

    id: str
    amount: Decimal
    currency: Currency = Currency.SEK
    payee_payment_reference: Optional[str] = None
    payment_reference: Optional[str] = None
    payer_alias: Optional[str] = None
    payee_alias: Optional[str] = None
    message: Optional[str] = None
    status: Optional[Status] = None
    date_created: Optional[datetime] = None
    date_paid: Optional[datetime] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None


class Refund(_SwishModel):
    """A refund as returned by Swish."""

    id: str
    amount: Decimal
    currency: Currency = Currency.SEK
    payer_payment_reference: Optional[str] = None
    original_payment_reference: Optional[str] = None
    payment_reference: Optional[str] = None
    payer_alias: Optional[str] = None
    payee_alias: Optional[str] = None
    message: Optional[str] = None
    status: Optional[Status] = None
    date_created: Optional[datetime] = None
    date_paid: Optional[datetime] = None
    error_code: Optional[str] = None
    error_message: Optional[str] = None
    additional_information: Optional[str] = None
