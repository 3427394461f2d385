"""
Errors raised by the Swish client.

Every failure surfaced by the library derives from `SwishClientError`, so
callers can catch a single type. Nothing is retried internally.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ErrorCode(str, Enum):
    """Error codes documented by Swish for payment and refund requests."""

    FF08 = "FF08"  # PayeePaymentReference is invalid
    RP03 = "RP03"  # Callback URL is missing or does not use https
    BE18 = "BE18"  # Payer alias is invalid
    RP01 = "RP01"  # Payee alias is missing or empty
    PA02 = "PA02"  # Amount is missing or not a valid number
    AM06 = "AM06"  # Amount is too low
    AM02 = "AM02"  # Amount is too large
    AM03 = "AM03"  # Invalid or missing currency
    RP02 = "RP02"  # Wrong formatted message
    RP06 = "RP06"  # Another active payment request exists for this payer alias
    ACMT03 = "ACMT03"  # Payer not enrolled
    ACMT01 = "ACMT01"  # Counterpart is not activated
    ACMT07 = "ACMT07"  # Payee not enrolled
    PA01 = "PA01"  # Parameter is not correct
    RF02 = "RF02"  # Original payment not found or older than 13 months


class RequestErrorDetail(BaseModel):
    """One entry of the error array Swish returns for a rejected request."""

    model_config = ConfigDict(populate_by_name=True)

    error_code: Optional[str] = Field(default=None, alias="errorCode")
    error_message: str = Field(alias="errorMessage")
    additional_information: Optional[str] = Field(
        default=None, alias="additionalInformation"
    )

    @property
    def code(self) -> Optional[ErrorCode]:
        """The error code as `ErrorCode`, or None when Swish sent an unknown one."""
        if self.error_code is None:
            return None
        try:
            return ErrorCode(self.error_code)
        except ValueError:
            return None

    def __str__(self) -> str:
        if self.error_code:
            return f"{self.error_code}: {self.error_message}"
        return self.error_message


class SwishClientError(Exception):
    """Base class for every error raised by the Swish client."""


class SwishIdentityError(SwishClientError):
    """The client certificate or root certificate could not be loaded."""


class SwishConnectionError(SwishClientError):
    """The request never produced a response (connect failure, timeout, ...)."""


class SwishParseError(SwishClientError):
    """A successful response could not be turned into a result."""


class SwishRequestError(SwishClientError):
    """
    Swish answered with a non-success HTTP status.

    `errors` holds the structured error entries from the response body, if
    the body had any. `body` is always the raw response text.
    """

    def __init__(
        self,
        status_code: int,
        errors: Optional[List[RequestErrorDetail]] = None,
        body: str = "",
    ) -> None:
        self.status_code = status_code
        self.errors: List[RequestErrorDetail] = list(errors or [])
        self.body = body
        super().__init__(self._describe())

    @property
    def error_codes(self) -> List[str]:
        return [e.error_code for e in self.errors if e.error_code]

    def _describe(self) -> str:
        summary = f"Swish request failed with HTTP {self.status_code}"
        if self.errors:
            return f"{summary}: " + ", ".join(str(e) for e in self.errors)
        if self.body:
            return f"{summary}: {self.body[:200]}"
        return summary
