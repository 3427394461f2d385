# async_client.py
from __future__ import annotations

import json
import logging
import ssl
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from .config import SwishConfig
from .errors import (
    RequestErrorDetail,
    SwishConnectionError,
    SwishParseError,
    SwishRequestError,
)
from .models import (
    CreatedPayment,
    CreatedRefund,
    Payment,
    PaymentParams,
    Refund,
    RefundParams,
)
from .tls import build_ssl_context

logger = logging.getLogger(__name__)

# Custom header carrying the token used to open the Swish app (m-commerce)
PAYMENT_REQUEST_TOKEN_HEADER = "PaymentRequestToken"

ModelT = TypeVar("ModelT", bound=BaseModel)


def _id_from_location(location: str) -> str:
    return location.rstrip("/").rsplit("/", 1)[-1]


def _parse_error_details(body: str) -> List[RequestErrorDetail]:
    """
    Swish usually answers a rejected request with a JSON array of errors.
    Entries that do not look like an error are skipped.
    """
    try:
        parsed = json.loads(body)
    except json.JSONDecodeError:
        return []
    if isinstance(parsed, dict):
        parsed = [parsed]
    if not isinstance(parsed, list):
        return []

    details: List[RequestErrorDetail] = []
    for item in parsed:
        if not isinstance(item, dict):
            continue
        try:
            details.append(RequestErrorDetail.model_validate(item))
        except ValidationError:
            continue
    return details


class AsyncSwishClient:
    def __init__(
        self,
        *,
        merchant_alias: Optional[str] = None,
        cert_path: Optional[str] = None,
        root_cert_path: Optional[str] = None,
        passphrase: Optional[str] = None,
        key_path: Optional[str] = None,
        base_url: Optional[str] = None,
        callback_url: Optional[str] = None,
        timeout: Optional[float] = None,
        config: Optional[SwishConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if config is not None:
            self._config = config
        else:
            self._config = SwishConfig.resolve(
                merchant_alias=merchant_alias,
                cert_path=cert_path,
                root_cert_path=root_cert_path,
                passphrase=passphrase,
                key_path=key_path,
                base_url=base_url,
                callback_url=callback_url,
                timeout=timeout,
            )

        # Caller-owned client: used as is and never closed here
        self._http_client = http_client
        self._transport = transport
        self._ssl_context: Optional[ssl.SSLContext] = None

        self.base_url = self._config.base_url
        logger.debug("Swish client configured: %s", self._config.as_dict())

    @property
    def config(self) -> SwishConfig:
        return self._config

    def _get_ssl_context(self) -> ssl.SSLContext:
        if self._ssl_context is None:
            self._ssl_context = build_ssl_context(self._config)
        return self._ssl_context

    def _url(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    @asynccontextmanager
    async def connect(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return

        if self._transport is not None:
            # The transport owns TLS; no identity to load
            client = httpx.AsyncClient(transport=self._transport, timeout=self._config.timeout)
        else:
            client = httpx.AsyncClient(
                verify=self._get_ssl_context(), timeout=self._config.timeout
            )
        async with client:
            yield client

    # ---------- public async API ----------

    async def create_payment(self, params: PaymentParams) -> CreatedPayment:
        """
        Create a payment request at Swish.

        The payee alias and callback URL fall back to the configured merchant
        alias and callback URL when `params` leaves them unset.
        """
        payee_alias = params.payee_alias or self._config.merchant_alias
        callback_url = params.callback_url or self._config.callback_url
        if not callback_url:
            raise ValueError("A callback URL is required to create a payment.")

        payload = params.model_copy(
            update={"payee_alias": payee_alias, "callback_url": callback_url}
        ).to_payload()

        response = await self._request("POST", "paymentrequests", payload=payload)
        location = self._require_location(response)
        created = CreatedPayment(
            id=_id_from_location(location),
            location=location,
            request_token=response.headers.get(PAYMENT_REQUEST_TOKEN_HEADER),
        )
        logger.info("Created Swish payment request %s", created.id)
        return created

    async def get_payment(self, payment_id: str) -> Payment:
        if not payment_id:
            raise ValueError("`payment_id` must not be empty.")
        response = await self._request("GET", f"paymentrequests/{payment_id}")
        return self._parse_body(response, Payment)

    async def create_refund(self, params: RefundParams) -> CreatedRefund:
        """
        Refund an earlier payment. The merchant is the payer, so the payer
        alias falls back to the configured merchant alias.
        """
        payer_alias = params.payer_alias or self._config.merchant_alias
        callback_url = params.callback_url or self._config.callback_url
        if not callback_url:
            raise ValueError("A callback URL is required to create a refund.")

        payload = params.model_copy(
            update={"payer_alias": payer_alias, "callback_url": callback_url}
        ).to_payload()

        response = await self._request("POST", "refunds", payload=payload)
        location = self._require_location(response)
        created = CreatedRefund(id=_id_from_location(location), location=location)
        logger.info("Created Swish refund %s", created.id)
        return created

    async def get_refund(self, refund_id: str) -> Refund:
        if not refund_id:
            raise ValueError("`refund_id` must not be empty.")
        response = await self._request("GET", f"refunds/{refund_id}")
        return self._parse_body(response, Refund)

    # ---------- internal helpers ----------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        payload: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        url = self._url(path)
        headers = {"Accept": "application/json"}
        if payload is not None:
            headers["Content-Type"] = "application/json"
            logger.debug("Swish %s %s payload: %s", method, url, payload)

        logger.info("Calling Swish: %s %s", method, url)
        try:
            async with self.connect() as client:
                response = await client.request(method, url, json=payload, headers=headers)
        except httpx.TransportError as exc:
            logger.error("Swish %s %s failed: %s", method, url, exc)
            raise SwishConnectionError(f"Could not reach Swish at {url}: {exc}") from exc
        except httpx.DecodingError as exc:
            # Body arrived but its Content-Encoding could not be undone
            logger.error("Swish %s %s returned an undecodable body: %s", method, url, exc)
            raise SwishParseError(f"Could not decode Swish response from {url}: {exc}") from exc

        if not response.is_success:
            self._raise_for_status(response)
        return response

    @staticmethod
    def _raise_for_status(response: httpx.Response) -> None:
        body = response.text
        # Swish answers 404 with a plain body, never with an error array
        if response.status_code == 404:
            errors: List[RequestErrorDetail] = []
        else:
            errors = _parse_error_details(body)

        error = SwishRequestError(response.status_code, errors=errors, body=body)
        logger.error("%s", error)
        raise error

    @staticmethod
    def _require_location(response: httpx.Response) -> str:
        location = response.headers.get("Location")
        if not location:
            logger.error("Swish response %s has no Location header", response.status_code)
            raise SwishParseError("Swish response did not include a Location header.")
        return location

    @staticmethod
    def _parse_body(response: httpx.Response, model: Type[ModelT]) -> ModelT:
        try:
            return model.model_validate(response.json())
        except ValueError as exc:
            # json.JSONDecodeError and pydantic.ValidationError alike
            logger.error("Swish returned an unexpected %s body: %s", model.__name__, exc)
            raise SwishParseError(f"Could not parse Swish {model.__name__}: {exc}") from exc
