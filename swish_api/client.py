# client.py
from __future__ import annotations

from typing import Optional

import httpx

from ._sync import run_sync
from .async_client import AsyncSwishClient
from .config import SwishConfig
from .models import CreatedPayment, CreatedRefund, Payment, PaymentParams, Refund, RefundParams


class SwishClient:
    """
    Sync-first Swish client.

    Every call runs `AsyncSwishClient` to completion, so each one opens and
    closes its own HTTPS connection.
    """

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

        self._async = AsyncSwishClient(config=self._config, transport=transport)

    @property
    def config(self) -> SwishConfig:
        return self._config

    def create_payment(self, params: PaymentParams) -> CreatedPayment:
        return run_sync(self._async.create_payment(params))

    def get_payment(self, payment_id: str) -> Payment:
        return run_sync(self._async.get_payment(payment_id))

    def create_refund(self, params: RefundParams) -> CreatedRefund:
        return run_sync(self._async.create_refund(params))

    def get_refund(self, refund_id: str) -> Refund:
        return run_sync(self._async.get_refund(refund_id))
