from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Dict, Optional

from dotenv import load_dotenv

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

SWISH_PRODUCTION_URL = "https://cpc.getswish.net/swish-cpcapi/api/v1/"
# Merchant Swish Simulator
SWISH_TEST_URL = "https://mss.cpc.getswish.net/swish-cpcapi/api/v1/"

DEFAULT_TIMEOUT = 10.0

SWISH_MERCHANT_ALIAS_ENV = "SWISH_MERCHANT_ALIAS"
SWISH_CERT_PATH_ENV = "SWISH_CERT_PATH"
SWISH_KEY_PATH_ENV = "SWISH_KEY_PATH"
SWISH_CERT_PASSPHRASE_ENV = "SWISH_CERT_PASSPHRASE"
SWISH_ROOT_CERT_PATH_ENV = "SWISH_ROOT_CERT_PATH"
SWISH_API_URL_ENV = "SWISH_API_URL"
SWISH_CALLBACK_URL_ENV = "SWISH_CALLBACK_URL"
SWISH_TIMEOUT_ENV = "SWISH_TIMEOUT"


def _env(name: str) -> Optional[str]:
    value = (os.getenv(name) or "").strip()
    return value or None


def _parse_timeout(raw: Optional[str]) -> float:
    if raw is None:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(f"{SWISH_TIMEOUT_ENV} must be a number, got {raw!r}") from None
    if timeout <= 0:
        raise ValueError(f"{SWISH_TIMEOUT_ENV} must be positive, got {raw!r}")
    return timeout


# ---------------------------------------------------------------------------
# Main Swish config
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SwishConfig:
    merchant_alias: str
    cert_path: Optional[str] = None
    key_path: Optional[str] = None
    passphrase: Optional[str] = field(default=None, repr=False)
    root_cert_path: Optional[str] = None
    base_url: str = SWISH_TEST_URL
    callback_url: Optional[str] = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        if not self.merchant_alias:
            raise ValueError("`merchant_alias` is required.")
        if self.timeout <= 0:
            raise ValueError("`timeout` must be positive.")

    # --------- Construction helpers ---------

    @classmethod
    def resolve(
        cls,
        *,
        merchant_alias: Optional[str] = None,
        cert_path: Optional[str] = None,
        key_path: Optional[str] = None,
        passphrase: Optional[str] = None,
        root_cert_path: Optional[str] = None,
        base_url: Optional[str] = None,
        callback_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ) -> SwishConfig:
        """
        Resolve a SwishConfig from explicit arguments, falling back to the
        SWISH_* environment variables for anything not given.
        """
        resolved_alias = merchant_alias or _env(SWISH_MERCHANT_ALIAS_ENV)
        if not resolved_alias:
            raise ValueError(
                f"Missing merchant alias: pass `merchant_alias` or set {SWISH_MERCHANT_ALIAS_ENV}."
            )

        return cls(
            merchant_alias=resolved_alias,
            cert_path=cert_path or _env(SWISH_CERT_PATH_ENV),
            key_path=key_path or _env(SWISH_KEY_PATH_ENV),
            passphrase=passphrase if passphrase is not None else _env(SWISH_CERT_PASSPHRASE_ENV),
            root_cert_path=root_cert_path or _env(SWISH_ROOT_CERT_PATH_ENV),
            base_url=base_url or _env(SWISH_API_URL_ENV) or SWISH_TEST_URL,
            callback_url=callback_url or _env(SWISH_CALLBACK_URL_ENV),
            timeout=timeout if timeout is not None else _parse_timeout(_env(SWISH_TIMEOUT_ENV)),
        )

    @classmethod
    def from_environment(cls, *, dotenv_path: Optional[str] = None) -> SwishConfig:
        """
        Build a SwishConfig purely from the environment.

        A `.env` file is loaded first; variables already set in the real
        environment win over the file.
        """
        load_dotenv(dotenv_path, override=False)
        return cls.resolve()

    # --------- Convenience accessors ---------

    def as_dict(self) -> Dict[str, Optional[str]]:
        """Config values safe for logging; the passphrase is masked."""
        return {
            SWISH_MERCHANT_ALIAS_ENV: self.merchant_alias,
            SWISH_CERT_PATH_ENV: self.cert_path,
            SWISH_KEY_PATH_ENV: self.key_path,
            SWISH_CERT_PASSPHRASE_ENV: "***" if self.passphrase else None,
            SWISH_ROOT_CERT_PATH_ENV: self.root_cert_path,
            SWISH_API_URL_ENV: self.base_url,
            SWISH_CALLBACK_URL_ENV: self.callback_url,
            SWISH_TIMEOUT_ENV: str(self.timeout),
        }

    # --------- Immutable "with_*" helpers ---------

    def with_base_url(self, base_url: str) -> SwishConfig:
        """Return a new SwishConfig pointing at another Swish environment."""
        if not base_url:
            raise ValueError("`base_url` must not be empty.")
        return replace(self, base_url=base_url)

    def with_callback_url(self, callback_url: Optional[str]) -> SwishConfig:
        """Return a new SwishConfig with another default callback URL."""
        return replace(self, callback_url=callback_url)
