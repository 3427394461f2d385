"""
Mutual TLS identity for the Swish API.

Swish hands merchants a PKCS#12 bundle (certificate + private key, protected
by a passphrase) and expects every request to present it. Merchants that
converted their bundle can use a PEM certificate and key instead. The Swish
root certificate (DER or PEM) is added as an extra trust anchor.
"""

from __future__ import annotations

import logging
import os
import secrets
import ssl
import tempfile
from typing import Optional

from cryptography import x509
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    Encoding,
    PrivateFormat,
    pkcs12,
)

from .config import SwishConfig
from .errors import SwishIdentityError

logger = logging.getLogger(__name__)

_PEM_MARKER = b"-----BEGIN"


def _read(path: str, what: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as exc:
        raise SwishIdentityError(f"Cannot read {what} at {path!r}: {exc}") from exc


def _load_root_cert(context: ssl.SSLContext, root_cert_path: str) -> None:
    data = _read(root_cert_path, "root certificate")
    try:
        if _PEM_MARKER in data:
            # Text around the PEM blocks (e.g. "Bag Attributes") is skipped
            cadata = b"".join(
                cert.public_bytes(Encoding.DER) for cert in x509.load_pem_x509_certificates(data)
            )
        else:
            cadata = data
        context.load_verify_locations(cadata=cadata)
    except (ssl.SSLError, ValueError) as exc:
        raise SwishIdentityError(f"Invalid root certificate at {root_cert_path!r}: {exc}") from exc
    logger.debug("Loaded Swish root certificate from %s", root_cert_path)


def _load_pkcs12_identity(
    context: ssl.SSLContext, cert_path: str, passphrase: Optional[str]
) -> None:
    data = _read(cert_path, "client certificate")
    password = passphrase.encode("utf-8") if passphrase else None
    try:
        key, cert, chain = pkcs12.load_key_and_certificates(data, password)
    except ValueError as exc:
        raise SwishIdentityError(
            f"Cannot open PKCS#12 bundle at {cert_path!r}; wrong passphrase or corrupt file"
        ) from exc
    if key is None or cert is None:
        raise SwishIdentityError(f"PKCS#12 bundle at {cert_path!r} has no key or certificate")

    # ssl only loads identities from files, so hand it a short-lived PEM copy
    # with the key encrypted under a throwaway password.
    temp_password = secrets.token_hex(16).encode("ascii")
    pem = key.private_bytes(
        Encoding.PEM, PrivateFormat.PKCS8, BestAvailableEncryption(temp_password)
    )
    pem += cert.public_bytes(Encoding.PEM)
    for extra in chain or []:
        pem += extra.public_bytes(Encoding.PEM)

    fd, temp_path = tempfile.mkstemp(suffix=".pem")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(pem)
        context.load_cert_chain(temp_path, password=temp_password)
    except OSError as exc:  # ssl.SSLError included
        raise SwishIdentityError(f"Cannot use client certificate from {cert_path!r}: {exc}") from exc
    finally:
        os.unlink(temp_path)


def _load_pem_identity(
    context: ssl.SSLContext,
    cert_path: str,
    key_path: Optional[str],
    passphrase: Optional[str],
) -> None:
    try:
        # An empty password makes an encrypted key fail instead of prompting on the tty
        context.load_cert_chain(cert_path, keyfile=key_path, password=passphrase or "")
    except OSError as exc:  # ssl.SSLError included
        raise SwishIdentityError(f"Cannot load client certificate {cert_path!r}: {exc}") from exc


def build_ssl_context(config: SwishConfig) -> ssl.SSLContext:
    """
    Build the SSL context used for every call to Swish.

    Raises SwishIdentityError if any of the certificate material is missing,
    unreadable or cannot be decrypted with the configured passphrase.
    """
    if not config.cert_path:
        raise SwishIdentityError("Swish requires a client certificate; `cert_path` is not set")

    context = ssl.create_default_context()

    if config.root_cert_path:
        _load_root_cert(context, config.root_cert_path)

    if config.key_path:
        _load_pem_identity(context, config.cert_path, config.key_path, config.passphrase)
    elif _PEM_MARKER in _read(config.cert_path, "client certificate"):
        # PEM file carrying both the certificate and the key
        _load_pem_identity(context, config.cert_path, None, config.passphrase)
    else:
        _load_pkcs12_identity(context, config.cert_path, config.passphrase)

    logger.debug("Built mutual TLS context for merchant %s", config.merchant_alias)
    return context
