"""Pytest fixtures for the Swish client tests."""

import datetime
import json

import httpx
import pytest
from cryptography import x509
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.asymmetric import rsa
from cryptography.hazmat.primitives.serialization import (
    BestAvailableEncryption,
    Encoding,
    NoEncryption,
    PrivateFormat,
    pkcs12,
)
from cryptography.x509.oid import NameOID

from swish_api import SwishConfig

MERCHANT_ALIAS = "1231181189"
CALLBACK_URL = "https://example.com/api/swishcb/paymentrequests"
BASE_URL = "https://mss.cpc.getswish.net/swish-cpcapi/api/v1/"


@pytest.fixture
def config():
    return SwishConfig(
        merchant_alias=MERCHANT_ALIAS,
        cert_path="/nonexistent/cert.p12",
        passphrase="swish",
        base_url=BASE_URL,
        callback_url=CALLBACK_URL,
    )


class RecordingHandler:
    """MockTransport handler that records requests and replays one response."""

    def __init__(self, status_code=200, headers=None, body=None, exc=None):
        self.status_code = status_code
        self.headers = headers or {}
        self.body = body
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc(f"{self.exc.__name__} injected", request=request)
        if self.body is None:
            content = b""
        elif isinstance(self.body, (bytes, str)):
            content = self.body.encode("utf-8") if isinstance(self.body, str) else self.body
        else:
            content = json.dumps(self.body).encode("utf-8")
        return httpx.Response(self.status_code, headers=self.headers, content=content)

    @property
    def last_request(self) -> httpx.Request:
        return self.requests[-1]

    @property
    def last_json(self):
        return json.loads(self.last_request.content)


@pytest.fixture
def make_handler():
    return RecordingHandler


# ---------------------------------------------------------------------------
# Certificate material
# ---------------------------------------------------------------------------

def _self_signed(common_name):
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    name = x509.Name([x509.NameAttribute(NameOID.COMMON_NAME, common_name)])
    now = datetime.datetime.now(datetime.timezone.utc)
    cert = (
        x509.CertificateBuilder()
        .subject_name(name)
        .issuer_name(name)
        .public_key(key.public_key())
        .serial_number(x509.random_serial_number())
        .not_valid_before(now - datetime.timedelta(days=1))
        .not_valid_after(now + datetime.timedelta(days=30))
        .add_extension(x509.BasicConstraints(ca=True, path_length=None), critical=True)
        .sign(key, hashes.SHA256())
    )
    return key, cert


@pytest.fixture(scope="session")
def cert_dir(tmp_path_factory):
    """A merchant identity in every supported format plus a root certificate."""
    directory = tmp_path_factory.mktemp("certs")
    key, cert = _self_signed("1231181189")
    _, root = _self_signed("Swish Root CA")

    (directory / "client.p12").write_bytes(
        pkcs12.serialize_key_and_certificates(
            b"swish", key, cert, None, BestAvailableEncryption(b"swish")
        )
    )
    (directory / "client.pem").write_bytes(cert.public_bytes(Encoding.PEM))
    (directory / "client.key").write_bytes(
        key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    )
    (directory / "combined.pem").write_bytes(
        cert.public_bytes(Encoding.PEM)
        + key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, NoEncryption())
    )
    (directory / "client_encrypted.key").write_bytes(
        key.private_bytes(Encoding.PEM, PrivateFormat.PKCS8, BestAvailableEncryption(b"swish"))
    )
    (directory / "root.der").write_bytes(root.public_bytes(Encoding.DER))
    (directory / "root.pem").write_bytes(root.public_bytes(Encoding.PEM))
    # openssl pkcs12 exports prefix each block with attributes, not always ASCII
    (directory / "root_bag_attributes.pem").write_bytes(
        "Bag Attributes\n    friendlyName: Swish Root CA – Åäö\n".encode("utf-8")
        + root.public_bytes(Encoding.PEM)
    )
    (directory / "garbage.der").write_bytes(b"\x00\x01 not a certificate")
    return directory
