import dataclasses

import pytest

from swish_api import SWISH_PRODUCTION_URL, SWISH_TEST_URL, SwishConfig

SWISH_ENV = {
    "SWISH_MERCHANT_ALIAS": "1231181189",
    "SWISH_CERT_PATH": "/certs/client.p12",
    "SWISH_CERT_PASSPHRASE": "swish",
    "SWISH_ROOT_CERT_PATH": "/certs/root.der",
    "SWISH_CALLBACK_URL": "https://example.com/api/swishcb/paymentrequests",
    "SWISH_TIMEOUT": "5",
}


@pytest.fixture
def clean_env(monkeypatch):
    for name in (
        "SWISH_MERCHANT_ALIAS",
        "SWISH_CERT_PATH",
        "SWISH_KEY_PATH",
        "SWISH_CERT_PASSPHRASE",
        "SWISH_ROOT_CERT_PATH",
        "SWISH_API_URL",
        "SWISH_CALLBACK_URL",
        "SWISH_TIMEOUT",
    ):
        # setenv first so teardown also drops values loaded from a .env file
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    return monkeypatch


def test_resolve_reads_environment(clean_env):
    for name, value in SWISH_ENV.items():
        clean_env.setenv(name, value)

    config = SwishConfig.resolve()

    assert config.merchant_alias == "1231181189"
    assert config.cert_path == "/certs/client.p12"
    assert config.passphrase == "swish"
    assert config.root_cert_path == "/certs/root.der"
    assert config.callback_url == "https://example.com/api/swishcb/paymentrequests"
    assert config.timeout == 5.0
    assert config.base_url == SWISH_TEST_URL


def test_explicit_arguments_win_over_environment(clean_env):
    clean_env.setenv("SWISH_MERCHANT_ALIAS", "1231181189")
    clean_env.setenv("SWISH_API_URL", "https://elsewhere.example/")

    config = SwishConfig.resolve(merchant_alias="9871065216", base_url=SWISH_PRODUCTION_URL)

    assert config.merchant_alias == "9871065216"
    assert config.base_url == SWISH_PRODUCTION_URL


def test_missing_merchant_alias(clean_env):
    with pytest.raises(ValueError, match="SWISH_MERCHANT_ALIAS"):
        SwishConfig.resolve()


@pytest.mark.parametrize("raw", ["soon", "0", "-3"])
def test_invalid_timeout(clean_env, raw):
    clean_env.setenv("SWISH_TIMEOUT", raw)

    with pytest.raises(ValueError, match="SWISH_TIMEOUT"):
        SwishConfig.resolve(merchant_alias="1231181189")


def test_from_environment_loads_dotenv_without_overriding(clean_env, tmp_path):
    env_file = tmp_path / ".env"
    env_file.write_text("SWISH_MERCHANT_ALIAS=1231181189\nSWISH_CALLBACK_URL=https://from-file\n")
    clean_env.setenv("SWISH_CALLBACK_URL", "https://from-env")

    config = SwishConfig.from_environment(dotenv_path=str(env_file))

    assert config.merchant_alias == "1231181189"
    assert config.callback_url == "https://from-env"


def test_config_is_immutable_and_with_helpers_copy():
    config = SwishConfig(merchant_alias="1231181189")

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.merchant_alias = "other"  # type: ignore[misc]

    production = config.with_base_url(SWISH_PRODUCTION_URL)
    assert production.base_url == SWISH_PRODUCTION_URL
    assert config.base_url == SWISH_TEST_URL
    assert config.with_callback_url("https://cb").callback_url == "https://cb"


def test_passphrase_is_hidden_from_repr_and_as_dict():
    config = SwishConfig(merchant_alias="1231181189", passphrase="secret")

    assert "secret" not in repr(config)
    assert config.as_dict()["SWISH_CERT_PASSPHRASE"] == "***"
