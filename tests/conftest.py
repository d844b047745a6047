import pytest

from pemkeygen import config
from pemkeygen.generator import generate_ec, generate_rsa
from pemkeygen.models import KeyPair


@pytest.fixture(scope="session")
def rsa_key_pair() -> KeyPair:
    # 2048-bit generation is slow, share one key across the session
    return generate_rsa(2048)


@pytest.fixture(scope="session")
def ec_key_pair() -> KeyPair:
    return generate_ec("secp256r1")


@pytest.fixture(scope="session")
def k1_key_pair() -> KeyPair:
    return generate_ec("secp256k1")


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    for name in (
        "KEYALG",
        "KEYSIZE",
        "CURVE",
        "PRVOUT",
        "PUBOUT",
        "PKCS",
        "HEX",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(f"PEMKEYGEN_{name}", raising=False)
    config.get_settings.cache_clear()
    yield
    config.get_settings.cache_clear()
