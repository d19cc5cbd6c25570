import pytest
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives.asymmetric import rsa

from cryptfacade import CipherFacade
from cryptfacade.crypto_engine import (
    CryptographyProvider, PyCryptodomeProvider, reset_default_registry,
)

PROVIDER_CLASSES = [CryptographyProvider, PyCryptodomeProvider]


@pytest.fixture(autouse=True)
def fresh_registry():
    """Every test starts from a pristine process-wide registry."""
    reset_default_registry()
    yield
    reset_default_registry()


@pytest.fixture
def facade():
    return CipherFacade()


@pytest.fixture(params=PROVIDER_CLASSES, ids=lambda cls: cls.NAME)
def provider(request):
    return request.param()


@pytest.fixture(scope="session")
def rsa_private_key():
    return rsa.generate_private_key(public_exponent=65537, key_size=2048)


class RecordingProvider(CryptographyProvider):
    """PyCA provider that counts backend lookups."""

    NAME = "Recording"

    def __init__(self):
        self.cipher_calls = 0
        self.keygen_calls = 0

    def _create_cipher(self, transformation):
        self.cipher_calls += 1
        return super()._create_cipher(transformation)

    def _create_key_generator(self, algorithm):
        self.keygen_calls += 1
        return super()._create_key_generator(algorithm)


@pytest.fixture
def recording_provider():
    return RecordingProvider()


@pytest.fixture
def skip_if_unsupported():
    """Skip when the installed OpenSSL lacks a legacy algorithm."""
    def check(exc: BaseException) -> None:
        while exc is not None:
            if isinstance(exc, UnsupportedAlgorithm):
                pytest.skip(f"not in this OpenSSL build: {exc}")
            exc = exc.__cause__
    return check
