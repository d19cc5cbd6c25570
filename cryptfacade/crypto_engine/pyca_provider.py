"""
CryptographyProvider — the platform default backend, built on the
`cryptography` (PyCA) package.

Ciphers:
    AES                                     ECB / CBC / CTR / GCM
    Camellia, DES, DESede, Blowfish         ECB / CBC
    ARCFOUR, ChaCha20-Poly1305              stream
    RSA                                     PKCS1Padding / OAEP
Key generators:
    AES, DES, DESede, Blowfish, Camellia, ARCFOUR, ChaCha20
"""

import logging

import cryptography

from ..exceptions import NoSuchAlgorithmError
from ..utils.random_gen import SecureRandom
from .block_crypto import BLOCK_SPECS, BlockCipherEngine
from .cipher_base import (
    CipherEngine, Transformation, canonical_algorithm, resolve_block_mode,
)
from .keys import KEY_SPECS, KeyGenerator
from .provider import Provider
from .rsa_crypto import RSACipherEngine
from .stream_crypto import ARC4Engine, ChaCha20Engine

logger = logging.getLogger("CryptFacade.PyCA")


class CryptographyProvider(Provider):

    NAME = "PyCA"

    _STREAM_ENGINES = {
        "ARCFOUR":           ARC4Engine,
        "ChaCha20-Poly1305": ChaCha20Engine,
    }

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def version(self) -> str:
        return cryptography.__version__

    def _create_cipher(self, transformation: Transformation) -> CipherEngine:
        algorithm = canonical_algorithm(transformation.algorithm)

        if algorithm in BLOCK_SPECS:
            mode, padding = resolve_block_mode(
                transformation, BLOCK_SPECS[algorithm].modes,
            )
            cipher = BlockCipherEngine(transformation, algorithm,
                                       mode, padding)
        elif algorithm in self._STREAM_ENGINES:
            if transformation.mode or transformation.padding:
                raise NoSuchAlgorithmError(
                    f"{algorithm} takes no mode or padding: {transformation}"
                )
            cipher = self._STREAM_ENGINES[algorithm](transformation)
        elif algorithm == "RSA":
            cipher = RSACipherEngine(transformation)
        else:
            raise NoSuchAlgorithmError(
                f"Cannot find any provider supporting {transformation}",
                {"provider": self.NAME},
            )

        logger.debug("Created cipher: %s", transformation)
        return cipher

    def _create_key_generator(self, algorithm: str) -> KeyGenerator:
        return KeyGenerator(algorithm, SecureRandom.generate_bytes, self.NAME)

    def list_ciphers(self) -> list[str]:
        return [*BLOCK_SPECS, *self._STREAM_ENGINES, "RSA"]

    def list_key_generators(self) -> list[str]:
        return list(KEY_SPECS)
