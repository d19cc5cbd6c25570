"""
Provider — a pluggable backend that supplies cipher engines and key
generators by name.

Usage:
    provider = CryptographyProvider()
    cipher = provider.get_cipher("AES/CBC/PKCS5Padding")
    gen    = provider.get_key_generator("AES")
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from ..exceptions import NoSuchAlgorithmError
from .cipher_base import CipherEngine, Transformation
from .keys import KeyGenerator


class Provider(ABC):
    """Named capability set: cipher engines + key generators."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique provider name, e.g. 'PyCA'."""

    @property
    @abstractmethod
    def version(self) -> str:
        """Version of the underlying library."""

    @abstractmethod
    def _create_cipher(self, transformation: Transformation) -> CipherEngine:
        """Build an engine or raise NoSuchAlgorithmError."""

    @abstractmethod
    def _create_key_generator(self, algorithm: str) -> KeyGenerator:
        """Build a key generator or raise NoSuchAlgorithmError."""

    @abstractmethod
    def list_ciphers(self) -> list[str]:
        """Cipher algorithm names this provider implements."""

    @abstractmethod
    def list_key_generators(self) -> list[str]:
        """Key algorithm names this provider can generate."""

    # ── public lookups ───────────────────────────────────────────

    def get_cipher(self, transformation: str) -> CipherEngine:
        return self._create_cipher(Transformation.parse(transformation))

    def get_key_generator(self, algorithm: str) -> KeyGenerator:
        if not isinstance(algorithm, str) or not algorithm.strip():
            raise NoSuchAlgorithmError(
                f"Invalid key algorithm: {algorithm!r}"
            )
        return self._create_key_generator(algorithm)

    def supports_cipher(self, transformation: str) -> bool:
        try:
            self.get_cipher(transformation)
        except NoSuchAlgorithmError:
            return False
        return True

    def supports_key_generator(self, algorithm: str) -> bool:
        try:
            self.get_key_generator(algorithm)
        except NoSuchAlgorithmError:
            return False
        return True

    def info(self) -> dict:
        return {
            "name":           self.name,
            "version":        self.version,
            "ciphers":        self.list_ciphers(),
            "key_generators": self.list_key_generators(),
        }

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name} {self.version}>"
