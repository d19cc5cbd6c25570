"""
Symmetric key handles and key generators.

Key sizes are given in bits, the way callers configure them. DES-family
sizes count only effective bits (56 / 112 / 168); the generated keys
carry one parity bit per byte on top of that.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from ..exceptions import InvalidParameterError, NoSuchAlgorithmError
from .cipher_base import canonical_algorithm

logger = logging.getLogger("CryptFacade.KeyGenerator")


@dataclass(frozen=True)
class SecretKey:
    """Opaque symmetric key: algorithm name + raw key bytes."""

    algorithm: str
    encoded:   bytes = field(repr=False)

    @property
    def format(self) -> str:
        return "RAW"

    @property
    def size_bits(self) -> int:
        return len(self.encoded) * 8

    def __repr__(self) -> str:
        return f"SecretKey(algorithm={self.algorithm!r}, bits={self.size_bits})"


@dataclass(frozen=True)
class KeySpec:
    """Permitted sizes for one key algorithm."""

    default_bits: int
    allowed_bits: frozenset[int]
    des_parity:   bool = False

    def byte_length(self, bits: int) -> int:
        if self.des_parity and bits % 56 == 0:
            return bits // 7
        return bits // 8


# ── Registry of key algorithms ───────────────────────────────────
KEY_SPECS: dict[str, KeySpec] = {
    "AES":      KeySpec(128, frozenset({128, 192, 256})),
    "DES":      KeySpec(56, frozenset({56, 64}), des_parity=True),
    "DESede":   KeySpec(168, frozenset({112, 168, 128, 192}),
                        des_parity=True),
    "Blowfish": KeySpec(128, frozenset(range(32, 449, 8))),
    "Camellia": KeySpec(128, frozenset({128, 192, 256})),
    "ARCFOUR":  KeySpec(128, frozenset({40, 56, 64, 80, 128, 160, 192, 256})),
    "ChaCha20": KeySpec(256, frozenset({256})),
}


def set_des_parity(key: bytes) -> bytes:
    """Force odd parity on every byte (lowest bit is the parity bit)."""
    out = bytearray(key)
    for i, b in enumerate(out):
        high = b & 0xFE
        out[i] = high | (bin(high).count("1") % 2 == 0)
    return bytes(out)


class KeyGenerator:
    """
    Produce fresh SecretKeys for one algorithm.

    Usage:
        gen = provider.get_key_generator("AES")
        gen.init(256)           # optional
        key = gen.generate_key()
    """

    def __init__(self, algorithm: str,
                 random_source: Callable[[int], bytes],
                 provider_name: str,
                 postprocess: Callable[[bytes], bytes] | None = None):
        canonical = canonical_algorithm(algorithm)
        if canonical not in KEY_SPECS:
            raise NoSuchAlgorithmError(
                f"{algorithm} KeyGenerator not available"
            )
        self._algorithm     = canonical
        self._spec          = KEY_SPECS[canonical]
        self._random        = random_source
        self._provider_name = provider_name
        self._postprocess   = postprocess
        self._bits          = self._spec.default_bits

    def init(self, size: int) -> None:
        """Select the key size in bits."""
        if isinstance(size, bool) or not isinstance(size, int):
            raise InvalidParameterError(
                f"Key size must be an int, got {size!r}"
            )
        if size not in self._spec.allowed_bits:
            raise InvalidParameterError(
                f"Invalid {self._algorithm} key size: {size} bits",
                {"algorithm": self._algorithm, "size": size},
            )
        self._bits = size

    def generate_key(self) -> SecretKey:
        raw = self._random(self._spec.byte_length(self._bits))
        if self._spec.des_parity:
            raw = set_des_parity(raw)
        if self._postprocess is not None:
            raw = self._postprocess(raw)
        logger.debug(
            "Generated %s key (%d bits) via %s",
            self._algorithm, self._bits, self._provider_name,
        )
        return SecretKey(self._algorithm, raw)

    @property
    def algorithm(self) -> str:
        return self._algorithm

    @property
    def key_size(self) -> int:
        return self._bits

    @property
    def provider_name(self) -> str:
        return self._provider_name


def key_bytes(key, allowed_algorithms: frozenset[str]) -> bytes | None:
    """
    Extract raw bytes from a symmetric key handle.

    Accepts a SecretKey (whose algorithm must be one of
    *allowed_algorithms*) or plain bytes. Returns None for anything
    else so the caller can raise its own InvalidKeyError.
    """
    if isinstance(key, SecretKey):
        if canonical_algorithm(key.algorithm) not in allowed_algorithms:
            return None
        return key.encoded
    if isinstance(key, (bytes, bytearray, memoryview)):
        return bytes(key)
    return None
