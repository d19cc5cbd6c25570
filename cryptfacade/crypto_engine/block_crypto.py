"""
Block ciphers on the `cryptography` package: AES in ECB, CBC, CTR and GCM;
Camellia, DES, DESede (3DES) and Blowfish in ECB and CBC.

Output format:
    ECB       [ciphertext]
    CBC / CTR [IV = one block][ciphertext]
    GCM       [nonce 12B][ciphertext][tag 16B]
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.decrepit.ciphers import algorithms as decrepit
from cryptography.hazmat.primitives import padding as sym_padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from ..exceptions import (
    BadPaddingError, IllegalBlockSizeError, InvalidKeyError,
    NoSuchAlgorithmError,
)
from ..utils.random_gen import SecureRandom
from .cipher_base import (
    NOPAD, CipherEngine, CryptMode, Transformation, split_iv,
)
from .keys import key_bytes


@dataclass(frozen=True)
class BlockSpec:
    """How to build one block algorithm."""

    factory:    Callable[[bytes], object]
    block_bits: int
    key_sizes:  frozenset[int]          # bytes
    key_names:  frozenset[str]
    modes:      frozenset[str]

    @property
    def block_bytes(self) -> int:
        return self.block_bits // 8


# OpenSSL runs CTR for AES only
_CHAINING_MODES = frozenset({"ECB", "CBC"})


def _single_des(key: bytes):
    # single DES is 3DES with k1 = k2 = k3
    return decrepit.TripleDES(key * 3)


def _triple_des(key: bytes):
    # two-key 3DES is k1, k2, k1
    if len(key) == 16:
        key = key + key[:8]
    return decrepit.TripleDES(key)


BLOCK_SPECS: dict[str, BlockSpec] = {
    "AES": BlockSpec(
        algorithms.AES, 128, frozenset({16, 24, 32}),
        frozenset({"AES"}), _CHAINING_MODES | {"CTR", "GCM"},
    ),
    "Camellia": BlockSpec(
        decrepit.Camellia, 128, frozenset({16, 24, 32}),
        frozenset({"Camellia"}), _CHAINING_MODES,
    ),
    "DES": BlockSpec(
        _single_des, 64, frozenset({8}),
        frozenset({"DES"}), _CHAINING_MODES,
    ),
    "DESede": BlockSpec(
        _triple_des, 64, frozenset({16, 24}),
        frozenset({"DESede"}), _CHAINING_MODES,
    ),
    "Blowfish": BlockSpec(
        decrepit.Blowfish, 64, frozenset(range(4, 57)),
        frozenset({"Blowfish"}), _CHAINING_MODES,
    ),
}


class BlockCipherEngine(CipherEngine):
    """One-shot block cipher run through `cryptography`."""

    GCM_NONCE_SIZE = 12
    GCM_TAG_SIZE   = 16

    def __init__(self, transformation: Transformation, algorithm: str,
                 mode: str, padding: str):
        super().__init__(transformation)
        self._algorithm = algorithm
        self._spec      = BLOCK_SPECS[algorithm]
        self._block     = mode
        self._padding   = padding
        self._key: bytes | None = None

    def _engine_init(self, mode: CryptMode, key) -> None:
        raw = key_bytes(key, self._spec.key_names)
        if raw is None:
            raise InvalidKeyError(
                f"Wrong key for {self._algorithm}: {key!r}"
            )
        if len(raw) not in self._spec.key_sizes:
            raise InvalidKeyError(
                f"Invalid {self._algorithm} key length: {len(raw)} bytes"
            )
        self._key = raw

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        try:
            if self._block == "GCM":
                return self._gcm(mode, content)
            if mode is CryptMode.ENCRYPT:
                return self._encrypt(content)
            return self._decrypt(content)
        except UnsupportedAlgorithm as exc:
            raise NoSuchAlgorithmError(
                f"{self.transformation} not supported by this OpenSSL build"
            ) from exc

    # ── classic modes ────────────────────────────────────────────

    def _mode_object(self, iv: bytes):
        if self._block == "ECB":
            return modes.ECB()
        if self._block == "CBC":
            return modes.CBC(iv)
        return modes.CTR(iv)

    def _check_blocks(self, data: bytes) -> None:
        if self._block != "CTR" and len(data) % self._spec.block_bytes:
            raise IllegalBlockSizeError(
                f"Input length {len(data)} is not a multiple of "
                f"{self._spec.block_bytes} bytes"
            )

    def _encrypt(self, plaintext: bytes) -> bytes:
        iv = (b"" if self._block == "ECB"
              else SecureRandom.generate_iv(self._spec.block_bytes))
        if self._padding == NOPAD:
            self._check_blocks(plaintext)
            padded = plaintext
        else:
            padder = sym_padding.PKCS7(self._spec.block_bits).padder()
            padded = padder.update(plaintext) + padder.finalize()
        enc = Cipher(self._spec.factory(self._key),
                     self._mode_object(iv)).encryptor()
        return iv + enc.update(padded) + enc.finalize()

    def _decrypt(self, data: bytes) -> bytes:
        iv, ct = split_iv(data, self.iv_size)
        self._check_blocks(ct)
        dec = Cipher(self._spec.factory(self._key),
                     self._mode_object(iv)).decryptor()
        padded = dec.update(ct) + dec.finalize()
        if self._padding == NOPAD:
            return padded
        unpad = sym_padding.PKCS7(self._spec.block_bits).unpadder()
        try:
            return unpad.update(padded) + unpad.finalize()
        except ValueError as exc:
            raise BadPaddingError(
                "Given final block not properly padded"
            ) from exc

    # ── GCM ──────────────────────────────────────────────────────

    def _gcm(self, mode: CryptMode, content: bytes) -> bytes:
        aesgcm = AESGCM(self._key)
        if mode is CryptMode.ENCRYPT:
            nonce = SecureRandom.generate_nonce(self.GCM_NONCE_SIZE)
            return nonce + aesgcm.encrypt(nonce, content, None)
        nonce, ct = split_iv(content, self.GCM_NONCE_SIZE, self.GCM_TAG_SIZE)
        try:
            return aesgcm.decrypt(nonce, ct, None)
        except InvalidTag as exc:
            raise BadPaddingError("GCM tag mismatch") from exc

    @property
    def iv_size(self) -> int:
        if self._block == "ECB":
            return 0
        if self._block == "GCM":
            return self.GCM_NONCE_SIZE
        return self._spec.block_bytes

    def info(self) -> dict:
        base = super().info()
        base["block_bits"] = self._spec.block_bits
        base["padding"]    = self._padding
        return base
