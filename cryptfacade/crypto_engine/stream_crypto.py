"""
Stream ciphers on the `cryptography` package.

ChaCha20-Poly1305 — modern AEAD stream cipher.
    Key:   32 bytes (256 bits)
    Output format:  [nonce 12B][ciphertext + Poly1305 tag 16B]

ARCFOUR (RC4) — legacy stream cipher, no IV.
    Key:   40, 56, 64, 80, 128, 160, 192 or 256 bits
    Output format:  [ciphertext]
"""

from __future__ import annotations

from cryptography.exceptions import InvalidTag, UnsupportedAlgorithm
from cryptography.hazmat.decrepit.ciphers.algorithms import ARC4
from cryptography.hazmat.primitives.ciphers import Cipher
from cryptography.hazmat.primitives.ciphers.aead import ChaCha20Poly1305

from ..exceptions import BadPaddingError, InvalidKeyError, NoSuchAlgorithmError
from ..utils.random_gen import SecureRandom
from .cipher_base import CipherEngine, CryptMode, Transformation, split_iv
from .keys import key_bytes


class ChaCha20Engine(CipherEngine):
    """ChaCha20-Poly1305 AEAD cipher."""

    NONCE_SIZE = 12
    TAG_SIZE   = 16
    KEY_SIZE   = 32
    KEY_NAMES  = frozenset({"ChaCha20", "ChaCha20-Poly1305"})

    def __init__(self, transformation: Transformation):
        super().__init__(transformation)
        self._chacha: ChaCha20Poly1305 | None = None

    def _engine_init(self, mode: CryptMode, key) -> None:
        raw = key_bytes(key, self.KEY_NAMES)
        if raw is None or len(raw) != self.KEY_SIZE:
            raise InvalidKeyError(
                f"ChaCha20 key must be {self.KEY_SIZE} bytes: {key!r}"
            )
        try:
            self._chacha = ChaCha20Poly1305(raw)
        except UnsupportedAlgorithm as exc:
            raise NoSuchAlgorithmError(
                "ChaCha20-Poly1305 not supported by this OpenSSL build"
            ) from exc

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        if mode is CryptMode.ENCRYPT:
            nonce = SecureRandom.generate_nonce(self.NONCE_SIZE)
            return nonce + self._chacha.encrypt(nonce, content, None)
        nonce, ct = split_iv(content, self.NONCE_SIZE, self.TAG_SIZE)
        try:
            return self._chacha.decrypt(nonce, ct, None)
        except InvalidTag as exc:
            raise BadPaddingError("Poly1305 tag mismatch") from exc

    @property
    def iv_size(self) -> int:
        return self.NONCE_SIZE


class ARC4Engine(CipherEngine):
    """RC4 keystream XOR. Encrypt and decrypt are the same operation."""

    KEY_NAMES = frozenset({"ARCFOUR"})
    KEY_SIZES = frozenset({5, 7, 8, 10, 16, 20, 24, 32})

    def __init__(self, transformation: Transformation):
        super().__init__(transformation)
        self._key: bytes | None = None

    def _engine_init(self, mode: CryptMode, key) -> None:
        raw = key_bytes(key, self.KEY_NAMES)
        if raw is None or len(raw) not in self.KEY_SIZES:
            raise InvalidKeyError(f"Invalid ARCFOUR key: {key!r}")
        self._key = raw

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        try:
            ctx = Cipher(ARC4(self._key), mode=None).encryptor()
        except UnsupportedAlgorithm as exc:
            raise NoSuchAlgorithmError(
                "ARCFOUR not supported by this OpenSSL build"
            ) from exc
        return ctx.update(content) + ctx.finalize()

    @property
    def iv_size(self) -> int:
        return 0
