"""
PyCryptodomeProvider — alternative backend built on `pycryptodome`.

Same transformation names and output framing as CryptographyProvider,
so data encrypted by one provider decrypts with the other. Camellia is
not available here.
"""

from __future__ import annotations

import logging

import Crypto
from Crypto.Cipher import AES, ARC4, DES, DES3, Blowfish, ChaCha20_Poly1305
from Crypto.Cipher import PKCS1_OAEP, PKCS1_v1_5
from Crypto.Hash import SHA1, SHA256
from Crypto.PublicKey import RSA
from Crypto.Random import get_random_bytes
from Crypto.Util.Padding import pad, unpad
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa as pyca_rsa

from ..exceptions import (
    BadPaddingError, IllegalBlockSizeError, InvalidKeyError,
    NoSuchAlgorithmError,
)
from .cipher_base import (
    NOPAD, CipherEngine, CryptMode, Transformation, canonical_algorithm,
    resolve_block_mode, resolve_rsa_padding, split_iv,
)
from .keys import KEY_SPECS, KeyGenerator, key_bytes
from .provider import Provider

logger = logging.getLogger("CryptFacade.PyCryptodome")

_CLASSIC_MODES = frozenset({"ECB", "CBC", "CTR"})

# name → (module, key sizes in bytes, modes)
_BLOCK = {
    "AES":      (AES, frozenset({16, 24, 32}), _CLASSIC_MODES | {"GCM"}),
    "DES":      (DES, frozenset({8}), _CLASSIC_MODES),
    "DESede":   (DES3, frozenset({16, 24}), _CLASSIC_MODES),
    "Blowfish": (Blowfish, frozenset(range(4, 57)), _CLASSIC_MODES),
}


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Block ciphers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PyCryptodomeBlockEngine(CipherEngine):
    """
    Output format:  ECB [ct]   CBC/CTR [IV][ct]   GCM [nonce 12B][ct][tag 16B]
    """
    GCM_NONCE_SIZE = 12
    GCM_TAG_SIZE   = 16

    def __init__(self, transformation: Transformation, algorithm: str,
                 mode: str, padding: str):
        super().__init__(transformation)
        self._algorithm = algorithm
        self._module, self._key_sizes, _ = _BLOCK[algorithm]
        self._block   = mode
        self._padding = padding
        self._key: bytes | None = None

    @property
    def _block_size(self) -> int:
        return self._module.block_size

    def _engine_init(self, mode: CryptMode, key) -> None:
        raw = key_bytes(key, frozenset({self._algorithm}))
        if raw is None or len(raw) not in self._key_sizes:
            raise InvalidKeyError(f"Invalid {self._algorithm} key: {key!r}")
        if self._module is DES3:
            try:
                DES3.adjust_key_parity(raw)
            except ValueError as exc:
                raise InvalidKeyError(str(exc)) from exc
        self._key = raw

    def _new(self, iv: bytes):
        if self._block == "ECB":
            return self._module.new(self._key, self._module.MODE_ECB)
        if self._block == "CBC":
            return self._module.new(self._key, self._module.MODE_CBC, iv=iv)
        # whole IV block as a big-endian counter
        return self._module.new(self._key, self._module.MODE_CTR,
                                nonce=b"", initial_value=iv)

    def _check_blocks(self, data: bytes) -> None:
        if self._block != "CTR" and len(data) % self._block_size:
            raise IllegalBlockSizeError(
                f"Input length {len(data)} is not a multiple of "
                f"{self._block_size} bytes"
            )

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        if self._block == "GCM":
            return self._gcm(mode, content)
        if mode is CryptMode.ENCRYPT:
            iv = (b"" if self._block == "ECB"
                  else get_random_bytes(self._block_size))
            if self._padding == NOPAD:
                self._check_blocks(content)
                data = content
            else:
                data = pad(content, self._block_size)
            return iv + self._new(iv).encrypt(data)

        iv, ct = split_iv(content, self.iv_size)
        self._check_blocks(ct)
        padded = self._new(iv).decrypt(ct)
        if self._padding == NOPAD:
            return padded
        try:
            return unpad(padded, self._block_size)
        except ValueError as exc:
            raise BadPaddingError(
                "Given final block not properly padded"
            ) from exc

    def _gcm(self, mode: CryptMode, content: bytes) -> bytes:
        if mode is CryptMode.ENCRYPT:
            nonce = get_random_bytes(self.GCM_NONCE_SIZE)
            c = AES.new(self._key, AES.MODE_GCM, nonce=nonce)
            ct, tag = c.encrypt_and_digest(content)
            return nonce + ct + tag
        nonce, body = split_iv(content, self.GCM_NONCE_SIZE, self.GCM_TAG_SIZE)
        ct, tag = body[:-self.GCM_TAG_SIZE], body[-self.GCM_TAG_SIZE:]
        c = AES.new(self._key, AES.MODE_GCM, nonce=nonce)
        try:
            return c.decrypt_and_verify(ct, tag)
        except ValueError as exc:
            raise BadPaddingError("GCM tag mismatch") from exc

    @property
    def iv_size(self) -> int:
        if self._block == "ECB":
            return 0
        if self._block == "GCM":
            return self.GCM_NONCE_SIZE
        return self._block_size


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Stream ciphers
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

class PyCryptodomeChaChaEngine(CipherEngine):
    """Output format:  [nonce 12B][ciphertext][Poly1305 tag 16B]"""
    NONCE_SIZE = 12
    TAG_SIZE   = 16

    def _engine_init(self, mode: CryptMode, key) -> None:
        raw = key_bytes(key, frozenset({"ChaCha20", "ChaCha20-Poly1305"}))
        if raw is None or len(raw) != 32:
            raise InvalidKeyError(f"ChaCha20 key must be 32 bytes: {key!r}")
        self._key = raw

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        if mode is CryptMode.ENCRYPT:
            nonce = get_random_bytes(self.NONCE_SIZE)
            c = ChaCha20_Poly1305.new(key=self._key, nonce=nonce)
            ct, tag = c.encrypt_and_digest(content)
            return nonce + ct + tag
        nonce, body = split_iv(content, self.NONCE_SIZE, self.TAG_SIZE)
        c = ChaCha20_Poly1305.new(key=self._key, nonce=nonce)
        try:
            return c.decrypt_and_verify(body[:-self.TAG_SIZE],
                                        body[-self.TAG_SIZE:])
        except ValueError as exc:
            raise BadPaddingError("Poly1305 tag mismatch") from exc

    @property
    def iv_size(self) -> int:
        return self.NONCE_SIZE


class PyCryptodomeARC4Engine(CipherEngine):
    KEY_SIZES = frozenset({5, 7, 8, 10, 16, 20, 24, 32})

    def _engine_init(self, mode: CryptMode, key) -> None:
        raw = key_bytes(key, frozenset({"ARCFOUR"}))
        if raw is None or len(raw) not in self.KEY_SIZES:
            raise InvalidKeyError(f"Invalid ARCFOUR key: {key!r}")
        self._key = raw

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        return ARC4.new(self._key).encrypt(content)

    @property
    def iv_size(self) -> int:
        return 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  RSA
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def to_pycryptodome_key(key):
    """Return *key* as a pycryptodome RsaKey, or None if it is not one."""
    if isinstance(key, RSA.RsaKey):
        return key
    if isinstance(key, pyca_rsa.RSAPrivateKey):
        return RSA.import_key(key.private_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PrivateFormat.PKCS8,
            encryption_algorithm=serialization.NoEncryption(),
        ))
    if isinstance(key, pyca_rsa.RSAPublicKey):
        return RSA.import_key(key.public_bytes(
            encoding=serialization.Encoding.DER,
            format=serialization.PublicFormat.SubjectPublicKeyInfo,
        ))
    return None


class PyCryptodomeRSAEngine(CipherEngine):

    _HASHES = {"SHA-1": SHA1, "SHA-256": SHA256}
    _FAILED = object()

    def __init__(self, transformation: Transformation):
        super().__init__(transformation)
        self._scheme, self._digest = resolve_rsa_padding(transformation)

    def _engine_init(self, mode: CryptMode, key) -> None:
        rsa_key = to_pycryptodome_key(key)
        if rsa_key is None:
            raise InvalidKeyError(f"Not an RSA key: {type(key).__name__}")
        if mode is CryptMode.DECRYPT and not rsa_key.has_private():
            raise InvalidKeyError("RSA decryption requires a private key")
        if mode is CryptMode.ENCRYPT and rsa_key.has_private():
            rsa_key = rsa_key.public_key()
        self._key = rsa_key

    def _cipher(self):
        if self._scheme == "PKCS1":
            return PKCS1_v1_5.new(self._key)
        return PKCS1_OAEP.new(self._key, hashAlgo=self._HASHES[self._digest])

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        k = self._key.size_in_bytes()
        if mode is CryptMode.ENCRYPT:
            if self._scheme == "PKCS1":
                limit = k - 11
            else:
                limit = k - 2 * self._HASHES[self._digest].digest_size - 2
            if len(content) > limit:
                raise IllegalBlockSizeError(
                    f"Data must not be longer than {limit} bytes"
                )
            return self._cipher().encrypt(content)

        if len(content) != k:
            raise IllegalBlockSizeError(
                f"RSA ciphertext must be {k} bytes, got {len(content)}"
            )
        if self._scheme == "PKCS1":
            result = self._cipher().decrypt(content, self._FAILED)
            if result is self._FAILED:
                raise BadPaddingError("RSA decryption failed")
            return result
        try:
            return self._cipher().decrypt(content)
        except ValueError as exc:
            raise BadPaddingError("RSA decryption failed") from exc

    @property
    def iv_size(self) -> int:
        return 0


# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━
#  Provider
# ━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━━

def _des3_random(length: int) -> bytes:
    """Random DESede key that does not degenerate to single DES."""
    while True:
        try:
            return DES3.adjust_key_parity(get_random_bytes(length))
        except ValueError:
            continue


class PyCryptodomeProvider(Provider):

    NAME = "PyCryptodome"

    _STREAM_ENGINES = {
        "ARCFOUR":           PyCryptodomeARC4Engine,
        "ChaCha20-Poly1305": PyCryptodomeChaChaEngine,
    }
    # Camellia is not implemented by pycryptodome
    _KEY_ALGORITHMS = ("AES", "DES", "DESede", "Blowfish", "ARCFOUR",
                       "ChaCha20")

    @property
    def name(self) -> str:
        return self.NAME

    @property
    def version(self) -> str:
        return Crypto.__version__

    def _create_cipher(self, transformation: Transformation) -> CipherEngine:
        algorithm = canonical_algorithm(transformation.algorithm)

        if algorithm in _BLOCK:
            mode, padding = resolve_block_mode(transformation,
                                               _BLOCK[algorithm][2])
            cipher = PyCryptodomeBlockEngine(transformation, algorithm,
                                             mode, padding)
        elif algorithm in self._STREAM_ENGINES:
            if transformation.mode or transformation.padding:
                raise NoSuchAlgorithmError(
                    f"{algorithm} takes no mode or padding: {transformation}"
                )
            cipher = self._STREAM_ENGINES[algorithm](transformation)
        elif algorithm == "RSA":
            cipher = PyCryptodomeRSAEngine(transformation)
        else:
            raise NoSuchAlgorithmError(
                f"Cannot find any provider supporting {transformation}",
                {"provider": self.NAME},
            )

        logger.debug("Created cipher: %s", transformation)
        return cipher

    def _create_key_generator(self, algorithm: str) -> KeyGenerator:
        canonical = canonical_algorithm(algorithm)
        if canonical not in self._KEY_ALGORITHMS:
            raise NoSuchAlgorithmError(
                f"{algorithm} KeyGenerator not available",
                {"provider": self.NAME},
            )
        source = _des3_random if canonical == "DESede" else get_random_bytes
        return KeyGenerator(canonical, source, self.NAME)

    def list_ciphers(self) -> list[str]:
        return [*_BLOCK, *self._STREAM_ENGINES, "RSA"]

    def list_key_generators(self) -> list[str]:
        return [a for a in KEY_SPECS if a in self._KEY_ALGORITHMS]
