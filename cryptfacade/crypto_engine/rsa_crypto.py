"""
RSA encryption on the `cryptography` package (PKCS#1 v1.5 and OAEP).

Encrypt takes a public key (a private key's public half is used);
decrypt needs the private key. Keys created with pycryptodome are
accepted and converted through DER.
"""

from __future__ import annotations

from cryptography.hazmat.primitives import hashes, serialization
from cryptography.hazmat.primitives.asymmetric import padding as asym_padding
from cryptography.hazmat.primitives.asymmetric import rsa

from ..exceptions import BadPaddingError, IllegalBlockSizeError, InvalidKeyError
from .cipher_base import (
    CipherEngine, CryptMode, Transformation, resolve_rsa_padding,
)

_DIGESTS = {
    "SHA-1":   hashes.SHA1,
    "SHA-256": hashes.SHA256,
}


def to_pyca_key(key):
    """Return *key* as a `cryptography` RSA key, or None if it is not one."""
    if isinstance(key, (rsa.RSAPrivateKey, rsa.RSAPublicKey)):
        return key
    # pycryptodome RsaKey
    if hasattr(key, "has_private") and hasattr(key, "export_key"):
        der = key.export_key(format="DER")
        if key.has_private():
            return serialization.load_der_private_key(der, password=None)
        return serialization.load_der_public_key(der)
    return None


class RSACipherEngine(CipherEngine):
    """RSA/ECB/<padding> — one block per call."""

    def __init__(self, transformation: Transformation):
        super().__init__(transformation)
        self._scheme, self._digest = resolve_rsa_padding(transformation)
        self._key = None

    def _padding(self):
        if self._scheme == "PKCS1":
            return asym_padding.PKCS1v15()
        algo = _DIGESTS[self._digest]
        return asym_padding.OAEP(
            mgf=asym_padding.MGF1(algorithm=algo()),
            algorithm=algo(),
            label=None,
        )

    def _max_plaintext(self, key_bytes_len: int) -> int:
        if self._scheme == "PKCS1":
            return key_bytes_len - 11
        return key_bytes_len - 2 * _DIGESTS[self._digest].digest_size - 2

    def _engine_init(self, mode: CryptMode, key) -> None:
        pyca = to_pyca_key(key)
        if pyca is None:
            raise InvalidKeyError(f"Not an RSA key: {type(key).__name__}")
        if mode is CryptMode.DECRYPT:
            if not isinstance(pyca, rsa.RSAPrivateKey):
                raise InvalidKeyError("RSA decryption requires a private key")
            self._key = pyca
        elif isinstance(pyca, rsa.RSAPrivateKey):
            self._key = pyca.public_key()
        else:
            self._key = pyca

    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        k = (self._key.key_size + 7) // 8
        if mode is CryptMode.ENCRYPT:
            limit = self._max_plaintext(k)
            if len(content) > limit:
                raise IllegalBlockSizeError(
                    f"Data must not be longer than {limit} bytes"
                )
            return self._key.encrypt(content, self._padding())
        if len(content) != k:
            raise IllegalBlockSizeError(
                f"RSA ciphertext must be {k} bytes, got {len(content)}"
            )
        try:
            return self._key.decrypt(content, self._padding())
        except ValueError as exc:
            raise BadPaddingError("RSA decryption failed") from exc

    @property
    def iv_size(self) -> int:
        return 0

    def info(self) -> dict:
        base = super().info()
        base["padding"] = (self._scheme if self._digest is None
                           else f"{self._scheme}-{self._digest}")
        return base
