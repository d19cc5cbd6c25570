"""
Abstract base for every cipher engine a provider can hand out.

A transformation string names the cipher construction:

    ALGORITHM[/MODE[/PADDING]]      e.g. "AES", "AES/CBC/PKCS5Padding"

Engines follow a two-step life cycle: init(mode, key) then
do_final(content). A fresh engine is created for every operation.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from ..exceptions import (
    CipherStateError, IllegalBlockSizeError, NoSuchAlgorithmError,
    NoSuchPaddingError,
)


class CryptMode(Enum):
    """Operation direction."""
    ENCRYPT = 1
    DECRYPT = 2

    def __str__(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class Transformation:
    """Parsed ``ALGORITHM[/MODE[/PADDING]]`` string."""

    text:      str
    algorithm: str
    mode:      str | None = None
    padding:   str | None = None

    @classmethod
    def parse(cls, text: str) -> "Transformation":
        if not isinstance(text, str) or not text.strip():
            raise NoSuchAlgorithmError(
                f"Invalid transformation: {text!r}"
            )
        parts = [p.strip() for p in text.split("/")]
        if len(parts) > 3 or any(not p for p in parts):
            raise NoSuchAlgorithmError(
                f"Invalid transformation format: {text}"
            )
        parts += [None] * (3 - len(parts))
        return cls(text, parts[0], parts[1], parts[2])

    def __str__(self) -> str:
        return self.text


class CipherEngine(ABC):
    """
    Unified interface for a single encrypt or decrypt run.

    Subclasses validate and store the key in _engine_init() and do the
    work in _engine_do_final(); the base class tracks the state.
    """

    def __init__(self, transformation: Transformation):
        self._transformation = transformation
        self._mode: CryptMode | None = None

    def init(self, mode: CryptMode, key) -> None:
        """Prepare the engine for *mode* with *key*."""
        if not isinstance(mode, CryptMode):
            raise TypeError(f"mode must be a CryptMode, got {mode!r}")
        self._engine_init(mode, key)
        self._mode = mode

    def do_final(self, content: bytes) -> bytes:
        """Process the whole *content* in one call."""
        if self._mode is None:
            raise CipherStateError(
                f"{self.transformation} cipher not initialised"
            )
        return self._engine_do_final(self._mode, bytes(content))

    @property
    def transformation(self) -> Transformation:
        return self._transformation

    @property
    def mode(self) -> CryptMode | None:
        return self._mode

    @abstractmethod
    def _engine_init(self, mode: CryptMode, key) -> None:
        """Validate and keep *key*; raise InvalidKeyError if unfit."""

    @abstractmethod
    def _engine_do_final(self, mode: CryptMode, content: bytes) -> bytes:
        """Encrypt or decrypt *content*."""

    @property
    @abstractmethod
    def iv_size(self) -> int:
        """IV / nonce size in bytes that prefixes the ciphertext."""

    def info(self) -> dict:
        return {
            "transformation": str(self._transformation),
            "iv_bytes":       self.iv_size,
            "mode":           str(self._mode) if self._mode else None,
        }


# Lower-case alias → canonical algorithm name
_ALIASES = {
    "aes":               "AES",
    "rijndael":          "AES",
    "des":               "DES",
    "desede":            "DESede",
    "tripledes":         "DESede",
    "3des":              "DESede",
    "blowfish":          "Blowfish",
    "camellia":          "Camellia",
    "arcfour":           "ARCFOUR",
    "rc4":               "ARCFOUR",
    "chacha20":          "ChaCha20",
    "chacha20-poly1305": "ChaCha20-Poly1305",
    "chacha20poly1305":  "ChaCha20-Poly1305",
    "rsa":               "RSA",
}


def canonical_algorithm(name: str) -> str | None:
    """Return the canonical spelling of *name*, or None if unknown."""
    if not isinstance(name, str):
        return None
    return _ALIASES.get(name.strip().lower())


# ── Block cipher modes & paddings ────────────────────────────────
PKCS5   = "PKCS5Padding"
NOPAD   = "NoPadding"
_PADDINGS = {
    "pkcs5padding": PKCS5,
    "pkcs7padding": PKCS5,
    "nopadding":    NOPAD,
}
# counter-style modes need no padding
_UNPADDED_MODES = frozenset({"CTR", "GCM"})


def resolve_block_mode(t: Transformation,
                       supported_modes: frozenset[str]) -> tuple[str, str]:
    """
    Return *(MODE, padding)* for a block transformation.

    Omitted parts default to ECB / PKCS5Padding (NoPadding for CTR and
    GCM).
    """
    mode = (t.mode or "ECB").upper()
    if mode not in supported_modes:
        raise NoSuchAlgorithmError(
            f"Mode {t.mode} not supported for {t.algorithm}",
            {"transformation": t.text},
        )
    if t.padding is None:
        return mode, NOPAD if mode in _UNPADDED_MODES else PKCS5
    padding = _PADDINGS.get(t.padding.lower())
    if padding is None:
        raise NoSuchPaddingError(
            f"Unsupported padding {t.padding}",
            {"transformation": t.text},
        )
    if mode in _UNPADDED_MODES and padding != NOPAD:
        raise NoSuchPaddingError(
            f"{mode} mode must be used with NoPadding",
            {"transformation": t.text},
        )
    return mode, padding


# ── RSA paddings: name → (scheme, digest) ────────────────────────
_RSA_PADDINGS = {
    "pkcs1padding":                  ("PKCS1", None),
    "oaeppadding":                   ("OAEP", "SHA-1"),
    "oaepwithsha-1andmgf1padding":   ("OAEP", "SHA-1"),
    "oaepwithsha1andmgf1padding":    ("OAEP", "SHA-1"),
    "oaepwithsha-256andmgf1padding": ("OAEP", "SHA-256"),
    "oaepwithsha256andmgf1padding":  ("OAEP", "SHA-256"),
}


def resolve_rsa_padding(t: Transformation) -> tuple[str, str | None]:
    """Return *(scheme, digest)* for an RSA transformation."""
    if t.mode is not None and t.mode.upper() not in ("ECB", "NONE"):
        raise NoSuchAlgorithmError(
            f"Mode {t.mode} not supported for RSA",
            {"transformation": t.text},
        )
    if t.padding is None:
        return _RSA_PADDINGS["pkcs1padding"]
    try:
        return _RSA_PADDINGS[t.padding.lower()]
    except KeyError:
        raise NoSuchPaddingError(
            f"Unsupported RSA padding {t.padding}",
            {"transformation": t.text},
        ) from None


def split_iv(content: bytes, iv_size: int,
             tail: int = 0) -> tuple[bytes, bytes]:
    """Split ``iv ‖ body`` as written by an encrypting engine."""
    if len(content) < iv_size + tail:
        raise IllegalBlockSizeError(
            f"Input too short: {len(content)} bytes, "
            f"need at least {iv_size + tail}"
        )
    return content[:iv_size], content[iv_size:]
