import os


class Settings:
    """Centralised library configuration."""

    # ── application ──────────────────────────────────────────────
    APP_NAME    = "CryptFacade"
    APP_VERSION = "1.0.0"

    # ── crypto defaults ──────────────────────────────────────────
    DEFAULT_SYMMETRIC_ALGORITHM  = "AES"
    DEFAULT_ASYMMETRIC_ALGORITHM = "RSA"
    # empty → whatever the provider registry prefers
    DEFAULT_PROVIDER = os.environ.get("CRYPTFACADE_PROVIDER", "")

    # ── messages ─────────────────────────────────────────────────
    MESSAGES_LOCALE = os.environ.get("CRYPTFACADE_LOCALE", "en")

    # ── logging ──────────────────────────────────────────────────
    LOG_LEVEL   = os.environ.get("CRYPTFACADE_LOG_LEVEL", "WARNING")
    LOG_FORMAT  = "[%(asctime)s] [%(levelname)-8s] %(name)-28s - %(message)s"
    LOG_DATEFMT = "%H:%M:%S"
