import logging

import pytest

from cryptfacade.crypto_engine import CryptMode
from cryptfacade.utils import MessagesBundle

BUNDLE = "messages_cryptography"


def test_english_lookup():
    messages = MessagesBundle(BUNDLE, "en")
    assert messages.get_string("error.encrypt") == "Error encrypting the content"


def test_placeholder_formatting():
    messages = MessagesBundle(BUNDLE, "en")
    assert messages.get_string("error.crypt", CryptMode.DECRYPT) == \
        "Error running the cipher in decrypt mode"


def test_region_falls_back_to_language():
    messages = MessagesBundle(BUNDLE, "pt_BR")
    assert messages.get_string("error.decrypt") == "Erro ao decifrar o conteúdo"


def test_unknown_locale_falls_back_to_english():
    messages = MessagesBundle(BUNDLE, "de_DE")
    assert messages.get_string("error.key.null") == \
        "The cryptographic key has not been set"


def test_default_locale_from_settings(monkeypatch):
    monkeypatch.setattr("cryptfacade.config.settings.Settings.MESSAGES_LOCALE",
                        "pt")
    assert MessagesBundle(BUNDLE).locale == "pt"


def test_missing_key(caplog):
    messages = MessagesBundle(BUNDLE, "en")
    with caplog.at_level(logging.WARNING, logger="CryptFacade.Messages"):
        assert messages.get_string("error.nope") == "!error.nope!"
    assert "error.nope" in caplog.text


def test_unknown_bundle():
    with pytest.raises(KeyError):
        MessagesBundle("no_such_bundle")
