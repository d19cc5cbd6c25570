"""
Human-readable message tables, keyed by bundle name and locale.

Placeholders use ``str.format`` positional fields.
"""

BUNDLES: dict[str, dict[str, dict[str, str]]] = {
    "messages_cryptography": {
        "en": {
            "error.generate.key": "Error generating the cryptographic key",
            "error.encrypt":      "Error encrypting the content",
            "error.decrypt":      "Error decrypting the content",
            "error.key.null":     "The cryptographic key has not been set",
            "error.crypt":        "Error running the cipher in {0} mode",
        },
        "pt": {
            "error.generate.key": "Erro ao gerar a chave criptográfica",
            "error.encrypt":      "Erro ao cifrar o conteúdo",
            "error.decrypt":      "Erro ao decifrar o conteúdo",
            "error.key.null":     "A chave criptográfica não foi informada",
            "error.crypt":        "Erro ao executar a cifra no modo {0}",
        },
    },
}
