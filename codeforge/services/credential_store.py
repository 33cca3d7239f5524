"""
Credential Store

Holds one secret API key per provider. Keys are cached in memory and written
through to a pluggable durable sink so they survive process restarts.

Sink key naming: ai_key_{provider} (e.g. "ai_key_openai").

The default sink encrypts values with Fernet (see codeforge.core.security)
before they touch disk; plaintext secrets are never persisted.
"""

import json
import logging
import re
import threading
from pathlib import Path
from typing import Protocol

from cryptography.fernet import InvalidToken

from codeforge.config import Settings, get_settings
from codeforge.core.security import decrypt_secret, encrypt_secret
from codeforge.models.enums import Provider

logger = logging.getLogger(__name__)

SINK_KEY_PREFIX = "ai_key_"

# Shape checks for early feedback only - a match does not mean the vendor accepts the key
KEY_PATTERNS: dict[Provider, re.Pattern[str]] = {
    Provider.OPENAI: re.compile(r"^sk-[a-zA-Z0-9]{48}$"),
    Provider.ANTHROPIC: re.compile(r"^sk-ant-[a-zA-Z0-9\-_]{95}$"),
    Provider.GOOGLE: re.compile(r"^[a-zA-Z0-9\-_]{39}$"),
    Provider.GROQ: re.compile(r"^gsk_[a-zA-Z0-9]{52}$"),
}


def sink_key(provider: Provider) -> str:
    return f"{SINK_KEY_PREFIX}{provider.value}"


def _coerce_provider(provider: Provider | str) -> Provider:
    try:
        return Provider(provider)
    except ValueError:
        raise ValueError(f"Unknown provider: {provider}") from None


class SecretSink(Protocol):
    """Durable key/value storage behind the credential store."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...


class InMemorySecretSink:
    """Non-durable sink; useful for tests and short-lived processes."""

    def __init__(self) -> None:
        self._values: dict[str, str] = {}

    def read(self, key: str) -> str | None:
        return self._values.get(key)

    def write(self, key: str, value: str) -> None:
        self._values[key] = value

    def delete(self, key: str) -> None:
        self._values.pop(key, None)


class EncryptedFileSecretSink:
    """
    JSON file sink with Fernet-encrypted values.

    File layout:
        {"ai_key_openai": "<fernet-encrypted-key>", ...}

    A value that fails to decrypt (rotated secret key, corrupted file) is
    logged and treated as absent.
    """

    def __init__(self, path: Path | str | None = None, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self.path = Path(path) if path is not None else self.settings.credential_store_path

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read credential file {self.path}: {e}")
            return {}
        return data if isinstance(data, dict) else {}

    def _save(self, data: dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp_path.write_text(json.dumps(data, indent=2, sort_keys=True), encoding="utf-8")
        tmp_path.chmod(0o600)
        tmp_path.replace(self.path)

    def read(self, key: str) -> str | None:
        encrypted = self._load().get(key)
        if not encrypted:
            return None
        try:
            return decrypt_secret(encrypted, self.settings)
        except (InvalidToken, ValueError) as e:
            logger.error(f"Failed to decrypt stored credential '{key}': {type(e).__name__}")
            return None

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = encrypt_secret(value, self.settings)
        self._save(data)

    def delete(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)


class CredentialStore:
    """
    In-memory credential slots backed by a durable SecretSink.

    Reads are served from memory; a miss falls back to the sink and
    repopulates the slot. Writes go to both, last write wins. A sink read
    that overlaps a set() or remove() never caches the stale value.
    """

    def __init__(self, sink: SecretSink | None = None):
        self.sink: SecretSink = sink if sink is not None else EncryptedFileSecretSink()
        self._keys: dict[Provider, str] = {}
        # Bumped on every set/remove of a slot
        self._versions: dict[Provider, int] = {}
        self._lock = threading.Lock()

    def set(self, provider: Provider | str, secret: str) -> None:
        """
        Store or overwrite the secret for a provider.

        Raises:
            ValueError: If the provider is unknown or the secret is empty
        """
        provider = _coerce_provider(provider)
        if not secret:
            raise ValueError("API key cannot be empty")

        with self._lock:
            self._keys[provider] = secret
            self._versions[provider] = self._versions.get(provider, 0) + 1
            self.sink.write(sink_key(provider), secret)
        logger.info(f"Stored API key for {provider.value}")

    def get(self, provider: Provider | str) -> str | None:
        """Return the secret for a provider, or None if not configured."""
        provider = _coerce_provider(provider)

        key = self._keys.get(provider)
        if key:
            return key

        version = self._versions.get(provider, 0)
        key = self.sink.read(sink_key(provider))
        if key:
            with self._lock:
                if self._versions.get(provider, 0) != version:
                    return self._keys.get(provider)
                self._keys[provider] = key
        return key or None

    def has(self, provider: Provider | str) -> bool:
        return bool(self.get(provider))

    def remove(self, provider: Provider | str) -> None:
        provider = _coerce_provider(provider)
        with self._lock:
            self._keys.pop(provider, None)
            self._versions[provider] = self._versions.get(provider, 0) + 1
            self.sink.delete(sink_key(provider))
        logger.info(f"Removed API key for {provider.value}")

    def list_configured(self) -> list[Provider]:
        """Providers with a stored secret, in fixed provider order."""
        return [provider for provider in Provider if self.has(provider)]

    @staticmethod
    def validate_format(provider: Provider | str, secret: str) -> bool:
        """
        Shape-check a key for early UX feedback.

        Unknown providers have no pattern and always pass.
        """
        try:
            provider = Provider(provider)
        except ValueError:
            return True
        return bool(KEY_PATTERNS[provider].match(secret))
