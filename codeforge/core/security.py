"""
Secret Encryption

Fernet encryption for provider credentials at rest. Keys are derived from the
configured secret with HKDF so the raw secret never reaches the sink.
"""

import base64

from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.hkdf import HKDF

from codeforge.config import Settings, get_settings


def _get_fernet_key(settings: Settings | None = None) -> bytes:
    """
    Derive a Fernet-compatible key from the application secret using HKDF.

    HKDF is appropriate when deriving keys from a high-entropy master key
    (as opposed to passwords). The salt is configurable via
    CODEFORGE_FERNET_SALT.

    Returns:
        32-byte key suitable for Fernet encryption
    """
    settings = settings or get_settings()

    kdf = HKDF(
        algorithm=hashes.SHA256(),
        length=32,
        salt=settings.fernet_salt.encode(),
        info=b"codeforge-credential-encryption",
    )

    return base64.urlsafe_b64encode(kdf.derive(settings.secret_key.encode()))


def encrypt_secret(plaintext: str, settings: Settings | None = None) -> str:
    """
    Encrypt a secret value for storage.

    Args:
        plaintext: The secret value to encrypt
        settings: Settings to derive the key from (defaults to get_settings())

    Returns:
        Base64-encoded encrypted value
    """
    f = Fernet(_get_fernet_key(settings))
    encrypted = f.encrypt(plaintext.encode())
    return base64.urlsafe_b64encode(encrypted).decode()


def decrypt_secret(encrypted: str, settings: Settings | None = None) -> str:
    """
    Decrypt a stored secret value.

    Args:
        encrypted: Base64-encoded encrypted value
        settings: Settings to derive the key from (defaults to get_settings())

    Returns:
        Decrypted plaintext value

    Raises:
        cryptography.fernet.InvalidToken: If the value was encrypted with another key
    """
    f = Fernet(_get_fernet_key(settings))
    encrypted_bytes = base64.urlsafe_b64decode(encrypted.encode())
    return f.decrypt(encrypted_bytes).decode()
