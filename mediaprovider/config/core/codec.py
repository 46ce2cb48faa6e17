"""
Obfuscation of encrypted text entries at rest.

Values of text entries declared with ``encrypted=True`` pass through this codec
when they are written to or read from a settings file, never in memory. Uses
Fernet symmetric encryption with a key derived from a passphrase via PBKDF2.
"""

import base64
import binascii
import threading
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from mediaprovider.config.system import get_system_config
from mediaprovider.logger import get_mediaprovider_logger


class EntryEncryptionCodec:
    """Reversible transform for encrypted entry values."""

    # Fixed salt so files written by one process can be read by the next
    SALT = b'mediaprovider-settings'
    ITERATIONS = 100000

    def __init__(self, passphrase: str):
        """
        Args:
            passphrase: Secret the Fernet key is derived from.
        """
        if not passphrase:
            raise ValueError("Encryption passphrase must not be empty")
        self.logger = get_mediaprovider_logger().bind(component="EntryEncryptionCodec")
        self.cipher = self._get_cipher(passphrase)

    def _get_cipher(self, passphrase: str) -> Fernet:
        """Create a Fernet cipher from the passphrase."""
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=self.SALT,
            iterations=self.ITERATIONS,
        )
        derived_key = base64.urlsafe_b64encode(kdf.derive(passphrase.encode('utf-8')))
        return Fernet(derived_key)

    def encode(self, plain: str) -> str:
        """Encrypt a value for storage. The result is a single-line ASCII token."""
        return self.cipher.encrypt(plain.encode('utf-8')).decode('ascii')

    def decode(self, stored: str) -> Optional[str]:
        """
        Decrypt a stored value.

        Returns None for tampered or otherwise undecodable input so the caller
        can treat the value as absent.
        """
        try:
            return self.cipher.decrypt(stored.encode('ascii')).decode('utf-8')
        except (InvalidToken, UnicodeError, binascii.Error, ValueError, TypeError):
            self.logger.warning("Could not decode encrypted value")
            return None


_codec_instance: Optional[EntryEncryptionCodec] = None
_codec_lock = threading.Lock()


def get_codec() -> EntryEncryptionCodec:
    """
    Get the process-wide codec, built from the system configuration passphrase.
    """
    global _codec_instance
    with _codec_lock:
        if _codec_instance is None:
            _codec_instance = EntryEncryptionCodec(get_system_config().encryption_passphrase)
        return _codec_instance


def reset_codec() -> None:
    """
    Reset the process-wide codec so the next call re-reads the passphrase.

    This function is primarily useful for testing scenarios.
    """
    global _codec_instance
    with _codec_lock:
        _codec_instance = None
