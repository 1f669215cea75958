# credkeep/core/encryption.py

import os
import base64
import logging
from pathlib import Path
from typing import Callable, Optional
from abc import ABC, abstractmethod
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.exceptions import InvalidTag

SALT_SIZE = 16
IV_SIZE = 12  # 96-bit IV for GCM
TAG_SIZE = 16
KDF_ITERATIONS = 100000


def _write_private(path: Path, data: bytes) -> None:
    path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
    with open(path, 'wb') as f:
        f.write(data)
    os.chmod(path, 0o600)


class FileBackend(ABC):
    """Abstract base class for the accounts file load/save pair."""

    @abstractmethod
    def load(self, path: Path) -> str:
        """Return the decoded text stored at path."""
        pass

    @abstractmethod
    def save(self, path: Path, text: str, passphrase: Optional[str] = None) -> None:
        """Persist text at path."""
        pass


class PlainFileBackend(FileBackend):
    """Stores the accounts file as plain UTF-8 text."""

    def load(self, path: Path) -> str:
        if not path.exists():
            logging.info(f"{path} does not exist; starting empty")
            return ""
        return path.read_text(encoding='utf-8')

    def save(self, path: Path, text: str, passphrase: Optional[str] = None) -> None:
        _write_private(path, text.encode('utf-8'))


class AES256FileBackend(FileBackend):
    """AES-256-GCM file encryption with a PBKDF2-derived key.

    The file holds base64(salt | iv | tag | ciphertext). A new salt and IV
    are drawn on every save.
    """

    def __init__(self, passphrase_prompt: Callable[[], str]):
        self._prompt = passphrase_prompt
        self.last_passphrase: Optional[str] = None

    @staticmethod
    def _derive_key(passphrase: str, salt: bytes) -> bytes:
        kdf = PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=32,
            salt=salt,
            iterations=KDF_ITERATIONS,
        )
        return kdf.derive(passphrase.encode('utf-8'))

    def encrypt(self, data: bytes, passphrase: str) -> bytes:
        salt = os.urandom(SALT_SIZE)
        iv = os.urandom(IV_SIZE)
        cipher = Cipher(
            algorithms.AES(self._derive_key(passphrase, salt)),
            modes.GCM(iv),
        )
        encryptor = cipher.encryptor()
        ciphertext = encryptor.update(data) + encryptor.finalize()
        logging.debug(f"Encrypted {len(data)} bytes with IV: {iv.hex()}")
        return base64.b64encode(salt + iv + encryptor.tag + ciphertext)

    def decrypt(self, encrypted_data: bytes, passphrase: str) -> bytes:
        raw_data = base64.b64decode(encrypted_data)
        salt = raw_data[:SALT_SIZE]
        iv = raw_data[SALT_SIZE:SALT_SIZE + IV_SIZE]
        tag = raw_data[SALT_SIZE + IV_SIZE:SALT_SIZE + IV_SIZE + TAG_SIZE]
        ciphertext = raw_data[SALT_SIZE + IV_SIZE + TAG_SIZE:]
        logging.debug(f"Decrypting data with IV: {iv.hex()}, ciphertext length: {len(ciphertext)}")
        cipher = Cipher(
            algorithms.AES(self._derive_key(passphrase, salt)),
            modes.GCM(iv, tag),
        )
        decryptor = cipher.decryptor()
        try:
            return decryptor.update(ciphertext) + decryptor.finalize()
        except InvalidTag as e:
            logging.error("Decryption failed due to invalid tag", exc_info=e)
            raise

    def load(self, path: Path) -> str:
        if not path.exists():
            logging.info(f"{path} does not exist; starting empty")
            return ""
        passphrase = self._prompt()
        plaintext = self.decrypt(path.read_bytes(), passphrase)
        self.last_passphrase = passphrase
        return plaintext.decode('utf-8')

    def save(self, path: Path, text: str, passphrase: Optional[str] = None) -> None:
        if passphrase is None:
            passphrase = self._prompt()
        _write_private(path, self.encrypt(text.encode('utf-8'), passphrase))
        self.last_passphrase = passphrase


BACKENDS = ('aes', 'plain')


def backend_for(name: str, passphrase_prompt: Callable[[], str]) -> FileBackend:
    if name == 'aes':
        return AES256FileBackend(passphrase_prompt)
    if name == 'plain':
        return PlainFileBackend()
    raise ValueError(f"Unknown file backend '{name}'. Expected one of: {', '.join(BACKENDS)}.")
