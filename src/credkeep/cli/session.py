import logging
from typing import Optional

from credkeep.config import Settings
from credkeep.core.encryption import FileBackend
from credkeep.core.store import CredentialStore


class Session:
    """One interactive session over the accounts file.

    A session loads the file once, hands out the store for edits and writes
    it back on commit. Dropping a session without committing discards every
    pending change.
    """

    def __init__(self, settings: Settings, backend: FileBackend):
        self.settings = settings
        self.backend = backend
        self._store: Optional[CredentialStore] = None

    @property
    def is_open(self) -> bool:
        return self._store is not None

    @property
    def store(self) -> CredentialStore:
        if self._store is None:
            raise RuntimeError("Session is not open.")
        return self._store

    def open(self) -> CredentialStore:
        path = self.settings.file_path
        logging.debug(f"Opening accounts file {path}")
        store = CredentialStore.load(self.backend.load(path))
        passphrase = self.settings.passphrase or getattr(self.backend, 'last_passphrase', None)
        if passphrase is not None:
            store.set_file_password(passphrase)
        self._store = store
        return store

    def _write(self, text: str, passphrase: Optional[str]) -> None:
        self.backend.save(self.settings.file_path, text, passphrase)

    def commit(self) -> bool:
        """Save the store if it has unsaved changes; returns True when written."""
        return self.store.save(self._write)

    def close(self) -> None:
        if self._store is not None and self._store.dirty:
            logging.info("Session closed with unsaved changes; discarding them")
        self._store = None
