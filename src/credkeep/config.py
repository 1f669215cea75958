"""
Session settings with environment variable support.
"""

from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DATA_DIR = Path.home() / ".credkeep"
DEFAULT_FILE = DATA_DIR / "accounts.enc"
DEFAULT_LOG_FILE = DATA_DIR / "credkeep.log"


class Settings(BaseSettings):
    """Everything a session needs to know about where and how accounts are kept.

    Each field can be set through a ``CREDKEEP_``-prefixed environment
    variable, e.g. ``CREDKEEP_FILE`` or ``CREDKEEP_PASSWORD_LENGTH``.
    """

    model_config = SettingsConfigDict(env_prefix="CREDKEEP_", env_ignore_empty=True,
                                      populate_by_name=True, frozen=True)

    file_path: Path = Field(
        default=DEFAULT_FILE,
        validation_alias="CREDKEEP_FILE",
        description="Accounts file",
    )
    backend: str = Field(default="aes", description="File backend: aes or plain")
    show_passwords: bool = Field(default=False, description="Show passwords in listings")
    clipboard_timeout: int = Field(
        default=30, description="Seconds before the clipboard is cleared; 0 keeps it"
    )
    password_length: int = Field(default=16, description="Length of generated passwords")
    passphrase: Optional[str] = Field(default=None, repr=False, description="File passphrase")
    log_file: Path = Field(default=DEFAULT_LOG_FILE, description="Log file")

    @field_validator("file_path", "log_file")
    @classmethod
    def _expand_home(cls, value: Path) -> Path:
        return value.expanduser()

    def with_overrides(self, **changes) -> "Settings":
        """Return a copy with every non-None keyword applied."""
        return self.model_copy(update={k: v for k, v in changes.items() if v is not None})
