"""Runtime settings read from ``VIDEOSTORE_*`` environment variables."""

from __future__ import annotations

import os
import secrets
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, Field

from videostore.credentials import (
    CredentialProvider,
    EnvCredentialProvider,
    JsonFileCredentialProvider,
)


class Settings(BaseModel):
    """Process-wide settings for the API, panel and CLI."""

    credentials_file: Path | None = Field(
        default=None, description="JSON file mapping machine keys to credential records",
    )
    download_dir: Path = Field(default=Path("downloads"))
    storage_secret: str = Field(default_factory=lambda: secrets.token_hex(32), repr=False)
    host: str = "127.0.0.1"
    port: int = Field(default=8000, gt=0, lt=65536)
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> Settings:
        env = environ if environ is not None else os.environ
        values: dict[str, object] = {}
        if env.get("VIDEOSTORE_CREDENTIALS_FILE"):
            values["credentials_file"] = Path(env["VIDEOSTORE_CREDENTIALS_FILE"])
        if env.get("VIDEOSTORE_DOWNLOAD_DIR"):
            values["download_dir"] = Path(env["VIDEOSTORE_DOWNLOAD_DIR"])
        if env.get("VIDEOSTORE_STORAGE_SECRET"):
            values["storage_secret"] = env["VIDEOSTORE_STORAGE_SECRET"]
        if env.get("VIDEOSTORE_BIND_HOST"):
            values["host"] = env["VIDEOSTORE_BIND_HOST"]
        if env.get("VIDEOSTORE_BIND_PORT"):
            values["port"] = int(env["VIDEOSTORE_BIND_PORT"])
        if env.get("VIDEOSTORE_LOG_LEVEL"):
            values["log_level"] = env["VIDEOSTORE_LOG_LEVEL"]
        return cls(**values)

    def credential_provider(self) -> CredentialProvider:
        """File-backed provider if a credentials file is configured, else env."""
        if self.credentials_file is not None:
            return JsonFileCredentialProvider(self.credentials_file)
        return EnvCredentialProvider()


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the process settings, loading them on first use."""
    global _settings
    if _settings is None:
        _settings = Settings.from_env()
    return _settings


def configure(settings: Settings) -> None:
    """Replace the process settings (CLI options, tests)."""
    global _settings
    _settings = settings
