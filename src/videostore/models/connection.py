"""Connection parameter models."""

from __future__ import annotations

from pydantic import BaseModel, Field, SecretStr

DEFAULT_SIGNALING_ADDRESS = "https://app.viam.com:443"


class ConnectionParams(BaseModel):
    """Everything needed to open an authenticated machine connection."""
    model_config = {"frozen": True}

    host: str = Field(default="", description="Machine address")
    api_key_id: str = Field(default="", description="Auth entity (API key ID)")
    api_key: SecretStr = Field(default=SecretStr(""), description="Auth payload")
    machine_id: str = Field(default="", description="Machine identifier")
    signaling_address: str = Field(default=DEFAULT_SIGNALING_ADDRESS)

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key_id) and bool(self.api_key.get_secret_value())
