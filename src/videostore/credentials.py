"""Credential providers keyed by the acting machine identity.

The panel is served at ``/machine/<key>``; the key selects which stored
credential record applies. Providers are injected into the session so no
component reaches for ambient global state.
"""

from __future__ import annotations

import abc
import json
import os
from pathlib import Path
from typing import Any, Mapping

from pydantic import SecretStr

from videostore.exceptions import AuthError
from videostore.models.connection import DEFAULT_SIGNALING_ADDRESS, ConnectionParams
from videostore.utils.logging import get_logger

logger = get_logger(__name__)

ENV_PREFIX = "VIDEOSTORE_"


def machine_key_from_path(path: str) -> str:
    """Return the machine key from a ``/machine/<key>/...`` style path.

    Returns an empty string if the path has no such segment.
    """
    segments = (path or "").split("/")
    if len(segments) < 3:
        return ""
    return segments[2]


def parse_credential_record(record: Mapping[str, Any]) -> ConnectionParams:
    """Build :class:`ConnectionParams` from a stored credential record.

    The record shape is::

        {"apiKey": {"id": "...", "key": "..."},
         "machineId": "...", "hostname": "..."}

    Raises:
        AuthError: If the record is malformed or lacks the API key pair.
    """
    if not isinstance(record, Mapping):
        raise AuthError("API credentials not found")
    api_key = record.get("apiKey") or {}
    if not isinstance(api_key, Mapping):
        raise AuthError("API credentials not found")

    params = ConnectionParams(
        host=str(record.get("hostname") or ""),
        api_key_id=str(api_key.get("id") or ""),
        api_key=SecretStr(str(api_key.get("key") or "")),
        machine_id=str(record.get("machineId") or ""),
        signaling_address=str(record.get("signalingAddress") or DEFAULT_SIGNALING_ADDRESS),
    )
    if not params.has_credentials:
        raise AuthError("API credentials not found")
    return params


class CredentialProvider(abc.ABC):
    """Source of connection parameters for an acting identity."""

    @abc.abstractmethod
    def get(self, identity: str) -> ConnectionParams:
        """Return the connection parameters for *identity*.

        Raises:
            AuthError: If no usable credentials exist for *identity*.
        """


class StaticCredentialProvider(CredentialProvider):
    """Returns the same parameters for every identity."""

    def __init__(self, params: ConnectionParams) -> None:
        self._params = params

    def get(self, identity: str) -> ConnectionParams:
        return self._params


class JsonFileCredentialProvider(CredentialProvider):
    """Reads credential records from a JSON file mapping keys to records.

    The file is read on every lookup so edits take effect without a restart
    and nothing is kept in memory between sessions.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def get(self, identity: str) -> ConnectionParams:
        try:
            records = json.loads(self._path.read_text(encoding="utf-8"))
        except FileNotFoundError as exc:
            raise AuthError(f"credentials file not found: {self._path}") from exc
        except (OSError, json.JSONDecodeError) as exc:
            raise AuthError(f"credentials file unreadable: {exc}") from exc

        if not isinstance(records, Mapping) or identity not in records:
            logger.warning("credentials_missing", identity=identity, path=str(self._path))
            raise AuthError("API credentials not found")
        return parse_credential_record(records[identity])


class EnvCredentialProvider(CredentialProvider):
    """Reads a single credential set from ``VIDEOSTORE_*`` variables."""

    def __init__(self, environ: Mapping[str, str] | None = None, prefix: str = ENV_PREFIX) -> None:
        self._environ = environ if environ is not None else os.environ
        self._prefix = prefix

    def _var(self, name: str) -> str:
        return self._environ.get(f"{self._prefix}{name}", "")

    def get(self, identity: str) -> ConnectionParams:
        return parse_credential_record({
            "apiKey": {"id": self._var("API_KEY_ID"), "key": self._var("API_KEY")},
            "machineId": self._var("MACHINE_ID"),
            "hostname": self._var("HOST"),
            "signalingAddress": self._var("SIGNALING_ADDRESS"),
        })
