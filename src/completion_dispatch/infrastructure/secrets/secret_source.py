"""Read-only access to provider credentials."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol

from pydantic import SecretStr

from ...core.config.provider_settings import ProviderSecrets


class SecretSource(Protocol):
    """Looks up a named secret; blank or unset secrets read as None."""

    def get_secret(self, name: str) -> str | None: ...


def _clean(value: str | SecretStr | None) -> str | None:
    if isinstance(value, SecretStr):
        value = value.get_secret_value()
    if value is None:
        return None
    value = value.strip()
    return value or None


class SettingsSecretSource:
    """Secret source backed by ``ProviderSecrets`` (environment and ``.env``)."""

    def __init__(self, secrets: ProviderSecrets | None = None):
        self._secrets = secrets or ProviderSecrets()

    def get_secret(self, name: str) -> str | None:
        return _clean(getattr(self._secrets, name.upper(), None))

    def configured(self) -> dict[str, bool]:
        """Which secrets are set, by name only."""
        return {name: self.get_secret(name) is not None for name in ProviderSecrets.model_fields}


class DictSecretSource:
    """In-memory secret source."""

    def __init__(self, values: Mapping[str, str | None] | None = None):
        self._values = dict(values or {})

    def get_secret(self, name: str) -> str | None:
        return _clean(self._values.get(name))

    def configured(self) -> dict[str, bool]:
        return {name: self.get_secret(name) is not None for name in self._values}
