"""Secret sources for provider credentials."""

from .secret_source import DictSecretSource, SecretSource, SettingsSecretSource

__all__ = ["SecretSource", "SettingsSecretSource", "DictSecretSource"]
