"""Factory for creating provider clients based on configuration."""

from __future__ import annotations

import logging
from typing import Any

from ...core.config import Settings
from ...core.exceptions import ProviderClientError
from ...domain.enums import ProviderId
from .clients.base_client import BaseProviderClient, ProviderClientConfig
from .clients.gemini_client import GeminiClient
from .clients.openrouter_client import OpenRouterClient

logger = logging.getLogger(__name__)

_CLIENT_CLASSES: dict[ProviderId, type[BaseProviderClient]] = {
    ProviderId.GEMINI: GeminiClient,
    ProviderId.OPENROUTER: OpenRouterClient,
}


class ProviderClientFactory:
    """Factory for creating provider clients."""

    @staticmethod
    def create_client(provider: ProviderId | str, config: dict[str, Any]) -> BaseProviderClient:
        """Create a provider client.

        Args:
            provider: Provider id (gemini, openrouter)
            config: Client configuration (base_url, timeout, max_output_tokens, extra_headers)

        Returns:
            Configured provider client

        Raises:
            ProviderClientError: If provider is not supported or configuration is invalid
        """
        try:
            provider_id = ProviderId(str(getattr(provider, "value", provider)).lower())
        except ValueError as e:
            raise ProviderClientError(f"Unsupported provider: {provider}", provider=str(provider)) from e

        try:
            client_config = ProviderClientConfig(**config)
        except ValueError as e:
            raise ProviderClientError(
                f"Invalid configuration for {provider_id.value}: {e}",
                provider=provider_id.value,
                original_error=e,
            ) from e

        return _CLIENT_CLASSES[provider_id](client_config)

    @staticmethod
    def create_clients(settings: Settings) -> dict[ProviderId, BaseProviderClient]:
        """Create one client per supported provider.

        Providers missing from the priority list still get a client, since a
        caller override may name any of them.

        Args:
            settings: Application settings

        Returns:
            Clients keyed by provider id
        """
        clients: dict[ProviderId, BaseProviderClient] = {}
        for provider in _CLIENT_CLASSES:
            clients[provider] = ProviderClientFactory.create_client(
                provider, settings.provider_settings(provider).get_client_config()
            )
            logger.info(f"Created provider client: {provider.value}")
        return clients
