"""Infrastructure layer: provider adapters, cache, secrets and monitoring."""
