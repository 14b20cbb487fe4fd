"""Response caching."""

from .response_cache import InMemoryTTLStore, ResponseCache, TTLStore, make_cache_key

__all__ = ["TTLStore", "InMemoryTTLStore", "ResponseCache", "make_cache_key"]
