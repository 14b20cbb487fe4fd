"""Application DTOs."""

from .completion_dtos import CACHE_PROVENANCE, NOTICE_EMPTY_PROMPT, CompletionResult, provenance_header

__all__ = ["CompletionResult", "NOTICE_EMPTY_PROMPT", "CACHE_PROVENANCE", "provenance_header"]
