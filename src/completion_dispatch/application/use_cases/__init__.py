"""Application use cases."""

from .complete_prompt_use_case import CompletePromptUseCase

__all__ = ["CompletePromptUseCase"]
