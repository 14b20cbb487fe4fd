"""Completion request value object."""

from __future__ import annotations

from collections.abc import Sequence

from pydantic import BaseModel, ConfigDict, Field, field_validator

DEFAULT_TEMPERATURE = 0.3

TextPair = tuple[str, str]


class CompletionRequest(BaseModel):
    """One natural-language prompt plus its conversational context.

    Few-shot pairs are (input, output) examples; history pairs are prior
    (user, assistant) turns. Both keep caller order.
    """

    model_config = ConfigDict(frozen=True)

    prompt: str = Field(..., min_length=1, description="The question to answer")
    system_instruction: str = Field(default="", description="Role or rules for the model")
    temperature: float = Field(default=DEFAULT_TEMPERATURE, ge=0.0, le=2.0, description="Sampling temperature")
    few_shot: tuple[TextPair, ...] = Field(default=(), description="Ordered (input, output) examples")
    history: tuple[TextPair, ...] = Field(default=(), description="Ordered (user, assistant) prior turns")

    @field_validator("prompt")
    @classmethod
    def validate_prompt(cls, v: str) -> str:
        """Reject prompts that are empty once whitespace is removed."""
        if not v.strip():
            raise ValueError("Prompt cannot be empty or contain only whitespace")
        return v

    @field_validator("system_instruction", mode="before")
    @classmethod
    def default_system_instruction(cls, v: str | None) -> str:
        """Treat a missing instruction as the empty instruction."""
        return v or ""

    @field_validator("few_shot", "history", mode="before")
    @classmethod
    def normalize_pairs(cls, v: object) -> tuple[TextPair, ...]:
        """Coerce row-like input (lists of cells, None) into string pairs."""
        if not v:
            return ()
        if isinstance(v, (str, bytes)) or not isinstance(v, Sequence):
            raise ValueError("pairs must be a list of rows")

        pairs: list[TextPair] = []
        for row in v:
            if isinstance(row, (str, bytes)) or not isinstance(row, Sequence):
                raise ValueError(f"each pair must be a row of two cells, got {type(row).__name__}")
            cells = list(row) + ["", ""]
            left, right = cells[0], cells[1]
            pairs.append(("" if left is None else str(left), "" if right is None else str(right)))
        return tuple(pairs)

    @property
    def prompt_preview(self) -> str:
        """First 100 characters of the prompt, as stored in usage records."""
        return self.prompt[:100]
