"""Request schemas for API endpoints."""

from pydantic import Field

from .common import BaseSchema


class CompletionRequestSchema(BaseSchema):
    """Request schema for a completion.

    Prompt and temperature are checked by the use case, so a blank prompt or
    an out-of-range temperature comes back as a tagged answer, not a 422.
    """

    prompt: str = Field(
        ...,
        description="The question to answer",
        json_schema_extra={"example": "Summarize the benefits of unit tests in one sentence."},
    )

    system_instruction: str | None = Field(
        None,
        description="Role or rules for the model",
        json_schema_extra={"example": "You are a concise technical writer."},
    )

    temperature: float | None = Field(None, description="Sampling temperature, 0.0 to 2.0")

    few_shot: list[list[str | None]] | None = Field(
        None,
        description="Ordered (input, output) example pairs",
        json_schema_extra={"example": [["2+2", "4"]]},
    )

    history: list[list[str | None]] | None = Field(
        None,
        description="Ordered (user, assistant) prior turns",
    )

    candidate: str | None = Field(
        None,
        description="Candidate tried first: 'provider:model' or a bare model id",
        json_schema_extra={"example": "openrouter:meta-llama/llama-3.3-70b-instruct:free"},
    )

    show_provenance: bool = Field(False, description="Prefix the answer with model, tokens and latency")
