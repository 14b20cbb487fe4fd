"""Completion API endpoints."""

from fastapi import APIRouter, Depends, status

from .....application.use_cases import CompletePromptUseCase
from ....schemas import CompletionRequestSchema, CompletionResponse
from ...dependencies import get_complete_prompt_use_case

router = APIRouter()


@router.post("", response_model=CompletionResponse, status_code=status.HTTP_200_OK)
async def create_completion(
    payload: CompletionRequestSchema,
    use_case: CompletePromptUseCase = Depends(get_complete_prompt_use_case),
) -> CompletionResponse:
    """Answer one prompt through the candidate fallback chain.

    Provider failures are reported in the body (``success`` false with an
    ``error_kind``), never as HTTP errors.
    """
    result = await use_case.complete_detailed(
        payload.prompt,
        system_instruction=payload.system_instruction,
        temperature=payload.temperature,
        few_shot=payload.few_shot,
        history=payload.history,
        candidate_override=payload.candidate,
        show_provenance=payload.show_provenance,
    )
    return CompletionResponse.from_result(result)
