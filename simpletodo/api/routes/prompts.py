"""Proactive prompt endpoints: the SSE stream plus response tracking."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import PlainTextResponse, StreamingResponse

from simpletodo.api.dependencies import get_data_service, get_prompting_service, is_valid_uuid
from simpletodo.api.schemas import PromptActionRequest
from simpletodo.api.sse import prompt_event_stream
from simpletodo.errors import TaskNotFoundError
from simpletodo.models.prompt import PromptResponse
from simpletodo.services.prompting_service import PromptingService
from simpletodo.storage.data_service import DataService

router = APIRouter(prefix="/api/prompts", tags=["Prompts"])
logger = logging.getLogger(__name__)

SSE_HEADERS = {"Cache-Control": "no-cache", "Connection": "keep-alive"}


def _require_task_id(payload: Optional[PromptActionRequest]) -> str:
    task_id = payload.task_id if payload is not None else None
    if not task_id or not isinstance(task_id, str):
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid or missing taskId")
    if not is_valid_uuid(task_id):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid taskId format (must be UUID)"
        )
    return task_id


def _respond(
    prompting_service: PromptingService,
    payload: Optional[PromptActionRequest],
    response: PromptResponse,
) -> dict:
    task_id = _require_task_id(payload)
    pending = prompting_service.log_prompt_response(task_id, response.value, payload.prompt_id)
    is_first_prompt = pending is not None and pending.is_first_prompt
    return {
        "followUpMessage": prompting_service.get_follow_up_message(is_first_prompt, response.value)
    }


@router.get("/stream")
async def stream_prompts(
    request: Request,
    data_service: DataService = Depends(get_data_service),
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """SSE stream of ``prompt`` events with a keep-alive comment every 30 seconds.

    Refused with 503 while prompting is disabled.
    """
    if not data_service.load_config().prompting_enabled:
        logger.info("SSE connection rejected - prompting disabled")
        return PlainTextResponse(
            "Prompting is currently disabled", status_code=status.HTTP_503_SERVICE_UNAVAILABLE
        )

    return StreamingResponse(
        prompt_event_stream(prompting_service, request.is_disconnected),
        media_type="text/event-stream",
        headers=SSE_HEADERS,
    )


@router.post("/test", status_code=status.HTTP_201_CREATED)
def trigger_test_prompt(prompting_service: PromptingService = Depends(get_prompting_service)):
    """Generate and broadcast a prompt immediately."""
    logger.info("Manual prompt test triggered")
    prompt = prompting_service.trigger_immediate_prompt()
    if prompt is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No active tasks available")
    return prompt.to_dict()


@router.post("/snooze")
def snooze_prompt(
    payload: Optional[PromptActionRequest] = None,
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """Re-prompt the task in one hour and record a ``snooze`` response."""
    task_id = _require_task_id(payload)
    try:
        prompting_service.snooze_prompt(task_id)
    except TaskNotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(e))
    result = _respond(prompting_service, payload, PromptResponse.SNOOZE)
    logger.info(f"Prompt snoozed for task {task_id}")
    return result


@router.post("/complete")
def complete_prompt(
    payload: Optional[PromptActionRequest] = None,
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """Record a ``complete`` response. The task itself is completed via the tasks API."""
    return _respond(prompting_service, payload, PromptResponse.COMPLETE)


@router.post("/dismiss")
def dismiss_prompt(
    payload: Optional[PromptActionRequest] = None,
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    return _respond(prompting_service, payload, PromptResponse.DISMISS)
