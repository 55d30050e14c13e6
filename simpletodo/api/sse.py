"""Server-Sent Events bridge between PromptingService and HTTP clients."""

import asyncio
import json
import logging
from typing import AsyncIterator, Awaitable, Callable

from simpletodo.models.constants import SSE_KEEP_ALIVE_SECONDS
from simpletodo.models.prompt import ProactivePrompt
from simpletodo.services.prompting_service import PromptingService

logger = logging.getLogger(__name__)

KEEP_ALIVE_FRAME = ": keep-alive\n\n"


def format_sse_event(event: str, payload: dict) -> str:
    """Encode one named SSE event with a JSON data line."""
    return f"event: {event}\ndata: {json.dumps(payload, ensure_ascii=False)}\n\n"


async def prompt_event_stream(
    prompting_service: PromptingService,
    is_disconnected: Callable[[], Awaitable[bool]],
    keep_alive_seconds: float = SSE_KEEP_ALIVE_SECONDS,
) -> AsyncIterator[str]:
    """Yield ``prompt`` events as the service emits them.

    Prompts are emitted from timer threads, so the listener hands them to
    the event loop with ``call_soon_threadsafe``. A comment frame is sent
    whenever ``keep_alive_seconds`` pass without a prompt.
    """
    loop = asyncio.get_running_loop()
    queue: "asyncio.Queue[ProactivePrompt]" = asyncio.Queue()

    def on_prompt(prompt: ProactivePrompt) -> None:
        loop.call_soon_threadsafe(queue.put_nowait, prompt)

    prompting_service.subscribe(on_prompt)
    logger.info(f"SSE connection established ({prompting_service.listener_count} active)")
    try:
        while True:
            if await is_disconnected():
                break
            try:
                prompt = await asyncio.wait_for(queue.get(), timeout=keep_alive_seconds)
            except asyncio.TimeoutError:
                yield KEEP_ALIVE_FRAME
                continue
            yield format_sse_event("prompt", prompt.to_dict())
            logger.info(f"Prompt sent via SSE for task {prompt.task_id}")
    finally:
        prompting_service.unsubscribe(on_prompt)
        logger.info(f"SSE connection closed ({prompting_service.listener_count} active)")
