"""Health, analytics and celebration endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends

from simpletodo.api.dependencies import get_analytics_service, get_celebration_service
from simpletodo.models.celebration import CelebrationVariant
from simpletodo.models.constants import DEFAULT_CELEBRATION_DISPLAY_MS
from simpletodo.models.task_helpers import format_timestamp, utc_now
from simpletodo.services.analytics_service import AnalyticsService
from simpletodo.services.celebration_service import CelebrationService

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)

FALLBACK_CELEBRATION = {
    "message": "Great job! Task completed.",
    "variant": CelebrationVariant.SUPPORTIVE.value,
    "duration": DEFAULT_CELEBRATION_DISPLAY_MS,
}


@router.get("/health", tags=["Health"])
def health():
    return {"status": "ok", "timestamp": format_timestamp(utc_now())}


@router.get("/analytics", tags=["Analytics"])
def get_analytics(analytics_service: AnalyticsService = Depends(get_analytics_service)):
    counts = analytics_service.get_task_count_by_status()
    return {"completedCount": counts["completed"], "activeCount": counts["active"]}


@router.get("/analytics/prompts", tags=["Analytics"])
def get_prompt_analytics(analytics_service: AnalyticsService = Depends(get_analytics_service)):
    return {
        "promptResponseRate": analytics_service.get_prompt_response_rate(),
        "responseBreakdown": analytics_service.get_prompt_response_breakdown(),
        "averageResponseTime": analytics_service.get_average_response_time(),
    }


@router.get("/celebrations/message", tags=["Celebrations"])
def get_celebration_message(
    taskId: Optional[str] = None,
    celebration_service: CelebrationService = Depends(get_celebration_service),
):
    """Random celebration message. Never fails: errors fall back to a fixed message."""
    try:
        celebration = celebration_service.get_celebration_message(taskId)
    except Exception as e:
        logger.error(f"Celebration message failed: {type(e).__name__}: {str(e)}")
        return dict(FALLBACK_CELEBRATION)

    return {
        "message": celebration.message,
        "variant": celebration.variant,
        "duration": celebration.duration if celebration.duration is not None else DEFAULT_CELEBRATION_DISPLAY_MS,
    }
