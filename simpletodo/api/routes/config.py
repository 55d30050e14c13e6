"""User configuration endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from simpletodo.api.dependencies import get_data_service, get_prompting_service, get_wip_limit_service
from simpletodo.api.schemas import (
    UpdateBrowserNotificationsRequest,
    UpdateCelebrationsRequest,
    UpdateConfigRequest,
    UpdateEducationRequest,
    UpdatePromptingRequest,
    UpdateQuietHoursRequest,
    UpdateWipLimitRequest,
)
from simpletodo.errors import PromptingError, WIPLimitError
from simpletodo.models.task_helpers import format_timestamp
from simpletodo.services.prompting_service import PromptingService
from simpletodo.services.wip_limit_service import WIPLimitService
from simpletodo.storage.data_service import DataService

router = APIRouter(prefix="/api/config", tags=["Config"])
logger = logging.getLogger(__name__)


@router.get("")
def get_config(data_service: DataService = Depends(get_data_service)):
    return data_service.load_config().to_dict()


@router.patch("")
def update_config(
    payload: UpdateConfigRequest,
    data_service: DataService = Depends(get_data_service),
):
    """Apply a partial update to any of the general config fields."""
    config = data_service.load_config().model_copy(update=payload.changes())
    data_service.save_config(config)
    logger.info(f"Configuration updated: {sorted(payload.changes())}")
    return config.to_dict()


@router.get("/wip-limit")
def get_wip_limit(
    data_service: DataService = Depends(get_data_service),
    wip_limit_service: WIPLimitService = Depends(get_wip_limit_service),
):
    config = data_service.load_config()
    return {
        "limit": config.wip_limit,
        "currentCount": wip_limit_service.get_current_wip_count(),
        "canAddTask": wip_limit_service.can_add_task(),
        "hasSeenWIPLimitEducation": config.has_seen_wip_limit_education,
    }


@router.put("/wip-limit")
def update_wip_limit(
    payload: UpdateWipLimitRequest,
    data_service: DataService = Depends(get_data_service),
    wip_limit_service: WIPLimitService = Depends(get_wip_limit_service),
):
    """Set the WIP limit. Saving it also marks first-launch setup as done."""
    try:
        wip_limit_service.set_wip_limit(payload.limit)
    except WIPLimitError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    config = data_service.load_config()
    data_service.save_config(config.model_copy(update={"has_completed_setup": True}))

    return {
        "limit": payload.limit,
        "currentCount": wip_limit_service.get_current_wip_count(),
        "canAddTask": wip_limit_service.can_add_task(),
        "hasCompletedSetup": True,
    }


@router.patch("/education")
def update_education(
    payload: UpdateEducationRequest,
    data_service: DataService = Depends(get_data_service),
):
    config = data_service.load_config()
    data_service.save_config(
        config.model_copy(update={"has_seen_wip_limit_education": payload.has_seen_wip_limit_education})
    )
    return {"hasSeenWIPLimitEducation": payload.has_seen_wip_limit_education}


@router.get("/celebrations")
def get_celebrations(data_service: DataService = Depends(get_data_service)):
    config = data_service.load_config()
    return {
        "celebrationsEnabled": config.celebrations_enabled,
        "celebrationDurationSeconds": config.celebration_duration_seconds,
    }


@router.put("/celebrations")
def update_celebrations(
    payload: UpdateCelebrationsRequest,
    data_service: DataService = Depends(get_data_service),
):
    config = data_service.load_config().model_copy(
        update={
            "celebrations_enabled": payload.celebrations_enabled,
            "celebration_duration_seconds": payload.celebration_duration_seconds,
        }
    )
    data_service.save_config(config)
    return config.to_dict()


@router.get("/prompting")
def get_prompting(
    data_service: DataService = Depends(get_data_service),
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """Prompting settings plus ``nextPromptTime`` once a prompt has fired."""
    config = data_service.load_config()
    response = {
        "enabled": config.prompting_enabled,
        "frequencyHours": config.prompting_frequency_hours,
    }
    next_prompt_time = prompting_service.get_next_prompt_time()
    if next_prompt_time is not None:
        response["nextPromptTime"] = format_timestamp(next_prompt_time)
    return response


@router.put("/prompting")
def update_prompting(
    payload: UpdatePromptingRequest,
    prompting_service: PromptingService = Depends(get_prompting_service),
):
    """Save prompting settings and restart the scheduler."""
    try:
        prompting_service.update_prompting_config(payload.enabled, payload.frequency_hours)
    except PromptingError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(e))
    return {"enabled": payload.enabled, "frequencyHours": payload.frequency_hours}


@router.put("/browser-notifications")
def update_browser_notifications(
    payload: UpdateBrowserNotificationsRequest,
    data_service: DataService = Depends(get_data_service),
):
    config = data_service.load_config().model_copy(
        update={"browser_notifications_enabled": payload.enabled}
    )
    data_service.save_config(config)
    return config.to_dict()


@router.get("/quiet-hours")
def get_quiet_hours(data_service: DataService = Depends(get_data_service)):
    config = data_service.load_config()
    return {
        "enabled": config.quiet_hours_enabled,
        "startTime": config.quiet_hours_start,
        "endTime": config.quiet_hours_end,
    }


@router.put("/quiet-hours")
def update_quiet_hours(
    payload: UpdateQuietHoursRequest,
    data_service: DataService = Depends(get_data_service),
):
    """Save quiet hours. Equal start and end times mean quiet all day."""
    config = data_service.load_config().model_copy(
        update={
            "quiet_hours_enabled": payload.enabled,
            "quiet_hours_start": payload.start_time,
            "quiet_hours_end": payload.end_time,
        }
    )
    data_service.save_config(config)
    return {"enabled": payload.enabled, "startTime": payload.start_time, "endTime": payload.end_time}
