"""Schedule rotativo de videos (ncom)."""
from typing import Any
from fastapi import APIRouter, Depends

from app.api.deps import INVALID_JSON, get_json_body, get_schedule_service
from app.api.schemas.schedule import ScheduleOut, ScheduleReplaceOut
from app.core.exceptions import MalformedInput
from app.services.schedule_service import ScheduleService

router = APIRouter(prefix="/ncom", tags=["Schedule"])


@router.get("/schedule", response_model=ScheduleOut, summary="Schedule vigente (rota si venció)")
def get_schedule(service: ScheduleService = Depends(get_schedule_service)) -> ScheduleOut:
    return ScheduleOut(**service.current())


@router.post("/schedule", response_model=ScheduleReplaceOut, summary="Reemplazar schedule")
def replace_schedule(
    items: Any = Depends(get_json_body),
    service: ScheduleService = Depends(get_schedule_service),
) -> ScheduleReplaceOut:
    if items is INVALID_JSON:
        raise MalformedInput("Schedule must be an array")
    return ScheduleReplaceOut(**service.replace(items))
