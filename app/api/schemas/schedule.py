"""Schemas del schedule rotativo (los items son objetos libres, p. ej. {videoIndex, delay})."""
from typing import Any, List, Union
from pydantic import BaseModel


class ScheduleOut(BaseModel):
    schedule: List[Any]
    nextRefresh: Union[int, float]


class ScheduleReplaceOut(BaseModel):
    success: bool
    schedule: List[Any]
    nextRefresh: Union[int, float]
