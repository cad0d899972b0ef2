"""Robot position feed schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class PositionUpdate(BaseModel):
    x: float
    y: float
    timestamp: Optional[datetime] = Field(default=None, description="Sample time; defaults to receipt time.")


class PositionModel(BaseModel):
    x: float
    y: float
    timestamp: datetime
