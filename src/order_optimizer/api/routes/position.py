"""Robot position feed endpoints."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from ...schemas.position import PositionModel, PositionUpdate
from ...services.orders.service import get_optimizer

router = APIRouter(prefix="/position", tags=["position"])


@router.post("", response_model=PositionModel, status_code=status.HTTP_200_OK)
def update_position(payload: PositionUpdate) -> PositionModel:
    sample = get_optimizer().update_position(payload.x, payload.y, payload.timestamp)
    return PositionModel(x=sample.x, y=sample.y, timestamp=sample.timestamp)


@router.get("", response_model=PositionModel, status_code=status.HTTP_200_OK)
def current_position() -> PositionModel:
    sample = get_optimizer().positions.snapshot()
    if sample is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="AMR current position not Known!")
    return PositionModel(x=sample.x, y=sample.y, timestamp=sample.timestamp)
