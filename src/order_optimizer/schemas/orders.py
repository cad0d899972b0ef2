"""Order request/response schemas."""

from __future__ import annotations

from typing import List, Literal, Optional

from pydantic import BaseModel, Field


class OrderRequest(BaseModel):
    order_id: int = Field(..., ge=0)
    description: str = ""
    persist: bool = Field(default=False, description="Write summary.json and pickups.csv for this order.")


class PointModel(BaseModel):
    x: float
    y: float


class ScaleModel(BaseModel):
    x: float
    y: float
    z: float


class ColorModel(BaseModel):
    r: float
    g: float
    b: float
    a: float


class MarkerModel(BaseModel):
    shape: Literal["box", "cylinder"]
    label: str
    position: PointModel
    scale: ScaleModel
    color: ColorModel
    frame_id: str
    action: str = "add"


class PickupModel(BaseModel):
    sequence: int
    part: str
    product: str
    x: float
    y: float
    distance: float


class OrderPathResponse(BaseModel):
    order_id: int
    description: str
    source: Optional[str] = None
    duplicate_sources: List[str] = Field(default_factory=list)
    destination: PointModel
    pickups: List[PickupModel]
    summary: List[str]
    markers: List[MarkerModel]
    output_directory: Optional[str] = None


class MarkerArrayResponse(BaseModel):
    order_id: int
    markers: List[MarkerModel]
