"""Domain models for catalog, order and robot position records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


@dataclass(slots=True)
class Part:
    """A pickup item; coordinates are where the robot collects it."""

    name: str
    x: float
    y: float
    parent_product_name: str
    distance: Optional[float] = None


@dataclass(slots=True)
class ProductRecord:
    product_id: int
    product_name: str
    parts: List[Part] = field(default_factory=list)


@dataclass(slots=True)
class OrderRecord:
    """An order resolved from the daily order files; x/y is the delivery destination."""

    order_id: int
    x: float
    y: float
    required_product_ids: List[str]
    source: Optional[str] = None
    duplicate_sources: List[str] = field(default_factory=list)

    @property
    def destination(self) -> tuple[float, float]:
        return (self.x, self.y)


@dataclass(slots=True, frozen=True)
class PositionSample:
    x: float
    y: float
    timestamp: datetime


@dataclass(slots=True)
class SequencedPickup:
    distance: float
    part: Part
