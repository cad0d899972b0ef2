"""Render sequenced pickups as summary lines and visualization markers."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Sequence

from ...config import settings
from ...models.domain import OrderRecord, PositionSample, SequencedPickup

MARKER_SCALE = (1.0, 0.1, 0.1)
ROBOT_COLOR = (0.0, 1.0, 0.0, 1.0)
PICKUP_COLOR = (1.0, 0.0, 0.0, 1.0)
ROBOT_LABEL = "AMR"


@dataclass(slots=True)
class Marker:
    shape: str  # "box" for the robot, "cylinder" for pickups
    label: str
    x: float
    y: float
    scale: tuple[float, float, float]
    color: tuple[float, float, float, float]
    frame_id: str
    action: str = "add"


@dataclass(slots=True)
class OrderPresentation:
    lines: list[str]
    markers: list[Marker]

    @property
    def summary(self) -> str:
        return "\n".join(self.lines)


def _num(value: float) -> str:
    return format(value, "g")


def header_line(order_id: int, description: str) -> str:
    return f"Working on order {order_id} ({description})"


def summary_lines(order: OrderRecord, sequence: Sequence[SequencedPickup]) -> list[str]:
    lines = [
        f"{index}. Fetching part '{pickup.part.name}' for product '{pickup.part.parent_product_name}' "
        f"at x: {_num(pickup.part.x)}, y: {_num(pickup.part.y)}"
        for index, pickup in enumerate(sequence)
    ]
    lines.append(f"{len(sequence)}. Delivering to destination x: {_num(order.x)}, y: {_num(order.y)}")
    return lines


def robot_marker(position: Optional[PositionSample], frame_id: str) -> Marker:
    x, y = (position.x, position.y) if position is not None else (0.0, 0.0)
    return Marker(
        shape="box",
        label=ROBOT_LABEL,
        x=x,
        y=y,
        scale=MARKER_SCALE,
        color=ROBOT_COLOR,
        frame_id=frame_id,
    )


def pickup_marker(pickup: SequencedPickup, frame_id: str) -> Marker:
    part = pickup.part
    return Marker(
        shape="cylinder",
        label=f"{part.parent_product_name} {part.name}",
        x=part.x,
        y=part.y,
        scale=MARKER_SCALE,
        color=PICKUP_COLOR,
        frame_id=frame_id,
    )


def present(
    order: OrderRecord,
    sequence: Sequence[SequencedPickup],
    position: Optional[PositionSample],
    *,
    frame_id: str | None = None,
) -> OrderPresentation:
    """Build the pickup summary and the marker array, robot marker first."""

    frame = frame_id or settings.marker_frame_id
    markers = [robot_marker(position, frame)]
    markers.extend(pickup_marker(pickup, frame) for pickup in sequence)
    return OrderPresentation(lines=summary_lines(order, sequence), markers=markers)
