"""Serializers for order sequencing outputs."""

from __future__ import annotations

import csv
import io
from typing import Sequence

from ...models.domain import OrderRecord, SequencedPickup
from .presenter import Marker


def marker_to_json(marker: Marker) -> dict:
    return {
        "shape": marker.shape,
        "label": marker.label,
        "position": {"x": marker.x, "y": marker.y},
        "scale": {"x": marker.scale[0], "y": marker.scale[1], "z": marker.scale[2]},
        "color": {"r": marker.color[0], "g": marker.color[1], "b": marker.color[2], "a": marker.color[3]},
        "frame_id": marker.frame_id,
        "action": marker.action,
    }


def markers_to_json(markers: Sequence[Marker]) -> list[dict]:
    return [marker_to_json(marker) for marker in markers]


def order_result_to_json(
    order: OrderRecord,
    sequence: Sequence[SequencedPickup],
    lines: Sequence[str],
    markers: Sequence[Marker],
    *,
    description: str = "",
) -> dict:
    return {
        "order_id": order.order_id,
        "description": description,
        "source": order.source,
        "duplicate_sources": list(order.duplicate_sources),
        "destination": {"x": order.x, "y": order.y},
        "pickups": [
            {
                "sequence": index,
                "part": pickup.part.name,
                "product": pickup.part.parent_product_name,
                "x": pickup.part.x,
                "y": pickup.part.y,
                "distance": pickup.distance,
            }
            for index, pickup in enumerate(sequence)
        ],
        "summary": list(lines),
        "markers": markers_to_json(markers),
    }


def order_result_to_csv(sequence: Sequence[SequencedPickup]) -> str:
    buffer = io.StringIO()
    fieldnames = ["sequence", "part", "product", "x", "y", "distance"]
    writer = csv.DictWriter(buffer, fieldnames=fieldnames, lineterminator="\n")
    writer.writeheader()
    for index, pickup in enumerate(sequence):
        writer.writerow(
            {
                "sequence": index,
                "part": pickup.part.name,
                "product": pickup.part.parent_product_name,
                "x": pickup.part.x,
                "y": pickup.part.y,
                "distance": pickup.distance,
            }
        )
    return buffer.getvalue()
