"""Greedy nearest-first ordering of part pickups.

Every part of every product in the order is ranked by its straight-line
distance from the robot's current position. This is a single-pass heuristic,
not a route optimizer: the ordering ignores the distance between consecutive
pickups and any obstacles on the floor.
"""

from __future__ import annotations

import logging
import math
from dataclasses import replace
from typing import Optional

from ...data.catalog_repository import PartCatalog
from ...models.domain import OrderRecord, PositionSample, SequencedPickup
from ...models.errors import PositionUnknown

logger = logging.getLogger(__name__)


def euclidean_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    return math.sqrt((x2 - x1) ** 2 + (y2 - y1) ** 2)


def sequence_pickups(
    order: OrderRecord,
    catalog: PartCatalog,
    position: Optional[PositionSample],
) -> list[SequencedPickup]:
    """Return every part required by ``order`` sorted by distance from ``position``.

    Raises:
        PositionUnknown: no position has been received.
        ProductNotConfigured: a product of the order is missing from the catalog.
            The whole order is rejected; no product is skipped.
    """
    if position is None:
        raise PositionUnknown("AMR current position not Known!")

    # Join everything first so a missing product aborts before any distance work.
    products = [catalog.lookup(product_key) for product_key in order.required_product_ids]

    pickups: list[SequencedPickup] = []
    for product in products:
        for part in product.parts:
            distance = euclidean_distance(position.x, position.y, part.x, part.y)
            pickups.append(SequencedPickup(distance=distance, part=replace(part, distance=distance)))

    # sorted() is stable: equal distances keep their order/catalog encounter order.
    pickups = sorted(pickups, key=lambda pickup: pickup.distance)
    logger.info(f"Sequenced {len(pickups)} pickups across {len(products)} products for order {order.order_id}")
    return pickups
