"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...models.errors import ConfigSourceUnavailable
from ...services.orders.service import get_optimizer

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/records", status_code=status.HTTP_200_OK)
def health_records() -> dict:
    """Report whether the record directories are reachable and the catalog is loaded."""
    optimizer = get_optimizer()
    records = optimizer.records
    try:
        has_orders = records.has_orders()
        has_configuration = records.has_configuration()
    except ConfigSourceUnavailable as exc:
        return {
            "data_root": str(records.root),
            "available": False,
            "error": str(exc),
        }
    return {
        "data_root": str(records.root),
        "available": True,
        "orders": has_orders,
        "configuration": has_configuration,
        "order_files": len(records.order_files()),
        "catalog_loaded": optimizer.catalog.loaded,
        "products": len(optimizer.catalog),
        "position_known": optimizer.positions.snapshot() is not None,
    }
