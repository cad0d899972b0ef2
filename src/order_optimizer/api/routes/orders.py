"""Order sequencing endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...models.errors import (
    ConfigSourceUnavailable,
    ConfigurationMissing,
    DuplicateOrderError,
    OrderNotFound,
    OrderOptimizerError,
    PositionUnknown,
    ProductNotConfigured,
)
from ...schemas.orders import MarkerArrayResponse, OrderPathResponse, OrderRequest
from ...services.orders.service import get_optimizer
from ...services.outputs.order_formatter import order_result_to_json

router = APIRouter(prefix="/orders", tags=["orders"])

_ERROR_STATUS = (
    (OrderNotFound, status.HTTP_404_NOT_FOUND),
    (PositionUnknown, status.HTTP_409_CONFLICT),
    (ProductNotConfigured, status.HTTP_400_BAD_REQUEST),
    (DuplicateOrderError, status.HTTP_400_BAD_REQUEST),
    (ConfigSourceUnavailable, status.HTTP_503_SERVICE_UNAVAILABLE),
    (ConfigurationMissing, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def _status_for(exc: OrderOptimizerError) -> int:
    for error_type, status_code in _ERROR_STATUS:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_400_BAD_REQUEST


@router.post("/next", response_model=OrderPathResponse, status_code=status.HTTP_200_OK)
def next_order(payload: OrderRequest) -> OrderPathResponse:
    try:
        outcome = get_optimizer().handle_order(payload.order_id, payload.description, persist=payload.persist)
    except OrderOptimizerError as exc:
        raise HTTPException(status_code=_status_for(exc), detail=str(exc)) from exc
    except Exception as exc:
        logging.exception(f"Error handling order {payload.order_id}: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to handle order: {str(exc)}"
        ) from exc

    result = order_result_to_json(
        outcome.order,
        outcome.sequence,
        outcome.presentation.lines,
        outcome.presentation.markers,
        description=outcome.description,
    )
    if outcome.run_directory is not None:
        result["output_directory"] = str(outcome.run_directory)
    return OrderPathResponse(**result)


@router.get("/markers/latest", response_model=MarkerArrayResponse, status_code=status.HTTP_200_OK)
def latest_markers() -> MarkerArrayResponse:
    """Most recently published marker array."""
    latest = get_optimizer().latest_markers
    if latest is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No markers published yet")
    return MarkerArrayResponse(**latest)
