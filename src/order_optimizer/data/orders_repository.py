"""Order lookup across the daily order record files."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

from ..config import settings
from ..models.domain import OrderRecord
from ..models.errors import DuplicateOrderError, OrderNotFound, RecordFormatError
from ..persistence.filesystem import RecordDirectory, RecordGroup, coerce_record_int, load_record_file

logger = logging.getLogger(__name__)


def _entry_order_id(entry: Mapping[str, Any], source: str) -> Optional[int]:
    value = entry.get("order")
    if value is None:
        return None
    return coerce_record_int(value, context=f"order id of '{source}'")


def _build_order(order_id: int, entry: Mapping[str, Any], source: str) -> OrderRecord:
    try:
        x = float(entry["cx"])
        y = float(entry["cy"])
    except (KeyError, TypeError, ValueError) as exc:
        raise RecordFormatError(f"Order {order_id} in '{source}' has no valid destination: {exc}") from exc
    products = [str(product) for product in entry.get("products") or []]
    return OrderRecord(order_id=order_id, x=x, y=y, required_product_ids=products, source=source)


def scan_group(order_id: int, group: RecordGroup) -> Optional[OrderRecord]:
    """Return the first entry of ``group`` carrying ``order_id``, if any."""

    for entry in group.entries:
        if _entry_order_id(entry, group.name) == order_id:
            return _build_order(order_id, entry, group.name)
    return None


class OrderIndex:
    """Resolves an order id against groups of order records.

    Groups are scanned in parallel and every scan runs to completion; the
    results are then merged in group order so the first group holding the
    order wins. An order found in more than one group is reported on the
    resolved record, or rejected when ``strict_duplicates`` is set.
    """

    def __init__(
        self,
        *,
        max_workers: int | None = None,
        strict_duplicates: bool | None = None,
    ) -> None:
        self.max_workers = max_workers or settings.scan_max_workers
        self.strict_duplicates = (
            strict_duplicates if strict_duplicates is not None else settings.strict_duplicate_orders
        )

    def resolve(self, order_id: int, record_sources: Sequence[RecordGroup]) -> OrderRecord:
        if not record_sources:
            raise OrderNotFound(order_id)

        workers = min(self.max_workers, len(record_sources))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            results = list(executor.map(lambda group: scan_group(order_id, group), record_sources))

        matches = [match for match in results if match is not None]
        if not matches:
            raise OrderNotFound(order_id)

        resolved = matches[0]
        if len(matches) > 1:
            sources = [match.source or "" for match in matches]
            if self.strict_duplicates:
                raise DuplicateOrderError(order_id, sources)
            logger.warning(
                f"Order {order_id} appears in {len(matches)} order files ({', '.join(sources)}); "
                f"using '{resolved.source}'"
            )
            resolved.duplicate_sources = sources[1:]

        logger.info(
            f"Resolved order {order_id} from '{resolved.source}' "
            f"with {len(resolved.required_product_ids)} products"
        )
        return resolved

    def resolve_from_files(self, order_id: int, files: Sequence[Path]) -> OrderRecord:
        workers = min(self.max_workers, len(files)) or 1
        with ThreadPoolExecutor(max_workers=workers) as executor:
            groups = list(executor.map(load_record_file, files))
        return self.resolve(order_id, groups)

    def resolve_from_directory(self, order_id: int, directory: RecordDirectory) -> OrderRecord:
        return self.resolve_from_files(order_id, directory.order_files())
