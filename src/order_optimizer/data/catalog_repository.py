"""Product configuration catalog built from the configuration records."""

from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, Mapping

from ..models.domain import Part, ProductRecord
from ..models.errors import (
    ConfigurationMissing,
    ProductKeyParseError,
    ProductNotConfigured,
    RecordFormatError,
)
from ..persistence.filesystem import RecordDirectory, coerce_record_int

logger = logging.getLogger(__name__)


def _coerce_float(value: Any, *, field: str, context: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise RecordFormatError(f"Unable to parse '{field}' of {context} from value '{value}'") from exc


def _parse_product(entry: Mapping[str, Any]) -> ProductRecord:
    try:
        raw_id = entry["id"]
        product_name = str(entry["product"])
    except (KeyError, TypeError) as exc:
        raise RecordFormatError(f"Invalid product configuration entry {dict(entry)!r}: {exc}") from exc
    product_id = coerce_record_int(raw_id, context=f"id of product '{product_name}'")

    parts: list[Part] = []
    for raw_part in entry.get("parts") or []:
        context = f"product {product_id}"
        try:
            part_name = str(raw_part["part"])
        except (KeyError, TypeError) as exc:
            raise RecordFormatError(f"Part without a name in {context}") from exc
        parts.append(
            Part(
                name=part_name,
                x=_coerce_float(raw_part.get("cx"), field="cx", context=context),
                y=_coerce_float(raw_part.get("cy"), field="cy", context=context),
                parent_product_name=product_name,
            )
        )
    return ProductRecord(product_id=product_id, product_name=product_name, parts=parts)


class PartCatalog:
    """Maps product ids to their configured parts.

    The catalog is written exactly once: the first successful :meth:`load`
    populates it and every later call is a no-op. Lookups after that point
    read an immutable mapping and need no locking.
    """

    def __init__(self) -> None:
        self._products: dict[int, ProductRecord] = {}
        self._loaded = False
        self._load_lock = threading.Lock()

    @property
    def loaded(self) -> bool:
        return self._loaded

    def __len__(self) -> int:
        return len(self._products)

    def load(self, records: Iterable[Mapping[str, Any]]) -> bool:
        """Populate the catalog from raw configuration entries.

        Returns True if this call loaded the catalog, False if it was already loaded.
        """
        if self._loaded:
            return False
        with self._load_lock:
            if self._loaded:
                return False
            products: dict[int, ProductRecord] = {}
            for entry in records:
                product = _parse_product(entry)
                if product.product_id in products:
                    logger.warning(
                        f"Product id {product.product_id} configured more than once; "
                        f"keeping '{products[product.product_id].product_name}'"
                    )
                    continue
                products[product.product_id] = product
            self._products = products
            self._loaded = True
        logger.info(f"Loaded {len(products)} product configurations")
        return True

    def load_from_directory(self, directory: RecordDirectory) -> bool:
        if self._loaded:
            return False
        if not directory.configuration_files():
            raise ConfigurationMissing("orders/configuration folder not found!")
        return self.load(directory.configuration_entries())

    def lookup(self, product_key: str) -> ProductRecord:
        if not self._loaded:
            raise ConfigurationMissing("orders/configuration folder not found!")
        try:
            product_id = int(str(product_key).strip())
        except ValueError as exc:
            raise ProductKeyParseError(str(product_key)) from exc
        try:
            return self._products[product_id]
        except KeyError as exc:
            raise ProductNotConfigured(str(product_key)) from exc

    def products(self) -> tuple[ProductRecord, ...]:
        return tuple(self._products.values())
