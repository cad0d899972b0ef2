"""Order handling orchestration: resolve, sequence, present, publish."""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Optional, Sequence

from ...config import settings
from ...data.catalog_repository import PartCatalog
from ...data.orders_repository import OrderIndex
from ...models.domain import OrderRecord, PositionSample, SequencedPickup
from ...models.errors import ConfigSourceUnavailable, OrderOptimizerError
from ...persistence.filesystem import FileStorage, RecordDirectory
from ..outputs.order_formatter import markers_to_json, order_result_to_csv, order_result_to_json
from ..outputs.presenter import OrderPresentation, header_line, present
from ..position import PositionTracker
from ..publishing.publishers import InMemoryPublisher, ResultPublisher, build_publishers
from ..sequencing.sequencer import sequence_pickups

logger = logging.getLogger(__name__)

LOG_FILENAME = "order_optimizer.log"


@dataclass(slots=True)
class OrderOutcome:
    order: OrderRecord
    description: str
    position: PositionSample
    sequence: list[SequencedPickup]
    presentation: OrderPresentation
    run_directory: Optional[Path] = None


class DiagnosticLog:
    """Mirrors summary and error lines to the logger and an append-only file."""

    def __init__(self, path: Path | None = None, storage: FileStorage | None = None) -> None:
        self.storage = storage or FileStorage()
        self.path = path or settings.log_file or self.storage.output_root / LOG_FILENAME

    def info(self, line: str) -> None:
        logger.info(line)
        self.storage.append_line(self.path, line)

    def error(self, message: str) -> None:
        line = f"[ERROR]: {message}"
        logger.error(line)
        self.storage.append_line(self.path, line)


class OrderOptimizer:
    """Holds the long-lived state shared by the position feed and order requests.

    The catalog is loaded on the first order and reused afterwards; order
    records are re-read for every request. Order requests are handled one at a
    time while position updates may arrive concurrently.
    """

    def __init__(
        self,
        *,
        records: RecordDirectory | None = None,
        catalog: PartCatalog | None = None,
        positions: PositionTracker | None = None,
        order_index: OrderIndex | None = None,
        publishers: Sequence[ResultPublisher] | None = None,
        storage: FileStorage | None = None,
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.records = records or RecordDirectory()
        self.catalog = catalog or PartCatalog()
        self.positions = positions or PositionTracker()
        self.order_index = order_index or OrderIndex()
        self.publishers = list(publishers) if publishers is not None else build_publishers()
        self.storage = storage or FileStorage(root=self.records.root)
        self.diagnostics = diagnostics or DiagnosticLog(storage=self.storage)
        self._order_lock = threading.Lock()

    @property
    def latest_markers(self) -> Optional[dict]:
        for publisher in self.publishers:
            if isinstance(publisher, InMemoryPublisher):
                return publisher.latest()
        return None

    def update_position(self, x: float, y: float, timestamp: datetime | None = None) -> PositionSample:
        return self.positions.update(x, y, timestamp)

    def ensure_catalog(self) -> PartCatalog:
        self.catalog.load_from_directory(self.records)
        return self.catalog

    def handle_order(self, order_id: int, description: str = "", *, persist: bool = False) -> OrderOutcome:
        """Run one resolve -> sequence -> present -> persist -> publish cycle.

        Any :class:`OrderOptimizerError` is written to the diagnostic log and
        re-raised; nothing is published for a failed order. Once an order has
        been sequenced, neither a failed persist nor a failed delivery fails it.
        """
        with self._order_lock:
            logger.info(f"Received order {order_id} ({description})")
            try:
                outcome = self._process(order_id, description)
            except OrderOptimizerError as exc:
                self.diagnostics.error(str(exc))
                raise

            self.diagnostics.info(header_line(order_id, description))
            for line in outcome.presentation.lines:
                self.diagnostics.info(line)

            if persist:
                try:
                    outcome.run_directory = self._persist(outcome)
                except OSError as exc:
                    logger.warning(f"Failed to persist outputs for order {order_id}: {exc}")

            payload = markers_to_json(outcome.presentation.markers)
            for publisher in self.publishers:
                publisher.publish(order_id, payload)
            return outcome

    def _process(self, order_id: int, description: str) -> OrderOutcome:
        self.records.ensure_available()
        position = self.positions.require()
        if not self.records.has_orders():
            raise ConfigSourceUnavailable("orders/configuration folder not found!")
        catalog = self.ensure_catalog()

        order = self.order_index.resolve_from_directory(order_id, self.records)
        sequence = sequence_pickups(order, catalog, position)
        presentation = present(order, sequence, position)
        return OrderOutcome(
            order=order,
            description=description,
            position=position,
            sequence=sequence,
            presentation=presentation,
        )

    def _persist(self, outcome: OrderOutcome) -> Path:
        run_dir = self.storage.make_run_directory(prefix=f"order_{outcome.order.order_id}")
        self.storage.write_json(
            run_dir / "summary.json",
            order_result_to_json(
                outcome.order,
                outcome.sequence,
                outcome.presentation.lines,
                outcome.presentation.markers,
                description=outcome.description,
            ),
        )
        self.storage.write_csv(run_dir / "pickups.csv", order_result_to_csv(outcome.sequence))
        logger.info(f"Persisted order {outcome.order.order_id} outputs to {run_dir}")
        return run_dir


_optimizer: Optional[OrderOptimizer] = None
_optimizer_lock = threading.Lock()


def get_optimizer() -> OrderOptimizer:
    """Process-wide optimizer used by the API routes."""
    global _optimizer
    with _optimizer_lock:
        if _optimizer is None:
            _optimizer = OrderOptimizer()
        return _optimizer


def reset_optimizer(optimizer: OrderOptimizer | None = None) -> None:
    global _optimizer
    with _optimizer_lock:
        _optimizer = optimizer
