from pathlib import Path

import pytest
import yaml

from src.order_optimizer.data.orders_repository import OrderIndex, scan_group
from src.order_optimizer.models.errors import DuplicateOrderError, OrderNotFound, RecordFormatError
from src.order_optimizer.persistence.filesystem import RecordDirectory, RecordGroup


def _order(order_id: int, cx: float, cy: float, *products: str) -> dict:
    return {"order": order_id, "cx": cx, "cy": cy, "products": list(products)}


MONDAY = RecordGroup(name="monday.yaml", entries=[_order(1, 1.0, 1.0, "1"), _order(7, 20.0, 30.0, "1", "2")])
TUESDAY = RecordGroup(name="tuesday.yaml", entries=[_order(8, 5.0, 5.0, "2"), _order(9, 6.0, 6.0)])


def test_resolve_extracts_destination_and_products():
    order = OrderIndex().resolve(7, [MONDAY, TUESDAY])

    assert order.order_id == 7
    assert order.destination == (20.0, 30.0)
    assert order.required_product_ids == ["1", "2"]
    assert order.source == "monday.yaml"
    assert order.duplicate_sources == []


def test_resolve_searches_every_group():
    order = OrderIndex(max_workers=1).resolve(9, [MONDAY, TUESDAY])

    assert order.source == "tuesday.yaml"
    assert order.required_product_ids == []


def test_resolve_missing_order_raises():
    with pytest.raises(OrderNotFound) as excinfo:
        OrderIndex().resolve(404, [MONDAY, TUESDAY])
    assert excinfo.value.order_id == 404


def test_resolve_without_sources_raises():
    with pytest.raises(OrderNotFound):
        OrderIndex().resolve(1, [])


def test_first_match_within_group_wins():
    group = RecordGroup(name="day.yaml", entries=[_order(3, 1.0, 1.0, "1"), _order(3, 2.0, 2.0, "2")])

    order = scan_group(3, group)

    assert order is not None
    assert order.destination == (1.0, 1.0)


def test_duplicate_across_groups_is_flagged(caplog):
    wednesday = RecordGroup(name="wednesday.yaml", entries=[_order(7, 99.0, 99.0, "3")])

    with caplog.at_level("WARNING"):
        order = OrderIndex(strict_duplicates=False).resolve(7, [MONDAY, wednesday])

    assert order.source == "monday.yaml"
    assert order.destination == (20.0, 30.0)
    assert order.duplicate_sources == ["wednesday.yaml"]
    assert "appears in 2 order files" in caplog.text


def test_duplicate_across_groups_rejected_in_strict_mode():
    wednesday = RecordGroup(name="wednesday.yaml", entries=[_order(7, 99.0, 99.0, "3")])

    with pytest.raises(DuplicateOrderError) as excinfo:
        OrderIndex(strict_duplicates=True).resolve(7, [MONDAY, wednesday])
    assert excinfo.value.sources == ["monday.yaml", "wednesday.yaml"]


def test_malformed_destination_raises_format_error():
    group = RecordGroup(name="bad.yaml", entries=[{"order": 5, "products": ["1"]}])

    with pytest.raises(RecordFormatError):
        OrderIndex().resolve(5, [group])


def test_resolve_from_directory_reads_day_files(tmp_path: Path):
    orders_dir = tmp_path / "orders"
    orders_dir.mkdir()
    (orders_dir / "20240101.yaml").write_text(yaml.safe_dump(MONDAY.entries), encoding="utf-8")
    (orders_dir / "20240102.yaml").write_text(yaml.safe_dump(TUESDAY.entries), encoding="utf-8")

    order = OrderIndex().resolve_from_directory(8, RecordDirectory(tmp_path))

    assert order.source == "20240102.yaml"
    assert order.required_product_ids == ["2"]


def test_product_ids_are_kept_as_strings():
    group = RecordGroup(name="day.yaml", entries=[{"order": 4, "cx": 0, "cy": 0, "products": [12, "13"]}])

    order = OrderIndex().resolve(4, [group])

    assert order.required_product_ids == ["12", "13"]


@pytest.mark.parametrize("raw_id", [7.9, True, "7.9", [7]])
def test_non_integer_order_ids_are_rejected(raw_id):
    group = RecordGroup(name="day.yaml", entries=[{"order": raw_id, "cx": 0, "cy": 0, "products": ["1"]}])

    with pytest.raises(RecordFormatError):
        OrderIndex().resolve(7, [group])


def test_integer_strings_and_whole_floats_match_order_ids():
    group = RecordGroup(
        name="day.yaml",
        entries=[
            {"order": " 7 ", "cx": 1.0, "cy": 1.0, "products": ["1"]},
            {"order": 8.0, "cx": 2.0, "cy": 2.0, "products": ["2"]},
        ],
    )

    assert OrderIndex().resolve(7, [group]).destination == (1.0, 1.0)
    assert OrderIndex().resolve(8, [group]).destination == (2.0, 2.0)
