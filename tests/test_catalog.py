from pathlib import Path

import pytest
import yaml

from src.order_optimizer.data.catalog_repository import PartCatalog
from src.order_optimizer.models.errors import (
    ConfigurationMissing,
    ProductKeyParseError,
    ProductNotConfigured,
    RecordFormatError,
)
from src.order_optimizer.persistence.filesystem import RecordDirectory


def _product(pid: int, name: str, *parts: tuple[str, float, float]) -> dict:
    return {"id": pid, "product": name, "parts": [{"part": p, "cx": x, "cy": y} for p, x, y in parts]}


CONFIG = [
    _product(1, "Widget", ("partA", 0.0, 0.0), ("partB", 3.0, 4.0)),
    _product(2, "Gadget", ("partC", 10.0, 10.0)),
    _product(3, "Empty"),
]


def test_load_builds_products_with_parent_names():
    catalog = PartCatalog()

    assert catalog.load(CONFIG) is True

    widget = catalog.lookup("1")
    assert widget.product_id == 1
    assert widget.product_name == "Widget"
    assert [part.name for part in widget.parts] == ["partA", "partB"]
    assert all(part.parent_product_name == "Widget" for part in widget.parts)
    assert widget.parts[1].x == 3.0 and widget.parts[1].y == 4.0
    assert catalog.lookup("3").parts == []


def test_load_is_idempotent():
    once = PartCatalog()
    once.load(CONFIG)

    twice = PartCatalog()
    twice.load(CONFIG)
    assert twice.load(CONFIG) is False
    assert twice.load([_product(9, "Other")]) is False

    assert twice.products() == once.products()
    with pytest.raises(ProductNotConfigured):
        twice.lookup("9")


def test_failed_load_leaves_catalog_unloaded():
    catalog = PartCatalog()

    with pytest.raises(RecordFormatError):
        catalog.load([{"product": "no id"}])

    assert not catalog.loaded
    assert catalog.load(CONFIG) is True


def test_duplicate_product_id_keeps_first_entry():
    catalog = PartCatalog()
    catalog.load([_product(1, "First"), _product(1, "Second")])

    assert catalog.lookup("1").product_name == "First"
    assert len(catalog) == 1


def test_lookup_missing_product_raises():
    catalog = PartCatalog()
    catalog.load(CONFIG)

    with pytest.raises(ProductNotConfigured) as excinfo:
        catalog.lookup("42")
    assert excinfo.value.product_key == "42"


def test_lookup_non_integer_key_raises_parse_error():
    catalog = PartCatalog()
    catalog.load(CONFIG)

    with pytest.raises(ProductKeyParseError):
        catalog.lookup("widget")


def test_lookup_before_load_raises_configuration_missing():
    with pytest.raises(ConfigurationMissing):
        PartCatalog().lookup("1")


def test_invalid_part_coordinates_raise_format_error():
    catalog = PartCatalog()

    with pytest.raises(RecordFormatError):
        catalog.load([{"id": 1, "product": "Widget", "parts": [{"part": "partA", "cx": "left", "cy": 0}]}])


def test_load_from_directory(tmp_path: Path):
    config_dir = tmp_path / "configuration"
    config_dir.mkdir()
    (config_dir / "products.yaml").write_text(yaml.safe_dump(CONFIG), encoding="utf-8")
    (tmp_path / "orders").mkdir()

    catalog = PartCatalog()
    records = RecordDirectory(tmp_path)

    assert catalog.load_from_directory(records) is True
    assert catalog.load_from_directory(records) is False
    assert catalog.lookup("2").parts[0].name == "partC"


def test_load_from_directory_without_configuration(tmp_path: Path):
    (tmp_path / "orders").mkdir()

    catalog = PartCatalog()
    with pytest.raises(ConfigurationMissing):
        catalog.load_from_directory(RecordDirectory(tmp_path))
    assert not catalog.loaded


@pytest.mark.parametrize("raw_id", [1.7, True, "1.7", None])
def test_load_rejects_non_integer_product_ids(raw_id):
    catalog = PartCatalog()
    entry = {"id": raw_id, "product": "Widget", "parts": [{"part": "partA", "cx": 0.0, "cy": 0.0}]}

    with pytest.raises(RecordFormatError):
        catalog.load([entry])
    assert not catalog.loaded


def test_load_accepts_integer_string_product_ids():
    catalog = PartCatalog()
    catalog.load([{"id": "4", "product": "Bracket", "parts": []}])

    assert catalog.lookup("4").product_name == "Bracket"
