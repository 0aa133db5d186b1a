"""Tests for loading product seed files."""

import json
from pathlib import Path

import pytest

from farmfresh.services.catalog_loader import CatalogLoader

SEED_DIR = Path(__file__).resolve().parent.parent / "data" / "products"

OKRA = {"name": "Okra", "description": "Tender okra", "price": 40, "quantity": 20}


def write_json(path: Path, payload) -> Path:
    path.write_text(json.dumps(payload), encoding="utf-8")
    return path


class TestLoadJsonFile:
    def test_wrapped_format(self, tmp_path):
        path = write_json(tmp_path / "seed.json", {"products": [OKRA, OKRA]})
        assert len(CatalogLoader.load_json_file(path)) == 2

    def test_flat_list(self, tmp_path):
        path = write_json(tmp_path / "seed.json", [OKRA])
        assert CatalogLoader.load_json_file(path) == [OKRA]

    def test_single_object(self, tmp_path):
        path = write_json(tmp_path / "seed.json", OKRA)
        assert CatalogLoader.load_json_file(path) == [OKRA]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            CatalogLoader.load_json_file(tmp_path / "missing.json")

    def test_not_json_extension(self, tmp_path):
        path = tmp_path / "seed.txt"
        path.write_text("[]")
        with pytest.raises(ValueError):
            CatalogLoader.load_json_file(path)


class TestLoadProducts:
    def test_invalid_records_skipped(self, tmp_path):
        bad_price = dict(OKRA, price=0)
        no_name = {k: v for k, v in OKRA.items() if k != "name"}
        path = write_json(tmp_path / "seed.json", [OKRA, bad_price, no_name])

        products = CatalogLoader.load_products(path)

        assert [p.name for p in products] == ["Okra"]

    def test_directory_skips_broken_files(self, tmp_path):
        write_json(tmp_path / "a.json", [OKRA])
        (tmp_path / "b.json").write_text("{not json")
        write_json(tmp_path / "c.json", {"products": [dict(OKRA, name="Peas")]})

        products = CatalogLoader.load_products(tmp_path)

        assert [p.name for p in products] == ["Okra", "Peas"]

    def test_bundled_seed_data_is_valid(self):
        products = CatalogLoader.load_products(SEED_DIR)

        assert len(products) == 7
        assert {p.category.value for p in products} >= {"vegetables", "fruits", "dairy"}
