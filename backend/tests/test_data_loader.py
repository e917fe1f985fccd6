"""Tests for loading seed products from JSON."""

import json
from pathlib import Path

import pytest

from sweetbite.models.product import Category
from sweetbite.services.data_loader import DataLoader

SEED_FILE = Path(__file__).parent.parent / "data" / "products.json"


class TestDataLoader:
    def test_bundled_seed_file_is_valid(self):
        raw = DataLoader.load_json_file(SEED_FILE)
        products = DataLoader.load_products_from_file(SEED_FILE)

        assert len(products) == len(raw)
        assert {p.category for p in products} == set(Category)

    def test_flat_array_and_aliases(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text(
            json.dumps(
                [
                    {"id": "ignored", "name": "Roti Tawar", "price": 15000, "category": "roti", "stock": 3},
                    {"name": "Nastar", "price": 80000, "category": "KUKIS", "stock": 4},
                ]
            ),
            encoding="utf-8",
        )

        products = DataLoader.load_products_from_file(path)

        assert [p.category for p in products] == [Category.BREAD, Category.COOKIES]

    def test_invalid_records_are_skipped(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text(
            json.dumps(
                {
                    "products": [
                        {"name": "Ok", "price": 1000, "category": "Cake", "stock": 1},
                        {"name": "Bad", "price": -5, "category": "Cake", "stock": 1},
                        {"name": "Unknown", "price": 5, "category": "Pizza", "stock": 1},
                    ]
                }
            ),
            encoding="utf-8",
        )

        assert [p.name for p in DataLoader.load_products_from_file(path)] == ["Ok"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            DataLoader.load_json_file(tmp_path / "nope.json")

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "items.json"
        path.write_text('{"name": "lonely"}', encoding="utf-8")

        with pytest.raises(ValueError):
            DataLoader.load_json_file(path)
