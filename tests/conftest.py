import sys, pathlib

import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]          #Project repo root
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from uniform_stock import settings


@pytest.fixture
def inventory_rows():
    """A small mixed inventory as the /api/inventory endpoint returns it."""
    return [
        {"category": "Uniform No 3", "type": "Cloth No 3", "size": "M", "quantity": 25},
        {"category": "Uniform No 3", "type": "Cloth No 3", "size": "L", "quantity": 4},
        {"category": "Uniform No 3", "type": "Apulet", "size": "N/A", "quantity": 30},
        {"category": "Uniform No 3", "type": "Gold Badge", "size": None, "quantity": 12},
        {"category": "Uniform No 4", "type": "Boot", "size": "7", "quantity": 0},
        {"category": "Uniform No 4", "type": "Boot", "size": "8", "quantity": 3},
        {"category": "T-Shirt", "type": "Digital Shirt", "size": "S", "quantity": 50},
    ]


@pytest.fixture
def output_dirs(tmp_path, monkeypatch):
    """Redirect report input/output folders to tmp and disable the webhook."""
    input_dir = tmp_path / "input"
    output_dir = tmp_path / "output"
    input_dir.mkdir()
    monkeypatch.setattr(settings, "INPUT_DIR", input_dir)
    monkeypatch.setattr(settings, "OUTPUT_DIR", output_dir)
    monkeypatch.setattr(settings, "WEBHOOK_URL", None)
    monkeypatch.setattr(settings, "SAVE_JSON_OUTPUT", True)
    return input_dir, output_dir


class FakeClient:
    """Stands in for InventoryApiClient; returns canned data or raises."""

    def __init__(self, inventory=None, recommendations=None, error=None):
        self.inventory = inventory or []
        self.recommendations = recommendations or []
        self.error = error
        self.calls = []

    def get_inventory(self):
        self.calls.append(("get_inventory",))
        if self.error:
            raise self.error
        return list(self.inventory)

    def get_all_recommendations(self, category=None, item_type=None, size=None, latest=None):
        self.calls.append(("get_all_recommendations", category, item_type, latest))
        if self.error:
            raise self.error
        return list(self.recommendations)


@pytest.fixture
def fake_client_cls():
    return FakeClient
