import json
from datetime import date

import pandas as pd

import main as main_mod
from uniform_stock import data_handler, settings, utils
from uniform_stock.client import ApiError
from uniform_stock.pipelines.inventory import InventoryStatusPipeline
from uniform_stock.pipelines.recommendations import RecommendationPipeline
from uniform_stock.schemas import RecommendedStockItem, StockStatus


class TestInventoryStatusPipeline:
    """Category status report from API or export file"""

    def test_run_from_api(self, inventory_rows, output_dirs, fake_client_cls):
        _, output_dir = output_dirs
        client = fake_client_cls(inventory=inventory_rows)
        rows = InventoryStatusPipeline(client=client, test_mode=True).run()

        assert [r.category for r in rows] == ["Uniform No 3", "Uniform No 4", "T-Shirt"]
        assert rows[1].status == StockStatus.OUT_OF_STOCK
        assert rows[0].units == 71

        csv_files = list(output_dir.glob("inventory_status_*.csv"))
        assert len(csv_files) == 1
        df = pd.read_csv(csv_files[0])
        assert list(df.columns) == ["Category", "Items", "Units", "Low Stock", "Status", "Date"]
        assert df.loc[0, "Status"] == "Low Stock"
        assert list(output_dir.glob("inventory_status_*.json"))

    def test_metadata_holds_global_tally(self, inventory_rows, output_dirs, fake_client_cls):
        pipeline = InventoryStatusPipeline(client=fake_client_cls(inventory=inventory_rows), test_mode=True)
        pipeline.run()
        assert pipeline.metadata["inStock"] == 4
        assert pipeline.metadata["lowStock"] == 2
        assert pipeline.metadata["outOfStock"] == 1
        assert pipeline.metadata["categories"] == 3

    def test_api_error_saves_nothing(self, output_dirs, fake_client_cls):
        _, output_dir = output_dirs
        client = fake_client_cls(error=ApiError("down", status_code=503))
        assert InventoryStatusPipeline(client=client, test_mode=True).run() is None
        assert not output_dir.exists() or not list(output_dir.iterdir())

    def test_offline_reads_newest_export(self, inventory_rows, output_dirs, fake_client_cls):
        input_dir, _ = output_dirs
        (input_dir / "inventory_2026-01-05.json").write_text(json.dumps([]))
        (input_dir / "inventory_2026-02-01.json").write_text(
            json.dumps({"success": True, "inventory": inventory_rows})
        )
        client = fake_client_cls()
        pipeline = InventoryStatusPipeline(offline=True, client=client, test_mode=True)
        rows = pipeline.run()

        assert client.calls == []
        assert len(rows) == 3
        assert all(r.report_date == date(2026, 2, 1) for r in rows)

    def test_offline_without_file(self, output_dirs, fake_client_cls):
        pipeline = InventoryStatusPipeline(offline=True, client=fake_client_cls(), test_mode=True)
        assert pipeline.run() is None

    def test_empty_inventory_is_not_a_failure(self, output_dirs, fake_client_cls):
        """A successful call with no records still loads and returns an empty list"""
        _, output_dir = output_dirs
        pipeline = InventoryStatusPipeline(client=fake_client_cls(inventory=[]), test_mode=True)
        assert pipeline.run() == []
        assert not output_dir.exists() or not list(output_dir.iterdir())

    def test_webhook_called_outside_test_mode(self, inventory_rows, output_dirs, fake_client_cls, monkeypatch):
        posted = {}

        def fake_post(validated_data, metadata, report_type):
            posted.update(rows=len(validated_data), metadata=metadata, report_type=report_type)
            return True

        monkeypatch.setattr(data_handler, "post_to_webhook", fake_post)
        InventoryStatusPipeline(client=fake_client_cls(inventory=inventory_rows)).run()
        assert posted["rows"] == 3
        assert posted["report_type"] == "inventory_status"


class TestRecommendationPipeline:
    """Grouped, size-ordered recommendations"""

    def _items(self):
        rows = [
            {"category": "No 4", "type": "Boot", "size": "10", "recommendedStock": 5},
            {"category": "No 3", "type": "Baju No 3", "size": "L", "recommendedStock": 20},
            {"category": "No 4", "type": "Boot", "size": "7", "recommendedStock": 8},
            {"category": "No 3", "type": "Baju No 3", "size": "XS", "recommendedStock": 6},
            {"category": "No 4", "type": "Boot", "size": "9", "recommendedStock": 2},
        ]
        return [RecommendedStockItem(**row) for row in rows]

    def test_groups_ordered_by_size(self, output_dirs, fake_client_cls):
        client = fake_client_cls(recommendations=self._items())
        rows = RecommendationPipeline(client=client, test_mode=True).run()

        assert client.calls == [("get_all_recommendations", None, None, True)]
        boots = [(r.position, r.size) for r in rows if r.group == "No 4 - Boot"]
        assert boots == [(1, "7"), (2, "9"), (3, "10")]
        baju = [r.size for r in rows if r.group == "No 3 - Baju No 3"]
        assert baju == ["XS", "L"]
        assert rows[0].group == "No 4 - Boot"

    def test_api_error(self, output_dirs, fake_client_cls):
        client = fake_client_cls(error=ApiError("boom"))
        assert RecommendationPipeline(client=client, test_mode=True).run() is None


class TestMain:
    """CLI wiring"""

    def test_offline_inventory_only(self, monkeypatch):
        ran = []

        class FakePipeline:
            def __init__(self, **kwargs):
                ran.append((type(self).__name__, kwargs))

            def run(self):
                return []

        class FakeInventory(FakePipeline):
            pass

        class FakeRecommendations(FakePipeline):
            pass

        monkeypatch.setattr(main_mod, "setup_logger", lambda **kwargs: None)
        monkeypatch.setattr(main_mod, "InventoryStatusPipeline", FakeInventory)
        monkeypatch.setattr(main_mod, "RecommendationPipeline", FakeRecommendations)

        assert main_mod.main(["all", "--offline", "--test"]) == 0
        assert ran == [("FakeInventory", {"offline": True, "test_mode": True})]

    def test_failure_exit_code(self, monkeypatch):
        class Failing:
            def __init__(self, **kwargs):
                pass

            def run(self):
                return None

        monkeypatch.setattr(main_mod, "setup_logger", lambda **kwargs: None)
        monkeypatch.setattr(main_mod, "RecommendationPipeline", Failing)
        assert main_mod.main(["recommendations"]) == 1

    def test_api_failure_exit_code(self, output_dirs, fake_client_cls, monkeypatch):
        """A backend error ends the CLI with a non-zero status"""
        client = fake_client_cls(error=ApiError("down", status_code=503))
        monkeypatch.setattr(main_mod, "setup_logger", lambda **kwargs: None)
        monkeypatch.setattr(
            main_mod, "InventoryStatusPipeline", lambda **kwargs: InventoryStatusPipeline(client=client, **kwargs)
        )
        assert main_mod.main(["inventory", "--test"]) == 1

    def test_log_level_comes_from_settings(self, monkeypatch):
        """The CLI leaves the level to LOG_LEVEL instead of forcing INFO"""
        calls = []

        class Passing:
            def __init__(self, **kwargs):
                pass

            def run(self):
                return []

        monkeypatch.setattr(settings, "LOG_LEVEL", "DEBUG")
        monkeypatch.setattr(main_mod, "setup_logger", lambda *args, **kwargs: calls.append((args, kwargs)))
        monkeypatch.setattr(main_mod, "InventoryStatusPipeline", Passing)
        assert main_mod.main(["inventory", "--test"]) == 0
        assert calls == [((), {})]


class TestUtils:
    """File discovery and loading helpers"""

    def test_find_latest_report(self, tmp_path):
        (tmp_path / "inventory_2025-12-31.json").write_text("[]")
        (tmp_path / "inventory_2026-03-01.json").write_text("[]")
        (tmp_path / "inventory_latest.json").write_text("[]")
        (tmp_path / "other_2027-01-01.json").write_text("[]")
        path, found = utils.find_latest_report(tmp_path, "inventory_")
        assert path.name == "inventory_2026-03-01.json"
        assert found == date(2026, 3, 1)

    def test_find_latest_report_missing_dir(self, tmp_path):
        assert utils.find_latest_report(tmp_path / "nope", "inventory_") is None

    def test_load_json_fallbacks(self, tmp_path):
        good = tmp_path / "good.json"
        good.write_bytes(b'\xef\xbb\xbf[{"type": "Boot"}]')
        assert utils.load_json(good) == [{"type": "Boot"}]

        latin = tmp_path / "latin.json"
        latin.write_bytes('[{"type": "Café"}]'.encode("latin-1"))
        assert utils.load_json(latin) == [{"type": "Café"}]

        broken = tmp_path / "broken.json"
        broken.write_text("{not json")
        assert utils.load_json(broken) is None
        assert utils.load_json(tmp_path / "missing.json") is None
