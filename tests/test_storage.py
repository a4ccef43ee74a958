"""Tests for ledger persistence gateways."""

import json
from datetime import date
from decimal import Decimal

import pytest

from fintrack.config import get_settings
from fintrack.models.records import AppData, DebtStatus
from fintrack.services.storage import InMemoryGateway, JsonFileGateway


@pytest.fixture
def sample_data(make_transaction, make_debt):
    return AppData(
        transactions=[make_transaction(amount="42.50"), make_transaction(amount="7")],
        debts=[make_debt(due_date=date(2024, 6, 30))],
    )


class TestJsonFileGateway:
    """Tests for the local file store."""

    def test_round_trip(self, tmp_path, sample_data):
        """Test that save then load gives equal collections."""
        gateway = JsonFileGateway(tmp_path / "ledger.json")
        assert gateway.save(sample_data) is True

        loaded = JsonFileGateway(tmp_path / "ledger.json").load()
        assert loaded == sample_data
        assert [t.id for t in loaded.transactions] == [t.id for t in sample_data.transactions]

    def test_blob_uses_wire_names(self, tmp_path, sample_data):
        path = tmp_path / "ledger.json"
        JsonFileGateway(path).save(sample_data)

        payload = json.loads(path.read_text(encoding="utf-8"))
        assert set(payload) == {"transactions", "debts"}
        assert payload["debts"][0]["dueDate"] == "2024-06-30"
        assert payload["transactions"][0]["amount"] == 42.5

    def test_save_overwrites(self, tmp_path, sample_data):
        gateway = JsonFileGateway(tmp_path / "ledger.json")
        gateway.save(sample_data)
        gateway.save(AppData())
        assert gateway.load().is_empty

    def test_no_temp_files_left(self, tmp_path, sample_data):
        gateway = JsonFileGateway(tmp_path / "ledger.json")
        gateway.save(sample_data)
        assert [p.name for p in tmp_path.iterdir()] == ["ledger.json"]

    def test_creates_parent_directory(self, tmp_path, sample_data):
        gateway = JsonFileGateway(tmp_path / "nested" / "dir" / "ledger.json")
        assert gateway.save(sample_data) is True
        assert gateway.path.exists()

    def test_default_path_from_settings(self):
        gateway = JsonFileGateway()
        assert gateway.path == get_settings().storage.blob_path
        assert gateway.path.name == "fintrack_pro_data.json"

    def test_missing_file_loads_empty(self, tmp_path):
        assert JsonFileGateway(tmp_path / "nothing.json").load().is_empty

    def test_empty_file_loads_empty(self, tmp_path):
        path = tmp_path / "ledger.json"
        path.write_text("", encoding="utf-8")
        assert JsonFileGateway(path).load().is_empty

    @pytest.mark.parametrize(
        "content",
        [
            "{not json",
            '{"transactions": [{"id": "1", "amount": "lots"}], "debts": []}',
            "[]",
        ],
    )
    def test_corrupt_blob_loads_empty(self, tmp_path, content):
        """Test that an unreadable blob falls back to an empty ledger."""
        path = tmp_path / "ledger.json"
        path.write_text(content, encoding="utf-8")
        assert JsonFileGateway(path).load().is_empty

    def test_failed_write_returns_false(self, tmp_path, sample_data):
        """Test that a write failure is reported, not raised."""
        blocker = tmp_path / "blocker"
        blocker.write_text("a file, not a directory", encoding="utf-8")
        gateway = JsonFileGateway(blocker / "ledger.json")
        assert gateway.save(sample_data) is False

    def test_loads_legacy_blob(self, tmp_path):
        """Test a blob written by the browser version of the app."""
        path = tmp_path / "fintrack_pro_data.json"
        path.write_text(json.dumps({
            "expenses": [{
                "id": "e1",
                "date": "2024-02-10",
                "description": "Bus pass",
                "amount": 800,
                "category": "Transportation",
                "type": "EXPENSE",
            }],
            "debts": [{
                "id": "d1",
                "person": "Meera",
                "amount": 1200,
                "type": "I_OWE",
                "status": "PAID",
                "dueDate": "",
                "description": "Concert tickets",
            }],
        }), encoding="utf-8")

        data = JsonFileGateway(path).load()
        assert data.transactions[0].amount == Decimal("800")
        assert data.debts[0].status == DebtStatus.SETTLED
        assert data.debts[0].description == "Concert tickets"


class TestInMemoryGateway:
    """Tests for the in-memory store."""

    def test_starts_empty(self):
        assert InMemoryGateway().load().is_empty

    def test_round_trip(self, sample_data):
        gateway = InMemoryGateway()
        assert gateway.save(sample_data) is True
        assert gateway.load() == sample_data
        assert gateway.save_count == 1

    def test_fail_saves(self, sample_data):
        gateway = InMemoryGateway(fail_saves=True)
        assert gateway.save(sample_data) is False
        assert gateway.save_count == 0
        assert gateway.load().is_empty

    def test_corrupt_blob_loads_empty(self):
        assert InMemoryGateway(blob="{broken").load().is_empty
