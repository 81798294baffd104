import json
import zipfile

import pytest

from database.db_manager import DatabaseManager
from main import build_services
from utils.errors import ValidationError


@pytest.fixture
def populated(svc, checking, make_template):
    svc.recurring.create_series(
        make_template("Pay", 2000, "income", "Salary", account_id=checking.id),
        "monthly", "2024-01-01", max_count=3,
    )
    svc.transactions.create(make_template("Lunch", 12.5, subcategory="Cafe"), "2024-01-04")
    svc.categories.add_subcategory("Cafe", "Groceries")
    svc.goals.create("Trip", "travel", 3000, "2025-06-01", current_amount=250)
    return svc


@pytest.fixture
def other_svc(tmp_path):
    manager = DatabaseManager(str(tmp_path / "other.db"))
    manager.initialize()
    yield build_services(manager)
    manager.close()


def test_snapshot_contains_every_collection(populated):
    data = populated.data.export_snapshot()
    assert data["version"] == 1
    assert data["exported_at"]
    assert len(data["transactions"]) == 4
    assert data["accounts"][0]["balance"] == pytest.approx(6000)
    assert {"id", "series_id", "account_id", "frequency"} <= set(data["transactions"][0])
    assert [s["name"] for s in data["subcategories"]] == ["Cafe"]
    assert data["goals"][0]["current_amount"] == 250


def test_json_round_trip_replaces_target(populated, other_svc, make_template, tmp_path):
    other_svc.transactions.create(make_template("Stale"), "2023-01-01")
    path = tmp_path / "export.json"
    exported = populated.data.export_json(str(path))

    stats = other_svc.data.import_json(str(path))
    assert stats["transactions"] == 4
    assert stats["accounts"] == 1

    imported = other_svc.transactions.get_all()
    assert [t.id for t in imported] == [t["id"] for t in sorted(
        exported["transactions"], key=lambda t: (t["date"], t["id"]))]
    assert "Stale" not in {t.description for t in imported}
    assert len(other_svc.series.get_groups()) == 1


def test_import_trusts_balances(populated, other_svc):
    data = populated.data.export_snapshot()
    data["accounts"][0]["balance"] = 123.45
    other_svc.data.import_snapshot(data)
    assert other_svc.accounts.get_all()[0].balance == 123.45


def test_ids_continue_after_import(populated, other_svc, make_template):
    data = populated.data.export_snapshot()
    other_svc.data.import_snapshot(data)
    top = max(t["id"] for t in data["transactions"])
    assert other_svc.transactions.create(make_template(), "2024-05-05").id > top


@pytest.mark.parametrize("bundle", [
    [],
    {"transactions": []},
    {"version": "1"},
    {"version": 99},
])
def test_invalid_bundles_rejected(svc, bundle):
    with pytest.raises(ValidationError):
        svc.data.import_snapshot(bundle)


def test_failed_import_rolls_back(populated):
    data = populated.data.export_snapshot()
    data["transactions"].append({"id": 500, "amount": 5, "type": "expense", "date": "2024-01-01"})
    with pytest.raises(ValidationError):
        populated.data.import_snapshot(data)
    assert len(populated.transactions.get_all()) == 4
    assert populated.accounts.get_all()[0].balance == pytest.approx(6000)


def test_import_json_rejects_garbage(svc, tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")
    with pytest.raises(ValidationError):
        svc.data.import_json(str(path))


def test_csv_zip_export(populated, tmp_path):
    path = tmp_path / "export.zip"
    populated.data.export_csv_zip(str(path))
    with zipfile.ZipFile(path) as zf:
        assert sorted(zf.namelist()) == [
            "accounts.csv", "categories.csv", "goals.csv", "subcategories.csv", "transactions.csv",
        ]
        lines = zf.read("transactions.csv").decode("utf-8").splitlines()
    assert lines[0].startswith("id,description,amount")
    assert len(lines) == 5


def test_export_json_is_valid_json(populated, tmp_path):
    path = tmp_path / "export.json"
    populated.data.export_json(str(path))
    assert json.loads(path.read_text(encoding="utf-8"))["version"] == 1
