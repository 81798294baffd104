import pytest

from utils.errors import NotFoundError, ValidationError


def _find(svc, name, type_):
    return next(c for c in svc.categories.get_by_type(type_) if c.name == name)


def test_defaults_are_seeded(svc):
    assert "Salary" in svc.categories.get_names("income")
    assert "Groceries" in svc.categories.get_names("expense")
    assert "Retirement" in svc.categories.get_names("savings")


def test_create_is_unique_per_type(svc):
    svc.categories.create("Pets", "expense", "#123456")
    with pytest.raises(ValidationError):
        svc.categories.create("pets", "expense")
    assert svc.categories.create("Pets", "income").type == "income"


@pytest.mark.parametrize("name, type_", [("  ", "expense"), ("Gifts", "transfer")])
def test_create_validation(svc, name, type_):
    with pytest.raises(ValidationError):
        svc.categories.create(name, type_)


def test_rename_cascades(svc, make_template):
    cat = svc.categories.create("Food", "expense")
    svc.categories.add_subcategory("Takeout", "Food")
    tx = svc.transactions.create(make_template(category="Food"), "2024-01-01")

    renamed = svc.categories.rename(cat.id, "Dining")
    assert renamed.name == "Dining"
    assert [s.name for s in svc.categories.get_subcategories("Dining")] == ["Takeout"]
    assert svc.transactions.get_by_id(tx.id).category == "Dining"


def test_rename_conflict(svc):
    cat = svc.categories.create("Food", "expense")
    with pytest.raises(ValidationError):
        svc.categories.rename(cat.id, "groceries")
    with pytest.raises(NotFoundError):
        svc.categories.rename(999, "Anything")


def test_system_category_cannot_be_deleted(svc):
    other = _find(svc, "Other", "expense")
    with pytest.raises(ValidationError):
        svc.categories.delete(other.id)


def test_delete_keeps_transactions_by_default(svc, make_template):
    cat = svc.categories.create("Hobbies", "expense")
    tx = svc.transactions.create(make_template(category="Hobbies"), "2024-01-01")
    assert svc.categories.delete(cat.id) == 0
    assert svc.transactions.get_by_id(tx.id) is not None
    assert "Hobbies" not in svc.categories.get_names("expense")


def test_delete_with_transactions_reverses_balances(svc, checking, make_template, balance_of):
    cat = svc.categories.create("Hobbies", "expense")
    svc.categories.add_subcategory("Models", "Hobbies")
    svc.transactions.create(make_template(amount=30, category="Hobbies", account_id=checking.id), "2024-01-01")
    svc.transactions.create(make_template(amount=20, category="Hobbies", account_id=checking.id), "2024-01-02")
    svc.transactions.create(
        make_template(type_="income", amount=5, category="Hobbies", account_id=checking.id), "2024-01-03",
    )

    assert svc.categories.delete(cat.id, delete_transactions=True) == 2
    assert balance_of(checking.id) == pytest.approx(5)
    assert svc.categories.get_subcategories("Hobbies") == []


def test_subcategory_duplicates_rejected(svc):
    sub = svc.categories.add_subcategory("Fuel", "Transport")
    with pytest.raises(ValidationError):
        svc.categories.add_subcategory("FUEL", "Transport")
    svc.categories.delete_subcategory(sub.id)
    with pytest.raises(NotFoundError):
        svc.categories.delete_subcategory(sub.id)
