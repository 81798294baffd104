from dataclasses import replace

import pytest

from database.account_dao import AccountDAO
from models.transaction import Transaction
from services.balance_reconciler import BalanceReconciler, signed_effect
from utils.errors import NotFoundError, ValidationError


def _tx(type_="expense", amount=10.0, account_id=None, id_=1):
    return Transaction(
        id=id_, description="x", amount=amount, type=type_,
        category="c", date="2024-01-01", account_id=account_id,
    )


@pytest.mark.parametrize("type_, expected", [
    ("income", 25.0),
    ("expense", -25.0),
    ("savings", -25.0),
])
def test_signed_effect(type_, expected):
    assert signed_effect(_tx(type_, 25.0)) == expected


def test_create_applies_effect_per_type(svc, checking, make_template, balance_of):
    svc.transactions.create(make_template(type_="income", amount=100, account_id=checking.id), "2024-01-01")
    svc.transactions.create(make_template(type_="expense", amount=40, account_id=checking.id), "2024-01-02")
    svc.transactions.create(make_template(type_="savings", amount=10, account_id=checking.id), "2024-01-03")
    assert balance_of(checking.id) == pytest.approx(50.0)


def test_unlinked_transaction_leaves_balances_alone(svc, checking, make_template, balance_of):
    svc.transactions.create(make_template(amount=40), "2024-01-02")
    assert balance_of(checking.id) == 0.0


def test_amount_edit_changes_balance_by_delta(svc, checking, make_template, balance_of):
    tx = svc.transactions.create(make_template(amount=30, account_id=checking.id), "2024-01-01")
    svc.transactions.update(replace(tx, amount=45.5))
    assert balance_of(checking.id) == pytest.approx(-45.5)


def test_type_edit_flips_effect(svc, checking, make_template, balance_of):
    tx = svc.transactions.create(make_template(amount=20, account_id=checking.id), "2024-01-01")
    svc.transactions.update(replace(tx, type="income"))
    assert balance_of(checking.id) == pytest.approx(20.0)


def test_moving_transaction_between_accounts(svc, checking, make_template, balance_of):
    card = svc.accounts.create("Visa", "credit_card", 0.0)
    tx = svc.transactions.create(make_template(amount=60, account_id=checking.id), "2024-01-01")
    svc.transactions.update(replace(tx, account_id=card.id))
    assert balance_of(checking.id) == pytest.approx(0.0)
    assert balance_of(card.id) == pytest.approx(-60.0)

    svc.transactions.update(replace(tx, account_id=None))
    assert balance_of(card.id) == pytest.approx(0.0)


def test_date_only_edit_is_balance_noop(svc, checking, make_template, balance_of):
    tx = svc.transactions.create(make_template(amount=60, account_id=checking.id), "2024-01-01")
    svc.transactions.update(replace(tx, date="2024-05-05", description="Renamed"))
    assert balance_of(checking.id) == pytest.approx(-60.0)


def test_missing_account_is_skipped(svc, make_template):
    tx = svc.transactions.create(make_template(account_id=999), "2024-01-01")
    assert svc.transactions.get_by_id(tx.id) is not None
    assert svc.transactions.delete(tx.id) is True


def test_deleted_account_does_not_block_transaction_delete(svc, checking, make_template):
    tx = svc.transactions.create(make_template(account_id=checking.id), "2024-01-01")
    svc.accounts.delete(checking.id)
    assert svc.transactions.delete(tx.id) is True
    assert svc.transactions.get_by_id(tx.id) is None


def test_edit_with_vanished_old_record_applies_new_effect_only(db, checking):
    account_dao = AccountDAO(db)
    reconciler = BalanceReconciler(account_dao)
    reconciler.apply_edit(None, _tx("expense", 15.0, checking.id))
    assert account_dao.get_by_id(checking.id).balance == pytest.approx(-15.0)


def test_update_of_missing_transaction_raises_and_mutates_nothing(svc, checking, make_template, balance_of):
    tx = svc.transactions.create(make_template(amount=10, account_id=checking.id), "2024-01-01")
    svc.transactions.delete(tx.id)
    with pytest.raises(NotFoundError):
        svc.transactions.update(replace(tx, amount=99))
    assert balance_of(checking.id) == pytest.approx(0.0)


def test_double_delete_does_not_double_adjust(svc, checking, make_template, balance_of):
    svc.transactions.create(make_template(type_="income", amount=100, account_id=checking.id), "2024-01-01")
    tx = svc.transactions.create(make_template(amount=25, account_id=checking.id), "2024-01-02")

    assert svc.transactions.delete(tx.id) is True
    assert svc.transactions.delete(tx.id) is False
    assert balance_of(checking.id) == pytest.approx(100.0)


def test_delete_then_recreate_round_trip(svc, checking, make_template, balance_of):
    template = make_template(amount=33.3, account_id=checking.id)
    tx = svc.transactions.create(template, "2024-01-01")
    before = balance_of(checking.id)

    svc.transactions.delete(tx.id)
    svc.transactions.create(template, "2024-01-01")
    assert balance_of(checking.id) == pytest.approx(before)


def test_balance_matches_signed_sum_after_mixed_operations(svc, checking, make_template, balance_of):
    savings = svc.accounts.create("Savings", "savings", 0.0)
    created = [
        svc.transactions.create(make_template(type_="income", amount=1200, account_id=checking.id), "2024-01-01"),
        svc.transactions.create(make_template(amount=80, account_id=checking.id), "2024-01-03"),
        svc.transactions.create(make_template(type_="savings", amount=200, account_id=checking.id), "2024-01-05"),
        svc.transactions.create(make_template(type_="income", amount=200, account_id=savings.id), "2024-01-05"),
        svc.transactions.create(make_template(amount=15, account_id=savings.id), "2024-01-07"),
    ]
    svc.transactions.update(replace(created[1], amount=95))
    svc.transactions.update(replace(created[4], account_id=checking.id))
    svc.transactions.delete(created[2].id)
    svc.recurring.create_series(
        make_template(amount=12, account_id=savings.id), "weekly", "2024-02-01", end_date="2024-02-29",
    )

    for account in (checking, savings):
        expected = sum(
            signed_effect(t) for t in svc.transactions.get_all() if t.account_id == account.id
        )
        assert balance_of(account.id) == pytest.approx(expected)


@pytest.mark.parametrize("overrides", [
    {"description": "   "},
    {"amount": "abc"},
    {"amount": -5},
    {"amount": 0},
    {"amount": "inf"},
    {"amount": float("-inf")},
    {"amount": float("nan")},
    {"type_": "transfer"},
])
def test_invalid_template_is_rejected_before_any_write(svc, checking, make_template, balance_of, overrides):
    params = {"account_id": checking.id}
    params.update(overrides)
    with pytest.raises(ValidationError):
        svc.transactions.create(make_template(**params), "2024-01-01")
    assert svc.transactions.get_all() == []
    assert balance_of(checking.id) == 0.0


def test_invalid_date_and_frequency_rejected(svc, make_template):
    with pytest.raises(ValidationError):
        svc.transactions.create(make_template(), "01/02/2024")
    with pytest.raises(ValidationError):
        svc.transactions.create(make_template(), "2024-01-02", frequency="daily")
    assert svc.transactions.get_all() == []


def test_numeric_string_amount_is_accepted(svc, make_template):
    tx = svc.transactions.create(make_template(amount="12.50"), "2024-01-02")
    assert tx.amount == 12.5


def test_update_normalizes_subcategory_like_create(svc, make_template):
    tx = svc.transactions.create(make_template(subcategory="   "), "2024-01-02")
    assert tx.subcategory is None

    updated = svc.transactions.update(replace(tx, subcategory="   "))
    assert updated.subcategory is None
    assert svc.transactions.get_by_id(tx.id).subcategory is None
