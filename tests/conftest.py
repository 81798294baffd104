import pytest

from database.db_manager import DatabaseManager
from main import build_services
from models.transaction import TransactionTemplate


@pytest.fixture
def db(tmp_path):
    manager = DatabaseManager(str(tmp_path / "ledger.db"))
    manager.initialize()
    yield manager
    manager.close()


@pytest.fixture
def svc(db):
    return build_services(db)


@pytest.fixture
def checking(svc):
    return svc.accounts.create("Checking", "checking", 0.0)


@pytest.fixture
def make_template():
    def _make(
        description="Groceries run",
        amount=10.0,
        type_="expense",
        category="Groceries",
        account_id=None,
        subcategory=None,
    ):
        return TransactionTemplate(
            description=description,
            amount=amount,
            type=type_,
            category=category,
            subcategory=subcategory,
            account_id=account_id,
        )
    return _make


@pytest.fixture
def balance_of(svc):
    def _balance(account_id):
        return svc.accounts.get_by_id(account_id).balance
    return _balance
