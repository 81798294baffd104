from dataclasses import dataclass

ASSET_ACCOUNT_TYPES = (
    "checking", "savings", "tfsa", "fhsa", "rrsp", "labour_fund", "investment",
)
LIABILITY_ACCOUNT_TYPES = (
    "line_of_credit", "home_equity_line", "loan", "credit_card", "mortgage", "car_lease",
)
ACCOUNT_TYPES = ASSET_ACCOUNT_TYPES + LIABILITY_ACCOUNT_TYPES

# Account types offered as a transaction's linked account
TRANSACTIONAL_ACCOUNT_TYPES = ("checking", "savings", "credit_card", "line_of_credit")

ACCOUNT_TYPE_LABELS = {
    "checking": "Checking",
    "savings": "Savings",
    "tfsa": "TFSA",
    "fhsa": "FHSA",
    "rrsp": "RRSP",
    "labour_fund": "Labour-Sponsored Fund",
    "investment": "Investments",
    "line_of_credit": "Line of Credit",
    "home_equity_line": "Home Equity Line of Credit",
    "loan": "Loan",
    "credit_card": "Credit Card",
    "mortgage": "Mortgage",
    "car_lease": "Car Lease",
}


@dataclass
class Account:
    id: int
    name: str
    account_type: str = "checking"
    balance: float = 0.0
    created_at: str = ""

    @property
    def is_liability(self) -> bool:
        return self.account_type in LIABILITY_ACCOUNT_TYPES

    @property
    def label(self) -> str:
        return ACCOUNT_TYPE_LABELS.get(self.account_type, self.account_type)
