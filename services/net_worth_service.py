from services.account_service import AccountService
from utils.date_helpers import current_month_str, friendly_month


class NetWorthService:
    def __init__(self, account_service: AccountService):
        self._acct_svc = account_service

    def get_breakdown(self) -> dict:
        """Return current net worth split into asset-like and liability-like accounts."""
        assets = []
        liabilities = []
        total_assets = 0.0
        total_liabilities = 0.0

        for account in self._acct_svc.get_all():
            entry = {
                "id": account.id,
                "name": account.name,
                "type": account.label,
                "balance": account.balance,
            }
            if account.is_liability:
                liabilities.append(entry)
                total_liabilities += account.balance
            else:
                assets.append(entry)
                total_assets += account.balance

        return {
            "assets": assets,
            "liabilities": liabilities,
            "total_assets": total_assets,
            "total_liabilities": total_liabilities,
            "net_worth": total_assets - total_liabilities,
            "as_of_month": friendly_month(current_month_str()),
        }

    def get_totals_by_type(self) -> dict[str, float]:
        """Sum of balances per account type label."""
        totals: dict[str, float] = {}
        for account in self._acct_svc.get_all():
            totals[account.label] = totals.get(account.label, 0.0) + account.balance
        return totals
