# accounting/services/balance_sheet_service.py

"""
BALANCE SHEET SERVICE (BILAN)

Point-in-time snapshot: every posting with entry_date <= as_of_date.

Rules:
- Buckets are summed debit-signed through signed_total()
- Asset buckets are reported as-is
- Liability buckets are negated so credit balances show positive
- Assets == liabilities is NOT enforced; `balanced` and `difference`
  are reported so callers can decide (income/expense classes are not
  closed into equity here)
"""

from __future__ import annotations

from datetime import date

from accounting.models.account import Account
from accounting.services import statement_buckets as b
from accounting.services.balance_aggregator import BalanceAggregator, signed_total
from accounting.services.chart_of_accounts import ChartOfAccounts
from accounting.services.money import ZERO, q2

_BALANCE_BUCKETS = (*b.ASSET_BUCKETS, *b.LIABILITY_BUCKETS)


class BalanceSheetService:
    def __init__(self, aggregator: BalanceAggregator | None = None, chart: ChartOfAccounts | None = None):
        self.aggregator = aggregator or BalanceAggregator()
        self.chart = chart or ChartOfAccounts()

    def generate(self, *, pharmacy_id, as_of_date: date) -> dict:
        balances = self.aggregator.closing_balances(pharmacy_id, as_of=as_of_date)
        accounts = self.chart.require_codes(pharmacy_id, balances)

        debit_signed = {bucket: ZERO for bucket in _BALANCE_BUCKETS}
        for code, totals in balances.items():
            bucket = accounts[code].statement_bucket
            if bucket in debit_signed:
                debit_signed[bucket] += signed_total(totals, Account.NORMAL_DEBIT)

        fixed_assets = q2(debit_signed[b.FIXED_ASSETS])
        inventory = q2(debit_signed[b.INVENTORY])
        receivables = q2(debit_signed[b.RECEIVABLES])
        cash_bank = q2(debit_signed[b.CASH_BANK])
        total_assets = q2(fixed_assets + inventory + receivables + cash_bank)

        equity = q2(-debit_signed[b.EQUITY])
        suppliers = q2(-debit_signed[b.SUPPLIERS])
        other_payables = q2(-debit_signed[b.OTHER_PAYABLES])
        total_payables = q2(suppliers + other_payables)
        total_liabilities = q2(equity + total_payables)

        difference = q2(total_assets - total_liabilities)

        return {
            "report_type": "balance_sheet",
            "pharmacy_id": str(pharmacy_id),
            "as_of_date": as_of_date.isoformat(),
            "assets": {
                "fixed_assets": fixed_assets,
                "inventory": inventory,
                "receivables": receivables,
                "cash_bank": cash_bank,
                "total": total_assets,
            },
            "liabilities": {
                "equity": equity,
                "suppliers": suppliers,
                "other_payables": other_payables,
                "total_payables": total_payables,
                "total": total_liabilities,
            },
            "balanced": difference == ZERO,
            "difference": difference,
        }
