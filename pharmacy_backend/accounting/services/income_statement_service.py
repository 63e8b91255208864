# accounting/services/income_statement_service.py

"""
INCOME STATEMENT SERVICE (COMPTE DE RÉSULTATS)

Read-only aggregation over posted journal lines in [start_date, end_date].

Key rules:
- Accounts are grouped by their statement_bucket tag (resolved at setup)
- Revenue buckets are credit-signed, expense buckets debit-signed,
  both through signed_total()
- Result cascade:
    gross_margin          = total_revenue - purchases - stock_variation
    operating_result      = gross_margin - external_services - personnel
                            - taxes - depreciation - other_expenses
    net_result_before_tax = operating_result + financial_income - financial_charges
    net_result            = net_result_before_tax - income_tax
  financial_income sits in total_revenue and is added again before tax,
  so net_result == total_revenue - total_expenses - income_tax only when
  financial_income is zero
"""

from __future__ import annotations

from datetime import date

from accounting.models.account import Account
from accounting.services import statement_buckets as b
from accounting.services.balance_aggregator import BalanceAggregator, signed_total
from accounting.services.chart_of_accounts import ChartOfAccounts
from accounting.services.exceptions import InvalidParameter
from accounting.services.money import ZERO, q2

CREDIT_SIGNED = set(b.REVENUE_BUCKETS)
DEBIT_SIGNED = set(b.EXPENSE_BUCKETS) | {b.INCOME_TAX}


def bucket_totals(movements: dict, accounts: dict) -> dict:
    """Sum signed movements per income-statement bucket (unknown buckets ignored)."""
    totals = {bucket: ZERO for bucket in (*b.REVENUE_BUCKETS, *b.EXPENSE_BUCKETS, b.INCOME_TAX)}

    for code, account_totals in movements.items():
        bucket = accounts[code].statement_bucket
        if bucket in CREDIT_SIGNED:
            totals[bucket] += signed_total(account_totals, Account.NORMAL_CREDIT)
        elif bucket in DEBIT_SIGNED:
            totals[bucket] += signed_total(account_totals, Account.NORMAL_DEBIT)

    return {bucket: q2(value) for bucket, value in totals.items()}


def build_results(t: dict) -> dict:
    total_revenue = q2(sum((t[k] for k in b.REVENUE_BUCKETS), ZERO))
    total_expenses = q2(sum((t[k] for k in b.EXPENSE_BUCKETS), ZERO))

    gross_margin = q2(total_revenue - t[b.PURCHASES] - t[b.STOCK_VARIATION])
    operating_result = q2(
        gross_margin
        - t[b.EXTERNAL_SERVICES]
        - t[b.PERSONNEL]
        - t[b.TAXES]
        - t[b.DEPRECIATION]
        - t[b.OTHER_EXPENSES]
    )
    net_result_before_tax = q2(
        operating_result + t[b.FINANCIAL_INCOME] - t[b.FINANCIAL_CHARGES]
    )
    net_result = q2(net_result_before_tax - t[b.INCOME_TAX])

    return {
        "revenue": {
            **{k: t[k] for k in b.REVENUE_BUCKETS},
            "total": total_revenue,
        },
        "expenses": {
            **{k: t[k] for k in b.EXPENSE_BUCKETS},
            "total": total_expenses,
        },
        "results": {
            "gross_margin": gross_margin,
            "operating_result": operating_result,
            "net_result_before_tax": net_result_before_tax,
            "income_tax": t[b.INCOME_TAX],
            "net_result": net_result,
        },
    }


class IncomeStatementService:
    def __init__(self, aggregator: BalanceAggregator | None = None, chart: ChartOfAccounts | None = None):
        self.aggregator = aggregator or BalanceAggregator()
        self.chart = chart or ChartOfAccounts()

    def generate(self, *, pharmacy_id, start_date: date, end_date: date) -> dict:
        if start_date > end_date:
            raise InvalidParameter("start_date", "start_date must not be after end_date")

        movements = self.aggregator.period_movements(
            pharmacy_id, start=start_date, end=end_date
        )
        accounts = self.chart.require_codes(pharmacy_id, movements)

        return {
            "report_type": "income_statement",
            "pharmacy_id": str(pharmacy_id),
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            **build_results(bucket_totals(movements, accounts)),
        }
