# accounting/services/general_ledger_service.py

"""
GENERAL LEDGER SERVICE (GRAND LIVRE)

One account, one period, row by row.

Guarantees:
- Exact code match (a prefix such as "411" never pulls in "4111")
- opening_balance = signed balance of postings before start_date
- rows ordered by (entry_date, entry_number, line_number)
- running balance moves by signed_total() of each line
- closing_balance = opening_balance when the period has no rows
"""

from __future__ import annotations

from datetime import date

from accounting.services.balance_aggregator import (
    EMPTY,
    AccountTotals,
    BalanceAggregator,
    signed_total,
)
from accounting.services.chart_of_accounts import ChartOfAccounts
from accounting.services.exceptions import InvalidParameter, MissingParameter
from accounting.services.money import ZERO, q2


class GeneralLedgerService:
    def __init__(self, aggregator: BalanceAggregator | None = None, chart: ChartOfAccounts | None = None):
        self.aggregator = aggregator or BalanceAggregator()
        self.chart = chart or ChartOfAccounts()

    def generate(self, *, pharmacy_id, account_code: str, start_date: date, end_date: date) -> dict:
        account_code = (account_code or "").strip()
        if not account_code:
            raise MissingParameter("account_code")
        if start_date > end_date:
            raise InvalidParameter("start_date", "start_date must not be after end_date")

        account = self.chart.get_account(pharmacy_id, account_code)

        opening_totals = self.aggregator.opening_balances(
            pharmacy_id, before=start_date, account_prefix=account.code
        ).get(account.code, EMPTY)
        opening_balance = signed_total(opening_totals, account.normal_balance)

        lines = [
            line
            for line in self.aggregator.posted_lines(
                pharmacy_id,
                account_prefix=account.code,
                date_from=start_date,
                date_to=end_date,
            )
            if line.account_code == account.code
        ]
        lines.sort(key=lambda line: line.sort_key)

        balance = opening_balance
        total_debit = ZERO
        total_credit = ZERO
        entries = []

        for line in lines:
            balance = q2(
                balance
                + signed_total(
                    AccountTotals(line.debit_amount, line.credit_amount),
                    account.normal_balance,
                )
            )
            total_debit += line.debit_amount
            total_credit += line.credit_amount
            entries.append(
                {
                    "entry_date": line.entry_date.isoformat(),
                    "entry_number": line.entry_number,
                    "line_number": line.line_number,
                    "description": line.description,
                    "debit": line.debit_amount,
                    "credit": line.credit_amount,
                    "balance": balance,
                }
            )

        return {
            "report_type": "general_ledger",
            "pharmacy_id": str(pharmacy_id),
            "account_code": account.code,
            "account_name": account.name,
            "normal_balance": account.normal_balance,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "opening_balance": opening_balance,
            "entries": entries,
            "total_debit": q2(total_debit),
            "total_credit": q2(total_credit),
            "closing_balance": balance,
        }
