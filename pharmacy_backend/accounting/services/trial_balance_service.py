# accounting/services/trial_balance_service.py

from __future__ import annotations

import logging
from datetime import date

from accounting.services.balance_aggregator import EMPTY, AccountTotals, BalanceAggregator
from accounting.services.chart_of_accounts import ChartOfAccounts
from accounting.services.exceptions import InvalidParameter, InvariantViolation
from accounting.services.money import ZERO, q2

logger = logging.getLogger(__name__)

COLUMNS = (
    "opening_debit",
    "opening_credit",
    "period_debit",
    "period_credit",
    "closing_debit",
    "closing_credit",
)


class TrialBalanceService:
    """
    Trial Balance computation service.

    Guarantees:
    - One row per ACTIVE DETAIL account with any opening or period activity
    - opening  = postings strictly before start_date
    - period   = postings in [start_date, end_date]
    - closing  = opening + period, column by column (never netted)
    - Lines on codes unknown to the chart raise AccountNotFound
    - An unbalanced result is still returned, flagged in invariant_violations
    """

    def __init__(self, aggregator: BalanceAggregator | None = None, chart: ChartOfAccounts | None = None):
        self.aggregator = aggregator or BalanceAggregator()
        self.chart = chart or ChartOfAccounts()

    def generate(self, *, pharmacy_id, start_date: date, end_date: date) -> dict:
        if start_date > end_date:
            raise InvalidParameter("start_date", "start_date must not be after end_date")

        opening = self.aggregator.opening_balances(pharmacy_id, before=start_date)
        period = self.aggregator.period_movements(
            pharmacy_id, start=start_date, end=end_date
        )

        self.chart.require_codes(pharmacy_id, set(opening) | set(period))
        accounts = self.chart.get_detail_accounts(pharmacy_id)

        rows = []
        totals = {column: ZERO for column in COLUMNS}

        for acc in accounts:
            o: AccountTotals = opening.get(acc.code, EMPTY)
            p: AccountTotals = period.get(acc.code, EMPTY)

            if o.is_zero and p.is_zero:
                continue

            c = o + p
            row = {
                "account_code": acc.code,
                "account_name": acc.name,
                "account_class": acc.account_class,
                "normal_balance": acc.normal_balance,
                "opening_debit": o.debit,
                "opening_credit": o.credit,
                "period_debit": p.debit,
                "period_credit": p.credit,
                "closing_debit": c.debit,
                "closing_credit": c.credit,
            }
            rows.append(row)

            for column in COLUMNS:
                totals[column] += row[column]

        totals = {column: q2(value) for column, value in totals.items()}
        balanced = totals["closing_debit"] == totals["closing_credit"]

        violations = []
        if not balanced:
            violation = InvariantViolation(
                "Trial balance is not balanced",
                total_debit=str(totals["closing_debit"]),
                total_credit=str(totals["closing_credit"]),
                difference=str(q2(totals["closing_debit"] - totals["closing_credit"])),
            )
            logger.warning(
                "Unbalanced trial balance",
                extra={"pharmacy_id": str(pharmacy_id), **violation.details},
            )
            violations.append(violation.as_dict())

        return {
            "report_type": "trial_balance",
            "pharmacy_id": str(pharmacy_id),
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "rows": rows,
            "totals": {**totals, "balanced": balanced},
            "invariant_violations": violations,
        }
