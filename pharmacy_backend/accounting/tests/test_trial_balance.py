# accounting/tests/test_trial_balance.py

from datetime import date
from decimal import Decimal

from django.test import TestCase

from accounting.services.balance_aggregator import BalanceAggregator
from accounting.services.exceptions import AccountNotFound, InvalidParameter
from accounting.services.journal_store import InMemoryJournalStore
from accounting.services.trial_balance_service import TrialBalanceService
from accounting.tests.helpers import make_account, make_pharmacy, post_entry, posted_line


class TrialBalanceTests(TestCase):
    """
    GUARANTEES:
    - closing = opening + period per column
    - Σclosing_debit == Σclosing_credit on valid data
    - range splitting does not change closing figures
    - all-zero accounts are omitted
    """

    def setUp(self):
        self.pharmacy = make_pharmacy()
        for code in ("411", "512", "600", "401", "7001"):
            make_account(self.pharmacy, code)
        make_account(self.pharmacy, "7002")  # never used
        self.service = TrialBalanceService()

    def _row(self, report, code):
        return next(row for row in report["rows"] if row["account_code"] == code)

    def test_single_sale_end_to_end(self):
        post_entry(self.pharmacy, date(2025, 1, 15), [("411", "10000", "0"), ("7001", "0", "10000")])

        report = self.service.generate(
            pharmacy_id=self.pharmacy.pk,
            start_date=date(2025, 1, 1),
            end_date=date(2025, 1, 31),
        )

        receivable = self._row(report, "411")
        self.assertEqual(receivable["period_debit"], Decimal("10000"))
        self.assertEqual(receivable["closing_debit"], Decimal("10000"))
        self.assertEqual(receivable["opening_debit"], Decimal("0"))

        sales = self._row(report, "7001")
        self.assertEqual(sales["period_credit"], Decimal("10000"))
        self.assertEqual(sales["closing_credit"], Decimal("10000"))

        self.assertEqual(report["totals"]["closing_debit"], Decimal("10000"))
        self.assertEqual(report["totals"]["closing_credit"], Decimal("10000"))
        self.assertTrue(report["totals"]["balanced"])
        self.assertEqual(report["invariant_violations"], [])
        self.assertEqual(report["report_type"], "trial_balance")

    def test_zero_accounts_are_omitted(self):
        post_entry(self.pharmacy, date(2025, 1, 15), [("411", "10", "0"), ("7001", "0", "10")])
        report = self.service.generate(
            pharmacy_id=self.pharmacy.pk, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)
        )
        self.assertEqual([row["account_code"] for row in report["rows"]], ["411", "7001"])

    def test_empty_ledger(self):
        report = self.service.generate(
            pharmacy_id=self.pharmacy.pk, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)
        )
        self.assertEqual(report["rows"], [])
        self.assertTrue(report["totals"]["balanced"])

    def test_opening_and_range_splitting(self):
        post_entry(self.pharmacy, date(2024, 12, 20), [("600", "400", "0"), ("401", "0", "400")])
        post_entry(self.pharmacy, date(2025, 1, 10), [("512", "250", "0"), ("7001", "0", "250")])
        post_entry(self.pharmacy, date(2025, 2, 5), [("401", "400", "0"), ("512", "0", "400")])
        post_entry(self.pharmacy, date(2025, 3, 1), [("512", "75", "0"), ("7001", "0", "75")])

        full = self.service.generate(
            pharmacy_id=self.pharmacy.pk, start_date=date(2025, 1, 1), end_date=date(2025, 3, 31)
        )
        second_half = self.service.generate(
            pharmacy_id=self.pharmacy.pk, start_date=date(2025, 2, 1), end_date=date(2025, 3, 31)
        )

        for row in full["rows"]:
            self.assertEqual(row["closing_debit"], row["opening_debit"] + row["period_debit"])
            self.assertEqual(row["closing_credit"], row["opening_credit"] + row["period_credit"])

            split = self._row(second_half, row["account_code"])
            self.assertEqual(row["closing_debit"], split["closing_debit"])
            self.assertEqual(row["closing_credit"], split["closing_credit"])

        supplier = self._row(full, "401")
        self.assertEqual(supplier["opening_credit"], Decimal("400"))
        self.assertEqual(supplier["period_debit"], Decimal("400"))

        self.assertEqual(full["totals"]["closing_debit"], full["totals"]["closing_credit"])

    def test_start_after_end_rejected(self):
        with self.assertRaises(InvalidParameter):
            self.service.generate(
                pharmacy_id=self.pharmacy.pk, start_date=date(2025, 2, 1), end_date=date(2025, 1, 1)
            )

    def test_unbalanced_data_is_flagged_not_raised(self):
        store = InMemoryJournalStore(
            {self.pharmacy.pk: [posted_line("411", debit="100"), posted_line("7001", credit="90", line_number=2)]}
        )
        service = TrialBalanceService(aggregator=BalanceAggregator(store))

        with self.assertLogs("accounting.services.trial_balance_service", level="WARNING"):
            report = service.generate(
                pharmacy_id=self.pharmacy.pk, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)
            )

        self.assertFalse(report["totals"]["balanced"])
        self.assertEqual(len(report["invariant_violations"]), 1)
        violation = report["invariant_violations"][0]
        self.assertEqual(violation["code"], "invariant_violation")
        self.assertEqual(violation["difference"], "10.00")

    def test_unknown_account_code_raises(self):
        store = InMemoryJournalStore(
            {self.pharmacy.pk: [posted_line("999", debit="5"), posted_line("7001", credit="5", line_number=2)]}
        )
        service = TrialBalanceService(aggregator=BalanceAggregator(store))

        with self.assertRaises(AccountNotFound) as ctx:
            service.generate(
                pharmacy_id=self.pharmacy.pk, start_date=date(2025, 1, 1), end_date=date(2025, 1, 31)
            )
        self.assertEqual(ctx.exception.account_code, "999")
        self.assertEqual(ctx.exception.status_code, 404)
