# accounting/tests/test_tax_summary.py

from decimal import Decimal

from django.test import SimpleTestCase, TestCase

from accounting.models.tax_entry import TaxEntry
from accounting.services.exceptions import InvalidParameter
from accounting.services.tax_summary_service import (
    build_g50_export,
    build_g50_summary,
    compute_g50_net,
    mark_g50_declared,
    render_g50_csv,
)
from accounting.tests.helpers import make_pharmacy


class G50NetTests(SimpleTestCase):
    """
    GUARANTEES:
    - equal totals -> nothing payable, no credit
    - payable and credit are never both non-zero
    - no jump at the boundary
    """

    def test_equal_totals(self):
        net = compute_g50_net(Decimal("500"), Decimal("500"))
        self.assertEqual(net, {"tva_a_decaisser": Decimal("0"), "credit_tva": Decimal("0")})

    def test_flip_is_continuous(self):
        collectee = Decimal("500.00")
        for deductible, payable, credit in [
            ("499.99", "0.01", "0"),
            ("500.00", "0", "0"),
            ("500.01", "0", "0.01"),
        ]:
            net = compute_g50_net(collectee, Decimal(deductible))
            self.assertEqual(net["tva_a_decaisser"], Decimal(payable))
            self.assertEqual(net["credit_tva"], Decimal(credit))


class G50SummaryTests(TestCase):
    def setUp(self):
        self.pharmacy = make_pharmacy(
            nif="000116001234567",
            nis="123456789012345",
            rc="16/00-1234567B20",
            article_imposition="16012345678",
            address="12 rue Didouche Mourad",
            city="Alger Centre",
            wilaya="Alger",
        )

    def _seed_period(self, year=2025, month=1):
        TaxEntry.objects.create(
            pharmacy=self.pharmacy,
            period_year=year,
            period_month=month,
            tva_type=TaxEntry.TYPE_COLLECTEE,
            tva_19_base=Decimal("10000"),
            tva_19_amount=Decimal("1900"),
            tva_9_base=Decimal("1000"),
            tva_9_amount=Decimal("90"),
            tva_0_base=Decimal("5000"),
        )
        TaxEntry.objects.create(
            pharmacy=self.pharmacy,
            period_year=year,
            period_month=month,
            tva_type=TaxEntry.TYPE_DEDUCTIBLE,
            tva_19_base=Decimal("5000"),
            tva_19_amount=Decimal("950"),
        )

    def test_payable_period(self):
        self._seed_period()

        summary = build_g50_summary(pharmacy_id=self.pharmacy.pk, year=2025, month=1)

        self.assertEqual(summary["tva_collectee"]["total"], Decimal("1990"))
        self.assertEqual(summary["tva_deductible"]["total"], Decimal("950"))
        self.assertEqual(summary["tva_a_decaisser"], Decimal("1040"))
        self.assertEqual(summary["credit_tva"], Decimal("0"))
        self.assertEqual(summary["period"], "2025-01")
        self.assertEqual(summary["status"], TaxEntry.STATUS_OPEN)
        self.assertIsNone(summary["g50_reference"])

    def test_missing_period_is_all_zero(self):
        summary = build_g50_summary(pharmacy_id=self.pharmacy.pk, year=2025, month=2)
        self.assertEqual(summary["tva_collectee"]["total"], Decimal("0"))
        self.assertEqual(summary["tva_a_decaisser"], Decimal("0"))
        self.assertEqual(summary["credit_tva"], Decimal("0"))
        self.assertEqual(summary["status"], "open")

    def test_invalid_month(self):
        for month in (0, 13, "janvier"):
            with self.assertRaises(InvalidParameter):
                build_g50_summary(pharmacy_id=self.pharmacy.pk, year=2025, month=month)

    def test_export_and_csv(self):
        self._seed_period()

        export = build_g50_export(pharmacy=self.pharmacy, year=2025, month=1)

        self.assertEqual(export["period_label"], "Janvier 2025")
        self.assertEqual(export["pharmacy_nif"], "000116001234567")
        self.assertEqual(export["pharmacy_address"], "12 rue Didouche Mourad, Alger Centre, Alger")
        self.assertEqual(export["tva_collectee"]["base_0"], Decimal("5000"))
        self.assertEqual(export["tva_collectee"]["total_base"], Decimal("16000"))
        self.assertEqual(export["tva_deductible"]["total_base"], Decimal("5000"))

        csv_text = render_g50_csv(export)
        lines = csv_text.splitlines()
        self.assertEqual(lines[0], "# DÉCLARATION G50 - TVA")
        self.assertIn("# Période: Janvier 2025", lines)
        self.assertIn("TVA Collectée,19%,10000.00,1900.00", lines)
        self.assertIn("TOTAL COLLECTÉE,,16000.00,1990.00", lines)
        self.assertIn("TVA À DÉCAISSER,,,1040.00", lines)
        self.assertIn("CRÉDIT TVA (report),,,0.00", lines)

    def test_csv_marks_missing_fiscal_ids(self):
        bare = make_pharmacy(name="Pharmacie Sans NIF")
        csv_text = render_g50_csv(build_g50_export(pharmacy=bare, year=2025, month=1))
        self.assertIn("# NIF: Non renseigné", csv_text.splitlines())

    def test_mark_declared(self):
        self._seed_period()

        updated = mark_g50_declared(pharmacy=self.pharmacy, year=2025, month=1, g50_reference="G50-0125")

        self.assertEqual(updated, 2)
        summary = build_g50_summary(pharmacy_id=self.pharmacy.pk, year=2025, month=1)
        self.assertEqual(summary["status"], TaxEntry.STATUS_DECLARED)
        self.assertEqual(summary["g50_reference"], "G50-0125")
        self.assertFalse(
            TaxEntry.objects.filter(pharmacy=self.pharmacy, declared_at__isnull=True).exists()
        )

    def test_mark_declared_on_empty_period_records_nil_declaration(self):
        mark_g50_declared(pharmacy=self.pharmacy, year=2025, month=6)

        rows = TaxEntry.objects.filter(pharmacy=self.pharmacy, period_year=2025, period_month=6)
        self.assertEqual(rows.count(), 2)
        self.assertTrue(all(row.status == TaxEntry.STATUS_DECLARED for row in rows))
