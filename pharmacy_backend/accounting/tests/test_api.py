# accounting/tests/test_api.py

import uuid
from datetime import date
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Permission
from rest_framework import status
from rest_framework.test import APITestCase

from accounting.models.journal import JournalEntry
from accounting.models.tax_entry import TaxEntry
from accounting.tests.helpers import make_account, make_pharmacy, post_entry

User = get_user_model()

BASE = "/api/accounting"


class AccountingAPITestCase(APITestCase):
    def setUp(self):
        self.pharmacy = make_pharmacy(nif="000116001234567")
        for code in ("411", "512", "7001", "4457"):
            make_account(self.pharmacy, code)

        self.user = User.objects.create_superuser(
            username="comptable", email="comptable@example.com", password="pass1234"
        )
        self.client.force_authenticate(user=self.user)
        self.client.credentials(HTTP_X_PHARMACY_ID=str(self.pharmacy.pk))


class TenancyTests(AccountingAPITestCase):
    def test_missing_pharmacy_id(self):
        self.client.credentials()
        res = self.client.get(f"{BASE}/reports/", {"type": "trial_balance"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_malformed_pharmacy_id(self):
        self.client.credentials(HTTP_X_PHARMACY_ID="pharmacie-1")
        res = self.client.get(f"{BASE}/reports/", {"type": "trial_balance"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_pharmacy(self):
        self.client.credentials(HTTP_X_PHARMACY_ID=str(uuid.uuid4()))
        res = self.client.get(f"{BASE}/reports/", {"type": "trial_balance"})
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_query_parameter_fallback(self):
        self.client.credentials()
        res = self.client.get(
            f"{BASE}/reports/",
            {"type": "trial_balance", "pharmacy_id": str(self.pharmacy.pk)},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)

    def test_anonymous_is_rejected(self):
        self.client.force_authenticate(user=None)
        res = self.client.get(f"{BASE}/reports/", {"type": "trial_balance"})
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)


class ReportAPITests(AccountingAPITestCase):
    """
    GUARANTEES:
    - reports are computed from posted entries of the requesting pharmacy
    - report errors come back as {"detail", "code"} with their status
    """

    def setUp(self):
        super().setUp()
        post_entry(
            self.pharmacy,
            date(2025, 1, 15),
            [("411", "10000", "0"), ("7001", "0", "10000")],
            journal_code="VT",
        )

    def test_trial_balance(self):
        res = self.client.get(
            f"{BASE}/reports/",
            {"type": "trial_balance", "start_date": "2025-01-01", "end_date": "2025-01-31"},
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        body = res.json()
        self.assertEqual(body["report_type"], "trial_balance")
        self.assertEqual(Decimal(str(body["totals"]["closing_debit"])), Decimal("10000"))
        self.assertTrue(body["totals"]["balanced"])

    def test_general_ledger(self):
        res = self.client.get(
            f"{BASE}/reports/",
            {
                "type": "general_ledger",
                "account_code": "411",
                "start_date": "2025-01-01",
                "end_date": "2025-12-31",
            },
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        body = res.json()
        self.assertEqual(len(body["entries"]), 1)
        self.assertEqual(Decimal(str(body["closing_balance"])), Decimal("10000"))

    def test_unknown_report_type(self):
        res = self.client.get(f"{BASE}/reports/", {"type": "cash_flow"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.json()["code"], "invalid_report_type")
        self.assertIn("detail", res.json())

    def test_missing_account_code(self):
        res = self.client.get(f"{BASE}/reports/", {"type": "general_ledger"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.json()["code"], "missing_parameter")

    def test_unknown_account(self):
        res = self.client.get(f"{BASE}/reports/", {"type": "general_ledger", "account_code": "999"})
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)
        self.assertEqual(res.json()["code"], "account_not_found")

    def test_bad_date(self):
        res = self.client.get(f"{BASE}/reports/", {"type": "income_statement", "start_date": "15/01/2025"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.json()["code"], "invalid_parameter")

    def test_requires_view_permission(self):
        clerk = User.objects.create_user(username="caissier", password="pass1234")
        self.client.force_authenticate(user=clerk)
        res = self.client.get(f"{BASE}/reports/", {"type": "trial_balance"})
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_granted_view_permission(self):
        clerk = User.objects.create_user(username="auditeur", password="pass1234")
        clerk.user_permissions.add(
            Permission.objects.get(content_type__app_label="accounting", codename="view_journalentry")
        )
        self.client.force_authenticate(user=User.objects.get(pk=clerk.pk))
        res = self.client.get(f"{BASE}/reports/", {"type": "balance_sheet", "as_of_date": "2025-01-31"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)


class JournalEntryAPITests(AccountingAPITestCase):
    def _payload(self, debit="1500.00", credit="1500.00", **extra):
        payload = {
            "journal_code": "VT",
            "entry_date": "2025-01-20",
            "description": "Vente comptoir",
            "lines": [
                {"account_code": "512", "debit_amount": debit},
                {"account_code": "7001", "credit_amount": credit},
            ],
        }
        payload.update(extra)
        return payload

    def test_create_and_post(self):
        res = self.client.post(f"{BASE}/journal-entries/", self._payload(), format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["status"], JournalEntry.STATUS_DRAFT)
        self.assertEqual(res.data["entry_number"], "VT-2025-00001")
        self.assertEqual(len(res.data["lines"]), 2)

        entry_id = res.data["id"]
        res = self.client.post(f"{BASE}/journal-entries/{entry_id}/post/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], JournalEntry.STATUS_POSTED)
        self.assertEqual(res.data["total_debit"], "1500.00")

        res = self.client.post(f"{BASE}/journal-entries/{entry_id}/post/")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detail", res.data)

        res = self.client.post(f"{BASE}/journal-entries/{entry_id}/cancel/")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unbalanced_entry_is_rejected(self):
        res = self.client.post(
            f"{BASE}/journal-entries/", self._payload(credit="1400.00"), format="json"
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("detail", res.data)
        self.assertFalse(JournalEntry.objects.exists())

    def test_single_line_is_rejected(self):
        payload = self._payload()
        payload["lines"] = payload["lines"][:1]
        res = self.client.post(f"{BASE}/journal-entries/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_third_party_fields_round_trip(self):
        payload = self._payload()
        payload["lines"] = [
            {
                "account_code": "411",
                "debit_amount": "1500.00",
                "third_party_type": "cnas",
                "third_party_id": "CNAS-16",
                "third_party_name": "CNAS Alger",
                "due_date": "2025-03-31",
            },
            {"account_code": "7001", "credit_amount": "1500.00"},
        ]
        res = self.client.post(f"{BASE}/journal-entries/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)

        receivable, sale = res.data["lines"]
        self.assertEqual(receivable["third_party_type"], "cnas")
        self.assertEqual(receivable["third_party_id"], "CNAS-16")
        self.assertEqual(receivable["third_party_name"], "CNAS Alger")
        self.assertEqual(receivable["due_date"], "2025-03-31")
        self.assertEqual(sale["third_party_type"], "")
        self.assertIsNone(sale["due_date"])

        line = JournalEntry.objects.get(pk=res.data["id"]).lines.get(line_number=1)
        self.assertEqual(line.due_date, date(2025, 3, 31))

    def test_unknown_third_party_type_is_rejected(self):
        payload = self._payload()
        payload["lines"][0]["third_party_type"] = "bank"
        res = self.client.post(f"{BASE}/journal-entries/", payload, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(JournalEntry.objects.exists())

    def test_cancel_draft(self):
        res = self.client.post(f"{BASE}/journal-entries/", self._payload(), format="json")
        res = self.client.post(f"{BASE}/journal-entries/{res.data['id']}/cancel/")
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["status"], JournalEntry.STATUS_CANCELLED)

    def test_list_filters_and_scope(self):
        post_entry(self.pharmacy, date(2025, 1, 15), [("411", "100", "0"), ("7001", "0", "100")], journal_code="VT")
        post_entry(self.pharmacy, date(2025, 2, 3), [("512", "100", "0"), ("411", "0", "100")], journal_code="BQ")

        other = make_pharmacy(name="Pharmacie Ibn Sina")
        make_account(other, "411")
        make_account(other, "7001")
        foreign = post_entry(other, date(2025, 1, 15), [("411", "5", "0"), ("7001", "0", "5")], journal_code="VT")

        res = self.client.get(f"{BASE}/journal-entries/")
        self.assertEqual(res.data["count"], 2)

        res = self.client.get(f"{BASE}/journal-entries/", {"journal_code": "BQ"})
        self.assertEqual(res.data["count"], 1)

        res = self.client.get(f"{BASE}/journal-entries/", {"account_code": "411"})
        self.assertEqual(res.data["count"], 2)

        res = self.client.get(f"{BASE}/journal-entries/", {"end_date": "2025-01-31"})
        self.assertEqual(res.data["count"], 1)

        res = self.client.get(f"{BASE}/journal-entries/{foreign.pk}/")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)


class G50APITests(AccountingAPITestCase):
    def setUp(self):
        super().setUp()
        TaxEntry.objects.create(
            pharmacy=self.pharmacy,
            period_year=2025,
            period_month=1,
            tva_type=TaxEntry.TYPE_COLLECTEE,
            tva_19_base=Decimal("10000"),
            tva_19_amount=Decimal("1900"),
        )

    def test_json_export(self):
        res = self.client.get(f"{BASE}/g50-export/", {"year": 2025, "month": 1})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        body = res.json()
        self.assertEqual(body["period"], "2025-01")
        self.assertEqual(Decimal(str(body["tva_a_decaisser"])), Decimal("1900"))
        self.assertEqual(body["pharmacy_nif"], "000116001234567")

    def test_csv_export(self):
        res = self.client.get(f"{BASE}/g50-export/", {"year": 2025, "month": 1, "format": "csv"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res["Content-Type"].startswith("text/csv"))
        self.assertIn('filename="G50-2025-01.csv"', res["Content-Disposition"])
        self.assertIn("TVA À DÉCAISSER,,,1900.00", res.content.decode("utf-8"))

    def test_invalid_month(self):
        res = self.client.get(f"{BASE}/g50-export/", {"year": 2025, "month": 13})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertEqual(res.json()["code"], "invalid_parameter")

    def test_declare(self):
        res = self.client.post(
            f"{BASE}/g50-export/",
            {"year": 2025, "month": 1, "g50_reference": "G50-0125"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertTrue(res.data["success"])

        res = self.client.get(f"{BASE}/reports/", {"type": "g50", "year": "2025", "month": "1"})
        self.assertEqual(res.json()["status"], TaxEntry.STATUS_DECLARED)
        self.assertEqual(res.json()["g50_reference"], "G50-0125")


class ChartAccountsAPITests(AccountingAPITestCase):
    def test_lists_active_detail_accounts(self):
        make_account(self.pharmacy, "70", is_detail=False)
        make_account(self.pharmacy, "530", is_active=False)

        res = self.client.get(f"{BASE}/accounts/")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual([a["code"] for a in res.data], ["411", "4457", "512", "7001"])
