"""
PATH: accounting/api/views/reports.py

FINANCIAL REPORTS API VIEW (READ-ONLY)

GET /api/accounting/reports/?type=trial_balance|income_statement|balance_sheet|general_ledger|g50

- Permission-gated: requires accounting.view_journalentry
- Pharmacy-scoped: X-Pharmacy-ID header or ?pharmacy_id=
- Report errors map to {"detail", "code"} with their status code
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.tenancy import get_request_pharmacy
from accounting.services.exceptions import ReportError
from accounting.services.report_service import REPORT_TYPES, generate_report


def report_error_response(exc: ReportError) -> Response:
    return Response(exc.as_dict(), status=exc.status_code)


def _date_param(name: str, description: str) -> OpenApiParameter:
    return OpenApiParameter(
        name=name,
        type=str,
        location=OpenApiParameter.QUERY,
        required=False,
        description=description,
    )


@extend_schema(
    tags=["accounting"],
    parameters=[
        OpenApiParameter(
            name="type",
            type=str,
            location=OpenApiParameter.QUERY,
            required=True,
            enum=list(REPORT_TYPES),
        ),
        _date_param("start_date", "YYYY-MM-DD, defaults to 1 January of the current year."),
        _date_param("end_date", "YYYY-MM-DD, defaults to today."),
        _date_param("as_of_date", "Balance sheet snapshot date (YYYY-MM-DD)."),
        OpenApiParameter(name="account_code", type=str, required=False, description="General ledger account."),
        OpenApiParameter(name="year", type=int, required=False, description="G50 period year."),
        OpenApiParameter(name="month", type=int, required=False, description="G50 period month (1-12)."),
    ],
    responses={200: dict},
)
class FinancialReportView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        if not request.user.has_perm("accounting.view_journalentry"):
            return Response(
                {"detail": "You do not have permission to view financial reports."},
                status=status.HTTP_403_FORBIDDEN,
            )

        pharmacy = get_request_pharmacy(request)
        report_type = request.query_params.get("type", "")

        try:
            data = generate_report(pharmacy.pk, report_type, request.query_params)
        except ReportError as exc:
            return report_error_response(exc)

        return Response(data, status=status.HTTP_200_OK)
