# accounting/api/views/accounts.py

"""
PATH: accounting/api/views/accounts.py

CHART OF ACCOUNTS API (READ-ONLY)

GET /api/accounting/accounts/
Returns the ACTIVE DETAIL accounts of the requesting pharmacy (postable accounts).
"""

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.generics import GenericAPIView
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from accounting.api.serializers.accounts import AccountListSerializer
from accounting.api.tenancy import get_request_pharmacy
from accounting.api.views.reports import report_error_response
from accounting.services.chart_of_accounts import get_detail_accounts
from accounting.services.exceptions import ReportError


class ChartAccountsView(GenericAPIView):
    permission_classes = [IsAuthenticated]
    serializer_class = AccountListSerializer

    @extend_schema(
        tags=["accounting"],
        responses=AccountListSerializer(many=True),
    )
    def get(self, request, *args, **kwargs):
        if not request.user.has_perm("accounting.view_account"):
            return Response(
                {"detail": "You do not have permission to view accounts."},
                status=status.HTTP_403_FORBIDDEN,
            )

        pharmacy = get_request_pharmacy(request)
        try:
            accounts = get_detail_accounts(pharmacy.pk)
        except ReportError as exc:
            return report_error_response(exc)

        return Response(AccountListSerializer(accounts, many=True).data, status=status.HTTP_200_OK)
