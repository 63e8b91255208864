"""
PATH: accounting/api/views/g50_export.py

G50 (TVA) DECLARATION API

GET  /api/accounting/g50-export/?year=2026&month=1&format=json|csv
POST /api/accounting/g50-export/  {"year", "month", "g50_reference"}
     -> marks the period as declared
"""

from __future__ import annotations

from django.utils import timezone
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.renderers import JSONRenderer
from rest_framework.response import Response
from rest_framework.views import APIView

from accounting.api.renderers import CSVTextRenderer
from accounting.api.serializers.g50 import G50DeclareSerializer
from accounting.api.tenancy import get_request_pharmacy
from accounting.api.views.reports import report_error_response
from accounting.services.exceptions import ReportError
from accounting.services.report_service import param_or_default
from accounting.services.tax_summary_service import (
    build_g50_export,
    mark_g50_declared,
    render_g50_csv,
)


class G50ExportView(APIView):
    permission_classes = [IsAuthenticated]
    renderer_classes = [JSONRenderer, CSVTextRenderer]

    @extend_schema(
        tags=["accounting"],
        parameters=[
            OpenApiParameter(name="year", type=int, required=False),
            OpenApiParameter(name="month", type=int, required=False),
            OpenApiParameter(name="format", type=str, required=False, enum=["json", "csv"]),
        ],
        responses={200: dict},
    )
    def get(self, request):
        if not request.user.has_perm("accounting.view_taxentry"):
            return Response(
                {"detail": "You do not have permission to view TVA declarations."},
                status=status.HTTP_403_FORBIDDEN,
            )

        pharmacy = get_request_pharmacy(request)
        today = timezone.localdate()
        qp = request.query_params

        try:
            export = build_g50_export(
                pharmacy=pharmacy,
                year=param_or_default(qp, "year", today.year),
                month=param_or_default(qp, "month", today.month),
            )
        except ReportError as exc:
            return report_error_response(exc)

        if request.accepted_renderer.format == CSVTextRenderer.format:
            return Response(
                render_g50_csv(export),
                status=status.HTTP_200_OK,
                headers={
                    "Content-Disposition": f'attachment; filename="G50-{export["period"]}.csv"'
                },
            )

        return Response(export, status=status.HTTP_200_OK)

    @extend_schema(tags=["accounting"], request=G50DeclareSerializer, responses={200: dict})
    def post(self, request):
        if not request.user.has_perm("accounting.change_taxentry"):
            return Response(
                {"detail": "You do not have permission to file TVA declarations."},
                status=status.HTTP_403_FORBIDDEN,
            )

        pharmacy = get_request_pharmacy(request)

        serializer = G50DeclareSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            mark_g50_declared(
                pharmacy=pharmacy,
                year=data["year"],
                month=data["month"],
                g50_reference=data.get("g50_reference"),
            )
        except ReportError as exc:
            return report_error_response(exc)

        return Response(
            {"success": True, "message": "G50 marked as filed"},
            status=status.HTTP_200_OK,
        )
