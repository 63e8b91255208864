"""
PATH: accounting/api/views/journal_entries.py

JOURNAL ENTRIES API

GET  /api/accounting/journal-entries/               list (django-filter)
GET  /api/accounting/journal-entries/<id>/          detail with lines
POST /api/accounting/journal-entries/               create draft (or post at once)
POST /api/accounting/journal-entries/<id>/post/     draft -> posted
POST /api/accounting/journal-entries/<id>/cancel/   draft -> cancelled

Security rules:
- read requires accounting.view_journalentry
- create requires accounting.add_journalentry
- post / cancel require accounting.change_journalentry
- every query is scoped to the requesting pharmacy
"""

from drf_spectacular.utils import extend_schema
from rest_framework import mixins, status
from rest_framework.decorators import action
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from accounting.api.filters import JournalEntryFilter
from accounting.api.serializers.journal_entries import (
    JournalEntryCreateSerializer,
    JournalEntrySerializer,
)
from accounting.api.tenancy import get_request_pharmacy
from accounting.models.journal import JournalEntry
from accounting.services.exceptions import JournalEntryCreationError, JournalEntryStateError
from accounting.services.journal_entry_service import (
    cancel_journal_entry,
    create_journal_entry,
    post_journal_entry,
)


@extend_schema(tags=["accounting"])
class JournalEntryViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    GenericViewSet,
):
    permission_classes = [IsAuthenticated]
    serializer_class = JournalEntrySerializer
    filterset_class = JournalEntryFilter

    queryset = JournalEntry.objects.prefetch_related("lines")

    def _require(self, perm: str, message: str):
        if not self.request.user.has_perm(perm):
            raise PermissionDenied(message)

    def get_queryset(self):
        self._require(
            "accounting.view_journalentry",
            "You do not have permission to view journal entries.",
        )
        pharmacy = get_request_pharmacy(self.request)
        return super().get_queryset().filter(pharmacy=pharmacy).order_by(
            "-entry_date", "-entry_number"
        )

    @extend_schema(request=JournalEntryCreateSerializer, responses={201: JournalEntrySerializer})
    def create(self, request, *args, **kwargs):
        self._require(
            "accounting.add_journalentry",
            "You do not have permission to create journal entries.",
        )
        pharmacy = get_request_pharmacy(request)

        serializer = JournalEntryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        try:
            entry = create_journal_entry(
                pharmacy=pharmacy,
                journal_code=data["journal_code"],
                entry_date=data.get("entry_date"),
                description=data["description"],
                reference_type=data.get("reference_type"),
                reference_number=data.get("reference_number"),
                lines=[dict(line) for line in data["lines"]],
                post=data.get("post", False),
            )
        except JournalEntryCreationError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            JournalEntrySerializer(entry).data,
            status=status.HTTP_201_CREATED,
        )

    def _transition(self, request, func):
        self._require(
            "accounting.change_journalentry",
            "You do not have permission to change journal entries.",
        )
        entry = self.get_object()
        try:
            entry = func(entry)
        except (JournalEntryStateError, JournalEntryCreationError) as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response(JournalEntrySerializer(entry).data, status=status.HTTP_200_OK)

    @extend_schema(request=None, responses={200: JournalEntrySerializer})
    @action(detail=True, methods=["post"], url_path="post", url_name="post")
    def post_entry(self, request, pk=None):
        return self._transition(request, post_journal_entry)

    @extend_schema(request=None, responses={200: JournalEntrySerializer})
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        return self._transition(request, cancel_journal_entry)
