# accounting/api/serializers/journal_entries.py

from decimal import Decimal

from rest_framework import serializers

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine


class JournalLineSerializer(serializers.ModelSerializer):
    class Meta:
        model = JournalLine
        fields = (
            "line_number",
            "account_code",
            "description",
            "debit_amount",
            "credit_amount",
            "third_party_type",
            "third_party_id",
            "third_party_name",
            "due_date",
        )
        read_only_fields = fields


class JournalEntrySerializer(serializers.ModelSerializer):
    lines = JournalLineSerializer(many=True, read_only=True)

    class Meta:
        model = JournalEntry
        fields = (
            "id",
            "entry_number",
            "journal_code",
            "entry_date",
            "description",
            "reference_type",
            "reference_number",
            "status",
            "total_debit",
            "total_credit",
            "posted_at",
            "is_auto_generated",
            "created_at",
            "lines",
        )
        read_only_fields = fields


class JournalLineInputSerializer(serializers.Serializer):
    account_code = serializers.CharField(max_length=10)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    debit_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.00"), required=False, default=Decimal("0.00")
    )
    credit_amount = serializers.DecimalField(
        max_digits=14, decimal_places=2, min_value=Decimal("0.00"), required=False, default=Decimal("0.00")
    )
    third_party_type = serializers.ChoiceField(
        choices=JournalLine.THIRD_PARTY_TYPES, required=False, allow_blank=True, default=""
    )
    third_party_id = serializers.CharField(max_length=64, required=False, allow_blank=True, default="")
    third_party_name = serializers.CharField(max_length=255, required=False, allow_blank=True, default="")
    due_date = serializers.DateField(required=False, allow_null=True, default=None)

    def validate(self, attrs):
        debit = attrs.get("debit_amount") or Decimal("0.00")
        credit = attrs.get("credit_amount") or Decimal("0.00")
        if debit > 0 and credit > 0:
            raise serializers.ValidationError("A line cannot have both debit and credit.")
        if debit == 0 and credit == 0:
            raise serializers.ValidationError("A line must have either debit or credit.")
        return attrs


class JournalEntryCreateSerializer(serializers.Serializer):
    journal_code = serializers.ChoiceField(choices=JournalEntry.JOURNAL_CODES)
    entry_date = serializers.DateField(required=False)
    description = serializers.CharField()
    reference_type = serializers.CharField(max_length=50, required=False, allow_blank=True)
    reference_number = serializers.CharField(max_length=100, required=False, allow_blank=True)
    post = serializers.BooleanField(required=False, default=False)
    lines = JournalLineInputSerializer(many=True)

    def validate_lines(self, value):
        if len(value) < 2:
            raise serializers.ValidationError("At least two lines are required.")
        return value
