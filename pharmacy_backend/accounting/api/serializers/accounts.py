# accounting/api/serializers/accounts.py

from rest_framework import serializers

from accounting.models.account import Account


class AccountListSerializer(serializers.ModelSerializer):
    """
    Read-only serializer for a pharmacy's chart of accounts.
    """

    class Meta:
        model = Account
        fields = (
            "id",
            "code",
            "name",
            "account_class",
            "normal_balance",
            "parent_code",
            "is_detail",
            "is_active",
            "statement_bucket",
        )
        read_only_fields = fields
