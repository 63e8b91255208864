# accounting/api/serializers/g50.py

from rest_framework import serializers


class G50DeclareSerializer(serializers.Serializer):
    year = serializers.IntegerField(min_value=1, max_value=9999)
    month = serializers.IntegerField(min_value=1, max_value=12)
    g50_reference = serializers.CharField(max_length=64, required=False, allow_blank=True)
