# hc_core/visits/services/documentation.py
"""
Payload validation for visit documentation (kardex, vitals, medications, tasks).
"""
from __future__ import annotations

from typing import Any

from rest_framework import serializers

from hc_core.common.exceptions import ValidationError


class KardexSerializer(serializers.Serializer):
    general_observations = serializers.CharField(allow_blank=True, required=False)
    skin_condition = serializers.CharField(allow_blank=True, required=False)
    mobility_status = serializers.CharField(allow_blank=True, required=False)
    nutrition_intake = serializers.CharField(allow_blank=True, required=False)
    pain_level = serializers.IntegerField(min_value=0, max_value=10, required=False, allow_null=True)
    mental_status = serializers.CharField(allow_blank=True, required=False)
    environmental_safety = serializers.CharField(allow_blank=True, required=False)
    caregiver_support = serializers.CharField(allow_blank=True, required=False)
    internal_notes = serializers.CharField(allow_blank=True, required=False)


class VitalsSerializer(serializers.Serializer):
    sys = serializers.IntegerField(min_value=1)
    dia = serializers.IntegerField(min_value=1)
    spo2 = serializers.IntegerField(min_value=1, max_value=100)
    hr = serializers.IntegerField(min_value=1)
    temperature = serializers.FloatField(required=False, allow_null=True, min_value=0.1)
    weight = serializers.FloatField(required=False, allow_null=True, min_value=0.1)


class MedicationRecordSerializer(serializers.Serializer):
    medication_name = serializers.CharField()
    intended_dosage = serializers.CharField()
    dosage_given = serializers.CharField()
    time = serializers.CharField()
    route = serializers.CharField(required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)


class TaskRecordSerializer(serializers.Serializer):
    task_description = serializers.CharField()
    completed_at = serializers.CharField()
    notes = serializers.CharField(required=False, allow_blank=True)


class DocumentationSerializer(serializers.Serializer):
    kardex = KardexSerializer(required=False)
    vitals = VitalsSerializer(required=False, allow_null=True)
    medications = MedicationRecordSerializer(many=True, required=False)
    tasks = TaskRecordSerializer(many=True, required=False)


def validate_documentation(data: dict[str, Any]) -> dict[str, Any]:
    """
    Validated sections, only those present in `data`.
    Raises the domain ValidationError with the field errors as details.
    """
    ser = DocumentationSerializer(data=data)
    if not ser.is_valid():
        raise ValidationError("Invalid visit documentation.", details=ser.errors)

    # plain dicts/lists, ready for the JSON columns
    out: dict[str, Any] = {}
    for key in ("kardex", "vitals", "medications", "tasks"):
        if key in ser.validated_data:
            out[key] = _plain(ser.validated_data[key])
    if not out:
        raise ValidationError("Nothing to save.", details={"fields": list(DocumentationSerializer().fields)})
    return out


def _plain(value):
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_plain(v) for v in value]
    return value
