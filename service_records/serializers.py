"""
Serializers for stored service record documents.

Stored documents use the camelCase keys written by the entry form
(ownerName, livestockCount, caseDevelopments, ...). Each field maps to
the snake_case attribute of the immutable record types through `source`,
so validated_data can be turned into a ServiceRecord directly.
"""

from rest_framework import serializers

from .records import GENERIC_DOSE_UNIT, CaseDevelopmentEntry, ServiceRecord, Treatment


class TreatmentSerializer(serializers.Serializer):
    """One medicine given during a visit"""
    medicineType = serializers.CharField(source='medicine_type', allow_blank=True, default='')
    medicineName = serializers.CharField(source='medicine_name')
    dosageValue = serializers.FloatField(source='dosage_value')
    dosageUnit = serializers.CharField(source='dosage_unit', allow_blank=True, default=GENERIC_DOSE_UNIT)

    def validate_dosageValue(self, value):
        if value <= 0:
            raise serializers.ValidationError("Dosage must be greater than zero.")
        return value

    def validate_dosageUnit(self, value):
        return value or GENERIC_DOSE_UNIT


class CaseDevelopmentEntrySerializer(serializers.Serializer):
    """Outcome status with the number of animals that reached it"""
    status = serializers.CharField()
    count = serializers.IntegerField(min_value=1)


class ServiceRecordSerializer(serializers.Serializer):
    """
    Schema of a stored service record.

    Used at the snapshot boundary: documents failing validation are
    dropped by the normalizer instead of reaching the report engine.
    """
    id = serializers.CharField()
    date = serializers.DateField()
    puskeswan = serializers.CharField()
    officerName = serializers.CharField(source='officer_name')
    ownerName = serializers.CharField(source='owner_name')
    ownerAddress = serializers.CharField(source='owner_address')
    nik = serializers.CharField(allow_blank=True, default='')
    phoneNumber = serializers.CharField(source='phone_number', allow_blank=True, default='')
    caseId = serializers.CharField(source='case_id', allow_blank=True, default='')
    livestockType = serializers.CharField(source='livestock_type')
    livestockCount = serializers.IntegerField(source='livestock_count', min_value=1)
    clinicalSymptoms = serializers.CharField(source='clinical_symptoms', allow_blank=True, default='')
    diagnosis = serializers.CharField()
    treatmentType = serializers.CharField(source='treatment_type', allow_blank=True, default='')
    treatments = TreatmentSerializer(many=True, allow_empty=False)
    caseDevelopments = CaseDevelopmentEntrySerializer(source='case_developments', many=True, allow_empty=False)

    def validate(self, attrs):
        """Case outcomes cannot cover more animals than were treated"""
        total_cases = sum(entry['count'] for entry in attrs['case_developments'])
        if total_cases > attrs['livestock_count']:
            raise serializers.ValidationError({
                'caseDevelopments': (
                    f"Case development total ({total_cases}) exceeds "
                    f"livestock count ({attrs['livestock_count']})."
                )
            })
        return attrs

    def to_record(self) -> ServiceRecord:
        """Build the immutable record from validated data"""
        data = dict(self.validated_data)
        data['treatments'] = tuple(Treatment(**t) for t in data['treatments'])
        data['case_developments'] = tuple(
            CaseDevelopmentEntry(**c) for c in data['case_developments']
        )
        return ServiceRecord(**data)
