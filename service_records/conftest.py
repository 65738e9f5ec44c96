"""
Shared pytest fixtures for service record tests.
"""
import copy

import pytest

BASE_DOCUMENT = {
    'puskeswan': 'Puskeswan Topoyo',
    'officerName': 'Haslim',
    'ownerName': 'Pak Budi',
    'ownerAddress': 'Topoyo',
    'nik': '7606010101800001',
    'phoneNumber': '081234567890',
    'livestockType': 'Sapi Bali',
    'livestockCount': 3,
    'clinicalSymptoms': 'Demam, nafsu makan turun',
    'diagnosis': 'Scabies',
    'treatmentType': 'Pengobatan',
    'caseId': 'ISK-001',
    'treatments': [
        {
            'medicineType': 'Antibiotik',
            'medicineName': 'Penstrep',
            'dosageValue': 5,
            'dosageUnit': 'ml',
        },
    ],
    'caseDevelopments': [
        {'status': 'Sembuh', 'count': 2},
        {'status': 'Tidak Sembuh', 'count': 1},
    ],
}


@pytest.fixture
def raw_document():
    """Factory for stored documents; keyword overrides replace fields, None removes them."""
    def make(**overrides):
        data = copy.deepcopy(BASE_DOCUMENT)
        for key, value in overrides.items():
            if value is None:
                data.pop(key, None)
            else:
                data[key] = value
        return data
    return make
