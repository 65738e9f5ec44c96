"""
Shared pytest fixtures for reports tests.
"""
import itertools
from datetime import date

import pytest

from service_records.records import CaseDevelopmentEntry, ServiceRecord, Treatment
from service_records.reference import default_reference


@pytest.fixture
def make_record():
    """
    Factory for ServiceRecords.

    treatments may be given as (name, dose, unit) tuples; the case
    breakdown defaults to every animal resolved.
    """
    ids = itertools.count(1)

    def make(treatments=(('Penstrep', 5, 'ml'),), **fields):
        data = {
            'id': f"rec-{next(ids)}",
            'date': date(2024, 1, 15),
            'puskeswan': 'Puskeswan Topoyo',
            'officer_name': 'Haslim',
            'owner_name': 'Pak Budi',
            'owner_address': 'Topoyo',
            'livestock_type': 'Sapi Bali',
            'livestock_count': 1,
            'clinical_symptoms': 'Demam',
            'diagnosis': 'Scabies',
            'treatment_type': 'Pengobatan',
            'case_id': '',
        }
        data.update(fields)
        data['treatments'] = tuple(
            t if isinstance(t, Treatment) else Treatment('Obat', t[0], t[1], t[2])
            for t in treatments
        )
        data.setdefault('case_developments', (
            CaseDevelopmentEntry('Sembuh', data['livestock_count']),
        ))
        return ServiceRecord(**data)

    return make


@pytest.fixture
def reference():
    return default_reference()
