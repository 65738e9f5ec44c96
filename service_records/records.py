"""
Service Record Types

Immutable, fully typed records handed to the report engine. Raw stored
documents never reach the engine directly; they pass through
service_records.normalizer first.

Types:
    - Treatment: one medicine given during a service visit
    - CaseDevelopmentEntry: outcome status and how many animals reached it
    - ServiceRecord: a single officer visit to an owner's livestock
"""

from dataclasses import dataclass, field
from datetime import date
from typing import Tuple

# Placeholder unit for doses entered without one
GENERIC_DOSE_UNIT = 'unit'


@dataclass(frozen=True)
class Treatment:
    """Medicine given during a service visit"""
    medicine_type: str
    medicine_name: str
    dosage_value: float
    dosage_unit: str

    @property
    def dose_label(self) -> str:
        value = self.dosage_value
        if float(value).is_integer():
            value = int(value)
        return f"{value} {self.dosage_unit}".strip()


@dataclass(frozen=True)
class CaseDevelopmentEntry:
    """Outcome of a case ('Sembuh', 'Tidak Sembuh', 'Mati') and its head count"""
    status: str
    count: int


@dataclass(frozen=True)
class ServiceRecord:
    """
    A field service event recorded by a Puskeswan officer.

    The owner address doubles as the village used for case recaps.
    Records are compared by value, so two snapshots of the same stored
    documents are equal.
    """
    id: str
    date: date
    puskeswan: str
    officer_name: str
    owner_name: str
    owner_address: str
    livestock_type: str
    livestock_count: int
    clinical_symptoms: str
    diagnosis: str
    treatment_type: str
    treatments: Tuple[Treatment, ...]
    case_developments: Tuple[CaseDevelopmentEntry, ...] = field(default_factory=tuple)
    case_id: str = ''
    nik: str = ''
    phone_number: str = ''

    @property
    def village(self) -> str:
        return self.owner_address.strip()

    @property
    def medicine_names(self) -> str:
        return ', '.join(t.medicine_name for t in self.treatments)

    @property
    def dose_labels(self) -> str:
        return ', '.join(t.dose_label for t in self.treatments)

    @property
    def case_development_summary(self) -> str:
        # e.g. "Sembuh (3), Mati (1)"
        return ', '.join(f"{c.status} ({c.count})" for c in self.case_developments)
