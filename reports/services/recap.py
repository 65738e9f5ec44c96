"""
Recap Builder

Two independent accumulations over one record snapshot:
1. Medicine totals - dose values summed per medicine name
2. Case counts - livestock counts keyed by village -> species -> diagnosis

Nothing is sorted while accumulating. Sorted views (case_rows,
medicine_rows, medicines_by_usage) are produced when reading, so the
same RecapData serves the screen and the exports.
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterable, Iterator, List, Mapping, Tuple

from service_records.records import GENERIC_DOSE_UNIT, ServiceRecord

from .grouping import village_key

logger = logging.getLogger(__name__)


class NestedCounter:
    """
    Three-level counter built with increment(key1, key2, key3, amount).

    Keys keep insertion order; reading code decides how to sort.
    """

    def __init__(self):
        self._counts: Dict[str, Dict[str, Dict[str, float]]] = {}

    def increment(self, key1: str, key2: str, key3: str, amount=1):
        level2 = self._counts.setdefault(key1, {})
        level3 = level2.setdefault(key2, {})
        level3[key3] = level3.get(key3, 0) + amount

    def get(self, key1: str, key2: str, key3: str, default=0):
        return self._counts.get(key1, {}).get(key2, {}).get(key3, default)

    def __getitem__(self, key1: str) -> Mapping[str, Mapping[str, float]]:
        return MappingProxyType({
            key2: MappingProxyType(level3)
            for key2, level3 in self._counts[key1].items()
        })

    def __contains__(self, key1) -> bool:
        return key1 in self._counts

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __bool__(self) -> bool:
        return bool(self._counts)

    def keys(self):
        return self._counts.keys()

    def items(self) -> Iterator[Tuple[str, str, str, float]]:
        """Every (key1, key2, key3, count) in insertion order"""
        for key1, level2 in self._counts.items():
            for key2, level3 in level2.items():
                for key3, count in level3.items():
                    yield key1, key2, key3, count

    def rows(self) -> List[Tuple[str, str, str, float]]:
        """Every (key1, key2, key3, count) ordered by key1, key2, key3"""
        return sorted(self.items(), key=lambda row: row[:3])

    def total(self) -> float:
        return sum(row[3] for row in self.items())

    def to_dict(self) -> Dict[str, Dict[str, Dict[str, float]]]:
        return {
            key1: {key2: dict(level3) for key2, level3 in level2.items()}
            for key1, level2 in self._counts.items()
        }


@dataclass
class MedicineTotal:
    """Running dose total of one medicine"""
    count: float = 0
    unit: str = GENERIC_DOSE_UNIT

    def add(self, medicine_name: str, dose: float, unit: str):
        """
        Add a dose. The first unit seen is kept unless it is the generic
        placeholder, which the first specific unit replaces. Units are
        never converted.
        """
        self.count += dose
        if is_generic_unit(self.unit) and not is_generic_unit(unit):
            self.unit = unit
        elif not is_generic_unit(unit) and unit != self.unit:
            logger.debug(
                f"Medicine '{medicine_name}' recorded in '{unit}' but totalled in '{self.unit}'"
            )


def is_generic_unit(unit: str) -> bool:
    return not unit or unit == GENERIC_DOSE_UNIT


@dataclass
class RecapData:
    """
    Medicine and case recap of one facility and period.

    medicines: medicine name -> MedicineTotal
    cases: village -> species -> diagnosis -> livestock count
    """
    medicines: Dict[str, MedicineTotal] = field(default_factory=dict)
    cases: NestedCounter = field(default_factory=NestedCounter)

    @property
    def has_data(self) -> bool:
        return bool(self.medicines) or bool(self.cases)

    def add_treatment(self, medicine_name: str, dose: float, unit: str):
        if medicine_name not in self.medicines:
            self.medicines[medicine_name] = MedicineTotal(unit=unit or GENERIC_DOSE_UNIT)
        self.medicines[medicine_name].add(medicine_name, dose, unit or GENERIC_DOSE_UNIT)

    def case_rows(self) -> List[Tuple[str, str, str, float]]:
        """(village, species, diagnosis, count) sorted by village, species, diagnosis"""
        return self.cases.rows()

    def medicine_rows(self) -> List[Tuple[str, MedicineTotal]]:
        """(name, total) sorted by medicine name"""
        return sorted(self.medicines.items(), key=lambda item: item[0])

    def medicines_by_usage(self) -> List[Tuple[str, MedicineTotal]]:
        """(name, total) with the largest totals first"""
        return sorted(self.medicines.items(), key=lambda item: -item[1].count)

    def to_dict(self) -> dict:
        return {
            'medicines': {
                name: {'count': total.count, 'unit': total.unit}
                for name, total in self.medicines.items()
            },
            'cases': self.cases.to_dict(),
        }


def build_recap(records: Iterable[ServiceRecord]) -> RecapData:
    """
    Build the medicine and case recap of a snapshot in a single pass.

    Village, species and diagnosis keys are trimmed so whitespace
    variants of the same label land in one bucket.
    """
    recap = RecapData()

    for record in records:
        recap.cases.increment(
            village_key(record),
            record.livestock_type.strip(),
            record.diagnosis.strip(),
            record.livestock_count,
        )

        for treatment in record.treatments:
            recap.add_treatment(
                treatment.medicine_name.strip(),
                treatment.dosage_value or 0,
                treatment.dosage_unit,
            )

    return recap


# =============================================================================
# CROSS-FACILITY RECAP
# =============================================================================

@dataclass
class FacilityRecap:
    """Medicine totals and diagnosis visit counts of one facility"""
    medicines: Dict[str, MedicineTotal] = field(default_factory=dict)
    diagnoses: Dict[str, int] = field(default_factory=dict)

    def sorted_diagnoses(self) -> List[Tuple[str, int]]:
        return sorted(self.diagnoses.items(), key=lambda item: -item[1])

    def sorted_medicines(self) -> List[Tuple[str, MedicineTotal]]:
        return sorted(self.medicines.items(), key=lambda item: -item[1].count)


def build_facility_recaps(records: Iterable[ServiceRecord]) -> Dict[str, FacilityRecap]:
    """
    Per-facility recap across the whole snapshot.

    Diagnoses count visits (one per record), not animals. Facilities are
    returned in alphabetical order.
    """
    recaps: Dict[str, FacilityRecap] = {}

    for record in records:
        if not record.puskeswan:
            continue
        recap = recaps.setdefault(record.puskeswan, FacilityRecap())

        diagnosis = record.diagnosis.strip()
        recap.diagnoses[diagnosis] = recap.diagnoses.get(diagnosis, 0) + 1

        for treatment in record.treatments:
            name = treatment.medicine_name.strip()
            unit = treatment.dosage_unit or GENERIC_DOSE_UNIT
            if name not in recap.medicines:
                recap.medicines[name] = MedicineTotal(unit=unit)
            recap.medicines[name].add(name, treatment.dosage_value or 0, unit)

    return {name: recaps[name] for name in sorted(recaps)}
