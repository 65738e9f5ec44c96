"""
Service Statistics

Statistics page data for a filtered snapshot:
1. Animals served per month, per officer and per Puskeswan
2. Priority disease cases (notifiable diseases)
3. Other cases per diagnosis, split by generic livestock type
4. Officer -> Puskeswan map used to colour officer charts
"""

import logging
from typing import Any, Dict, Iterable, List

from service_records.records import ServiceRecord

from .grouping import GroupBy, StatItem, aggregate

logger = logging.getLogger(__name__)

GENERIC_LIVESTOCK_PREFIXES = [
    ('sapi', 'Sapi'),
    ('kambing', 'Kambing'),
    ('ayam', 'Ayam'),
    ('kucing', 'Kucing'),
    ('anjing', 'Anjing'),
]


def generic_livestock_type(livestock_type: str) -> str:
    """Collapse breeds into their species ('Sapi Bali' -> 'Sapi')"""
    trimmed = livestock_type.strip()
    lowered = trimmed.lower()
    for prefix, generic in GENERIC_LIVESTOCK_PREFIXES:
        if lowered.startswith(prefix):
            return generic
    return trimmed


class ServiceStatisticsService:
    """
    Statistics over one immutable record snapshot.

    Usage:
        from reports.services.statistics import ServiceStatisticsService

        service = ServiceStatisticsService(records, priority_diagnoses)
        statistics = service.get_full_statistics()
    """

    def __init__(self, records: Iterable[ServiceRecord], priority_diagnoses: Iterable[str] = ()):
        self.records = list(records)
        self.priority_diagnoses = set(priority_diagnoses)

    def get_full_statistics(self) -> Dict[str, Any]:
        """
        Get every statistics block of the page.

        Returns:
            Empty blocks when the snapshot is empty
        """
        logger.debug(f"Computing statistics for {len(self.records)} records")
        return {
            'total_livestock': sum(r.livestock_count for r in self.records),
            'total_services': len(self.records),
            'by_month': self.get_monthly_stats(),
            'by_officer': self.get_officer_stats(),
            'by_puskeswan': self.get_puskeswan_stats(),
            'priority_diagnoses': self.get_priority_diagnosis_stats(),
            'diagnoses_by_animal': self.get_diagnoses_by_animal(),
            'officer_puskeswan': self.get_officer_puskeswan_map(),
        }

    def get_monthly_stats(self) -> List[StatItem]:
        return aggregate(self.records, GroupBy.MONTH)

    def get_officer_stats(self) -> List[StatItem]:
        return aggregate(self.records, GroupBy.OFFICER)

    def get_puskeswan_stats(self) -> List[StatItem]:
        """Animals per Puskeswan with each facility's share of the total"""
        return aggregate(self.records, GroupBy.FACILITY, with_percentage=True)

    def _is_priority(self, record: ServiceRecord) -> bool:
        return record.diagnosis in self.priority_diagnoses

    def get_priority_diagnosis_stats(self) -> List[StatItem]:
        priority_records = [r for r in self.records if self._is_priority(r)]
        return aggregate(priority_records, GroupBy.DIAGNOSIS)

    def get_diagnoses_by_animal(self) -> List[Dict[str, Any]]:
        """
        Non-priority cases per diagnosis for each generic livestock type.

        Returns:
            [{'animal_type': 'Sapi', 'items': [StatItem, ...]}, ...]
            ordered by animal type; empty groups are left out
        """
        grouped: Dict[str, Dict[str, int]] = {}

        for record in self.records:
            if self._is_priority(record):
                continue
            animal = generic_livestock_type(record.livestock_type)
            diagnosis = record.diagnosis.strip()
            diagnoses = grouped.setdefault(animal, {})
            diagnoses[diagnosis] = diagnoses.get(diagnosis, 0) + record.livestock_count

        result = []
        for animal in sorted(grouped):
            items = [
                StatItem(name=name, count=count)
                for name, count in grouped[animal].items()
                if count > 0
            ]
            items.sort(key=lambda item: -item.count)
            if items:
                result.append({'animal_type': animal, 'items': items})
        return result

    def get_officer_puskeswan_map(self) -> Dict[str, str]:
        """First Puskeswan each officer was recorded at"""
        mapping: Dict[str, str] = {}
        for record in self.records:
            if record.officer_name and record.puskeswan:
                mapping.setdefault(record.officer_name, record.puskeswan)
        return mapping
