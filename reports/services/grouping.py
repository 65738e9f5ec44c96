"""
Grouping Engine

Generic single-dimension aggregation of a record snapshot into StatItems:
1. Extract a group label per record (or per treatment for medicines)
2. Accumulate 1 (visits) or the livestock count (animals) per label
3. Order descending by count with a configurable tie-break
4. Optionally normalize counts into percentages of the total
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

from django.conf import settings

from reports.formatting import month_year_label
from service_records.records import ServiceRecord

logger = logging.getLogger(__name__)


class GroupBy(Enum):
    MONTH = 'month'
    OFFICER = 'officer'
    FACILITY = 'facility'
    DIAGNOSIS = 'diagnosis'
    VILLAGE = 'village'
    SPECIES = 'species'
    MEDICINE = 'medicine'


class TieBreak(Enum):
    # Equal counts keep first-occurrence order of their label in the input
    FIRST_SEEN = 'first_seen'
    # Equal counts are ordered by label (months chronologically)
    KEY = 'key'


@dataclass(frozen=True)
class StatItem:
    """One group of an aggregation"""
    name: str
    count: float
    percentage: Optional[float] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {'name': self.name, 'count': self.count}
        if self.percentage is not None:
            data['percentage'] = self.percentage
        return data


def village_key(record: ServiceRecord) -> str:
    return record.village or settings.REPORTS['UNKNOWN_VILLAGE']


# Extractors yield (label, natural sort key) pairs
def _month_keys(record):
    yield month_year_label(record.date), (record.date.year, record.date.month)


def _field_keys(getter: Callable[[ServiceRecord], str]):
    def extract(record):
        label = getter(record)
        yield label, label
    return extract


def _medicine_keys(record):
    for treatment in record.treatments:
        name = treatment.medicine_name.strip()
        yield name, name


KEY_EXTRACTORS = {
    GroupBy.MONTH: _month_keys,
    GroupBy.OFFICER: _field_keys(lambda r: r.officer_name),
    GroupBy.FACILITY: _field_keys(lambda r: r.puskeswan),
    GroupBy.DIAGNOSIS: _field_keys(lambda r: r.diagnosis),
    GroupBy.VILLAGE: _field_keys(village_key),
    GroupBy.SPECIES: _field_keys(lambda r: r.livestock_type.strip()),
    GroupBy.MEDICINE: _medicine_keys,
}


def group_keys(record: ServiceRecord, group_by: GroupBy) -> Iterator[Tuple[str, Any]]:
    """Labels a record contributes to, with their natural sort keys"""
    try:
        extractor = KEY_EXTRACTORS[GroupBy(group_by)]
    except (KeyError, ValueError):
        raise ValueError(f"Unsupported grouping dimension: {group_by!r}")
    return extractor(record)


def record_weight(record: ServiceRecord, weighted: bool) -> int:
    """Animals (weighted) or visits (unweighted) contributed by a record"""
    return record.livestock_count if weighted else 1


def aggregate(records: Iterable[ServiceRecord],
              group_by: GroupBy,
              weighted: bool = True,
              tie_break: TieBreak = TieBreak.FIRST_SEEN,
              with_percentage: bool = False) -> List[StatItem]:
    """
    Aggregate records by one dimension.

    Args:
        records: Record snapshot (not modified)
        group_by: Grouping dimension
        weighted: Add livestock counts instead of 1 per record
        tie_break: Ordering of groups with equal counts
        with_percentage: Attach each group's share of the total

    Returns:
        StatItems ordered by descending count; [] for no records
    """
    group_by = GroupBy(group_by)
    counts: Dict[str, float] = {}
    sort_keys: Dict[str, Any] = {}

    for record in records:
        weight = record_weight(record, weighted)
        for label, sort_key in group_keys(record, group_by):
            if label not in counts:
                counts[label] = 0
                sort_keys[label] = sort_key
            counts[label] += weight

    if TieBreak(tie_break) is TieBreak.KEY:
        ordered = sorted(counts.items(), key=lambda item: (-item[1], sort_keys[item[0]]))
    else:
        ordered = sorted(counts.items(), key=lambda item: -item[1])

    items = [StatItem(name=name, count=count) for name, count in ordered]
    logger.debug(f"Aggregated {len(items)} groups by {group_by.value}")

    if with_percentage:
        return with_percentages(items)
    return items


def with_percentages(items: List[StatItem]) -> List[StatItem]:
    """
    Attach count / total * 100 to every item.

    Computed after accumulation is complete; every percentage is 0 when
    the total is 0.
    """
    total = sum(item.count for item in items)
    return [
        replace(item, percentage=(item.count / total * 100) if total > 0 else 0.0)
        for item in items
    ]


def total_count(items: Iterable[StatItem]) -> float:
    return sum(item.count for item in items)
