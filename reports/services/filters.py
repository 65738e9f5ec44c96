"""
Filter Pipeline

Pure, non-mutating filters applied to a record snapshot before any
aggregation runs. The text filter is applied to the output of the
period filter.
"""

from typing import Iterable, List, Optional

from reports.formatting import short_date_label
from service_records.records import ServiceRecord

from .periods import PeriodSelector


def filter_by_period(records: Iterable[ServiceRecord], period: Optional[PeriodSelector]) -> List[ServiceRecord]:
    """Keep records whose date falls in the selected year and/or month"""
    if period is None or period.is_unfiltered:
        return list(records)
    return [record for record in records if period.matches(record.date)]


def searchable_values(record: ServiceRecord) -> List[str]:
    """Fields matched by the free-text search, lowercased"""
    return [
        record.owner_name.lower(),
        record.officer_name.lower(),
        record.puskeswan.lower(),
        record.diagnosis.lower(),
        record.livestock_type.lower(),
        short_date_label(record.date).lower(),
    ]


def filter_by_text(records: Iterable[ServiceRecord], query: Optional[str]) -> List[ServiceRecord]:
    """
    Case-insensitive substring search.

    A record passes when any of owner, officer, facility, diagnosis,
    livestock type or its 'dd MMM yyyy' date contains the query.
    """
    needle = (query or '').lower()
    if not needle:
        return list(records)
    return [
        record for record in records
        if any(needle in value for value in searchable_values(record))
    ]


def filter_by_facility(records: Iterable[ServiceRecord], facility: str) -> List[ServiceRecord]:
    return [record for record in records if record.puskeswan == facility]


def filter_records(records: Iterable[ServiceRecord],
                   period: Optional[PeriodSelector] = None,
                   query: Optional[str] = None) -> List[ServiceRecord]:
    """Period filter followed by text filter; no criteria returns a copy"""
    return filter_by_text(filter_by_period(records, period), query)
