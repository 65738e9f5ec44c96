"""
Report services module
"""

from .filters import filter_by_facility, filter_by_period, filter_by_text, filter_records
from .grouping import GroupBy, StatItem, TieBreak, aggregate, with_percentages
from .periods import ALL, InvalidPeriodError, PeriodSelector, ReportError
from .recap import NestedCounter, RecapData, build_facility_recaps, build_recap
from .statistics import ServiceStatisticsService

__all__ = [
    'ALL',
    'GroupBy',
    'InvalidPeriodError',
    'NestedCounter',
    'PeriodSelector',
    'RecapData',
    'ReportError',
    'ServiceStatisticsService',
    'StatItem',
    'TieBreak',
    'aggregate',
    'build_facility_recaps',
    'build_recap',
    'filter_by_facility',
    'filter_by_period',
    'filter_by_text',
    'filter_records',
    'with_percentages',
]
