"""
Reporting periods.

A period selector is a (year, month) pair where each side is a concrete
value, ALL (explicitly "all years"/"all months") or None (not selected).
Filtering treats ALL and None alike; labels and filenames do not: an
unselected year falls back to the current year in filenames.
"""

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple, Union

from django.utils import timezone

from reports.formatting import month_name

ALL = 'all'

# Selector values sent by the report screens
ALL_YEARS = 'all-years'
ALL_MONTHS = 'all-months'

ALL_MONTHS_LABEL = 'Semua Bulan'
ALL_YEARS_LABEL = 'Semua Tahun'


class ReportError(Exception):
    """Base class for report engine errors caused by caller input."""
    pass


class InvalidPeriodError(ReportError, ValueError):
    """Raised when a period selector value cannot be understood."""
    pass


PeriodPart = Union[int, str, None]


@dataclass(frozen=True)
class PeriodSelector:
    """
    Year/month selection of a report view.

    Months are 1-12. Use PeriodSelector.parse() for raw selector values.
    """
    year: PeriodPart = None
    month: PeriodPart = None

    def __post_init__(self):
        if not (self.year is None or self.year == ALL or
                (isinstance(self.year, int) and not isinstance(self.year, bool) and self.year > 0)):
            raise InvalidPeriodError(f"Invalid year: {self.year!r}")
        if not (self.month is None or self.month == ALL or
                (isinstance(self.month, int) and not isinstance(self.month, bool) and 1 <= self.month <= 12)):
            raise InvalidPeriodError(f"Invalid month: {self.month!r}")

    @classmethod
    def parse(cls, year=None, month=None) -> 'PeriodSelector':
        """
        Build a selector from raw values.

        Args:
            year: '2024', 2024, 'all-years'/'all', '' or None
            month: '1'..'12', 1..12, 'all-months'/'all', '' or None
        """
        return cls(
            year=cls._parse_part(year, ALL_YEARS, 'year'),
            month=cls._parse_part(month, ALL_MONTHS, 'month'),
        )

    @staticmethod
    def _parse_part(value, all_value, name) -> PeriodPart:
        if value is None:
            return None
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        text = str(value).strip()
        if not text:
            return None
        if text in (all_value, ALL):
            return ALL
        try:
            return int(text)
        except ValueError:
            raise InvalidPeriodError(f"Invalid {name}: {value!r}")

    @classmethod
    def everything(cls) -> 'PeriodSelector':
        return cls(year=ALL, month=ALL)

    @property
    def year_value(self) -> Optional[int]:
        return self.year if isinstance(self.year, int) else None

    @property
    def month_value(self) -> Optional[int]:
        return self.month if isinstance(self.month, int) else None

    @property
    def is_unfiltered(self) -> bool:
        return self.year_value is None and self.month_value is None

    def matches(self, day: date) -> bool:
        if self.year_value is not None and day.year != self.year_value:
            return False
        if self.month_value is not None and day.month != self.month_value:
            return False
        return True

    # =========================================================================
    # LABELS
    # =========================================================================

    def month_label(self) -> str:
        """Month shown in report headers ('Januari' or 'Semua Bulan')"""
        if self.month_value is None:
            return ALL_MONTHS_LABEL
        return month_name(self.month_value)

    def year_label(self) -> str:
        """Year shown in report headers ('2024', 'Semua Tahun' or current year)"""
        if self.year == ALL:
            return ALL_YEARS_LABEL
        if self.year_value is None:
            return str(timezone.localdate().year)
        return str(self.year_value)

    def filename_labels(self) -> Tuple[str, str]:
        """Month and year parts of export filenames, without spaces"""
        return (
            self.month_label().replace(' ', ''),
            self.year_label().replace(' ', ''),
        )
