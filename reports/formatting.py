"""
Locale-aware labels used across reports.

Everything is rendered in the report locale (settings.REPORTS['LOCALE'],
Indonesian by default) through Django's translation and format machinery,
independent of the language active for the current request.
"""

from datetime import date

from django.conf import settings
from django.utils import dateformat, translation
from django.utils.formats import number_format

# Search abbreviations of the records screen; Django's id catalog renders August as 'Agu'
SHORT_MONTH_NAMES = {
    'id': ['Jan', 'Feb', 'Mar', 'Apr', 'Mei', 'Jun', 'Jul', 'Agt', 'Sep', 'Okt', 'Nov', 'Des'],
}


def report_locale() -> str:
    return settings.REPORTS['LOCALE']


def month_name(month: int) -> str:
    """Full month name, e.g. 3 -> 'Maret'"""
    with translation.override(report_locale()):
        return dateformat.format(date(2000, month, 1), 'F')


def month_year_label(value: date) -> str:
    """'Januari 2024' style label used for monthly grouping"""
    with translation.override(report_locale()):
        return dateformat.format(value, 'F Y')


def short_date_label(value: date) -> str:
    """'05 Jan 2024' style label used by the free-text filter"""
    abbreviations = SHORT_MONTH_NAMES.get(report_locale())
    if abbreviations:
        return f"{value.day:02d} {abbreviations[value.month - 1]} {value.year}"
    with translation.override(report_locale()):
        return dateformat.format(value, 'd M Y')


def sheet_date(value: date) -> str:
    return value.strftime('%d-%m-%Y')


def plain_number(value):
    """Drop the fractional part of whole floats (8.0 -> 8)"""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def format_dose(value) -> str:
    """
    Dose total rounded to 2 decimals with locale thousands grouping.

    format_dose(1234.5) -> '1.234,5', format_dose(8.0) -> '8'
    """
    rounded = plain_number(round(float(value), 2))
    with translation.override(report_locale()):
        return number_format(rounded, use_l10n=True, force_grouping=True)
