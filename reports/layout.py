"""
Export Layout Engine

Lays out records and recaps as sheet grids before anything is written to
a file format. A SheetLayout is plain data (rows of cell values plus
column widths), so ordering, spacing and sizing rules can be checked
without opening a workbook.

Layouts:
1. Facility sheets - one sheet per Puskeswan, records grouped by officer
2. Recap sheet - case recap section, blank row, medicine recap section
3. Officer sheets - one sheet per officer with the official header block
"""

import re
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Set, Tuple

from django.conf import settings
from django.utils.text import slugify

from reports.formatting import format_dose, plain_number, sheet_date
from reports.services.periods import PeriodSelector
from reports.services.recap import RecapData
from service_records.records import ServiceRecord
from service_records.reference import ReferenceLists

MAX_SHEET_NAME_LENGTH = 31
ILLEGAL_SHEET_CHARACTERS = re.compile(r'[/\\?*:\[\]]')

# Blank rows between two officer groups of a facility sheet
OFFICER_GROUP_SPACING = 2
COLUMN_PADDING = 2

RECORD_COLUMNS = [
    'Tanggal',
    'Nama Pemilik',
    'Alamat Pemilik',
    'Jenis Ternak',
    'Sindrom',
    'Diagnosa',
    'Jenis Penanganan',
    'Obat yang Digunakan',
    'Dosis',
    'Jumlah Ternak',
    'Perkembangan Kasus',
    'ID Isikhnas',
]

CASE_RECAP_TITLE = 'REKAP KASUS'
CASE_RECAP_COLUMNS = ['Bulan', 'Desa', 'Jenis Hewan', 'Diagnosa', 'Jumlah Kasus']

MEDICINE_RECAP_TITLE = 'REKAP OBAT'
MEDICINE_RECAP_COLUMNS = ['Bulan', 'Nama Obat', 'Total Dosis']


@dataclass
class SheetLayout:
    """
    One sheet of an export document.

    rows: cell values per row; [] is a blank row, None a blank cell
    header_rows / title_rows: row indexes rendered in bold
    """
    name: str
    rows: List[List] = field(default_factory=list)
    column_widths: List[int] = field(default_factory=list)
    header_rows: List[int] = field(default_factory=list)
    title_rows: List[int] = field(default_factory=list)

    def add_row(self, values: Sequence = ()) -> int:
        self.rows.append(list(values))
        return len(self.rows) - 1

    def add_header(self, values: Sequence) -> int:
        index = self.add_row(values)
        self.header_rows.append(index)
        return index

    def add_title(self, values: Sequence) -> int:
        index = self.add_row(values)
        self.title_rows.append(index)
        return index

    def add_blank_rows(self, count: int):
        for _ in range(count):
            self.add_row()


# =============================================================================
# NAMING
# =============================================================================

def sanitize_sheet_name(label: str) -> str:
    """Strip / \\ ? * : [ ] and cut to the 31 characters a sheet name allows"""
    return ILLEGAL_SHEET_CHARACTERS.sub('', label)[:MAX_SHEET_NAME_LENGTH]


def unique_sheet_name(label: str, used: Set[str]) -> str:
    """Sanitized name not yet in `used` (suffixing ' (2)', ' (3)', ...)"""
    base = sanitize_sheet_name(label) or 'Sheet'
    name = base
    number = 2
    while name.lower() in used:
        suffix = f" ({number})"
        name = base[:MAX_SHEET_NAME_LENGTH - len(suffix)] + suffix
        number += 1
    used.add(name.lower())
    return name


def facility_short_name(facility: str) -> str:
    """'Puskeswan Topoyo' -> 'Topoyo'"""
    return re.sub(r'^puskeswan\s+', '', facility.strip(), flags=re.IGNORECASE)


def export_filename(kind: str, period: PeriodSelector, extension: str = 'xlsx') -> str:
    """
    '{kind}_{month}_{year}.{ext}', e.g. 'rekap_topoyo_Januari_2024.xlsx'.

    Month falls back to 'SemuaBulan'; year to 'SemuaTahun' for all years
    or to the current year when none was selected.
    """
    month_label, year_label = period.filename_labels()
    return f"{kind}_{month_label}_{year_label}.{extension}"


def recap_kind(facility: str) -> str:
    return 'rekap_' + slugify(facility_short_name(facility)).replace('-', '_')


# =============================================================================
# SIZING
# =============================================================================

def cell_text(value) -> str:
    if value is None:
        return ''
    return str(plain_number(value))


def column_widths(header: Sequence[str], rows: Iterable[Sequence]) -> List[int]:
    """max(header length, longest cell in the column) + 2, per column"""
    widths = [len(str(title)) for title in header]
    for row in rows:
        for index, value in enumerate(row):
            length = len(cell_text(value))
            if index >= len(widths):
                widths.append(length)
            elif length > widths[index]:
                widths[index] = length
    return [width + COLUMN_PADDING for width in widths]


def merge_widths(*width_lists: Sequence[int]) -> List[int]:
    merged: List[int] = []
    for widths in width_lists:
        for index, width in enumerate(widths):
            if index >= len(merged):
                merged.append(width)
            else:
                merged[index] = max(merged[index], width)
    return merged


# =============================================================================
# RECORD ROWS
# =============================================================================

def record_row(record: ServiceRecord) -> List:
    return [
        sheet_date(record.date),
        record.owner_name,
        record.owner_address,
        record.livestock_type,
        record.clinical_symptoms,
        record.diagnosis,
        record.treatment_type,
        record.medicine_names,
        record.dose_labels,
        record.livestock_count,
        record.case_development_summary,
        record.case_id,
    ]


def order_facilities(records: Iterable[ServiceRecord], reference: ReferenceLists) -> List[str]:
    """Reference order first, then unlisted facilities alphabetically"""
    present = {record.puskeswan for record in records}
    ordered = [facility for facility in reference.facilities if facility in present]
    extra = sorted(present.difference(reference.facilities))
    return ordered + extra


def group_by_officer(records: Iterable[ServiceRecord]) -> List[Tuple[str, List[ServiceRecord]]]:
    """Records sorted by officer name then date, grouped per officer"""
    ordered = sorted(records, key=lambda record: (record.officer_name, record.date))
    groups: List[Tuple[str, List[ServiceRecord]]] = []
    for record in ordered:
        if not groups or groups[-1][0] != record.officer_name:
            groups.append((record.officer_name, []))
        groups[-1][1].append(record)
    return groups


# =============================================================================
# FACILITY SHEETS
# =============================================================================

def build_facility_layout(facility: str, records: Sequence[ServiceRecord], sheet_name: Optional[str] = None) -> SheetLayout:
    """
    One facility sheet.

    Each officer group is an officer header row, the column header row
    and the data rows, followed by two blank spacer rows.
    """
    layout = SheetLayout(name=sheet_name or sanitize_sheet_name(facility))
    data_rows = []

    for officer_name, officer_records in group_by_officer(records):
        layout.add_title([f"Nama Petugas: {officer_name}"])
        layout.add_header(RECORD_COLUMNS)
        for record in officer_records:
            row = record_row(record)
            layout.add_row(row)
            data_rows.append(row)
        layout.add_blank_rows(OFFICER_GROUP_SPACING)

    layout.column_widths = column_widths(RECORD_COLUMNS, data_rows)
    return layout


def build_facility_layouts(records: Iterable[ServiceRecord], reference: ReferenceLists) -> List[SheetLayout]:
    """
    Flat export: one sheet per facility with records.

    Facilities follow the reference order; facilities without records
    get no sheet.
    """
    records = list(records)
    by_facility: Dict[str, List[ServiceRecord]] = {}
    for record in records:
        by_facility.setdefault(record.puskeswan, []).append(record)

    used_names: Set[str] = set()
    layouts = []
    for facility in order_facilities(records, reference):
        facility_records = by_facility.get(facility, [])
        if not facility_records:
            continue
        name = unique_sheet_name(facility, used_names)
        layouts.append(build_facility_layout(facility, facility_records, sheet_name=name))
    return layouts


# =============================================================================
# RECAP SHEET
# =============================================================================

def case_recap_rows(recap: RecapData, month_label: str) -> List[List]:
    return [
        [month_label, village, species, diagnosis, plain_number(count)]
        for village, species, diagnosis, count in recap.case_rows()
    ]


def medicine_recap_rows(recap: RecapData, month_label: str) -> List[List]:
    return [
        [month_label, name, f"{format_dose(total.count)} {total.unit}".strip()]
        for name, total in recap.medicine_rows()
    ]


def build_recap_layout(recap: RecapData, period: PeriodSelector, facility: str,
                       sheet_name: Optional[str] = None) -> SheetLayout:
    """
    Recap sheet: case section, one blank row, medicine section.

    Case rows are ordered by village, species, diagnosis; medicine rows
    by name. Both sections are present even when empty.
    """
    month_label = period.month_label()
    layout = SheetLayout(name=sheet_name or sanitize_sheet_name(f"Rekap {facility_short_name(facility)}"))

    case_rows = case_recap_rows(recap, month_label)
    layout.add_title([CASE_RECAP_TITLE])
    layout.add_header(CASE_RECAP_COLUMNS)
    for row in case_rows:
        layout.add_row(row)

    layout.add_blank_rows(1)

    medicine_rows = medicine_recap_rows(recap, month_label)
    layout.add_title([MEDICINE_RECAP_TITLE])
    layout.add_header(MEDICINE_RECAP_COLUMNS)
    for row in medicine_rows:
        layout.add_row(row)

    layout.column_widths = merge_widths(
        column_widths(CASE_RECAP_COLUMNS, case_rows),
        column_widths(MEDICINE_RECAP_COLUMNS, medicine_rows),
    )
    return layout


# =============================================================================
# OFFICER SHEETS
# =============================================================================

def officer_header_block(facility: str, officer_name: str, period: PeriodSelector) -> List[List]:
    report_settings = settings.REPORTS
    return [
        [None, None, report_settings['REGENCY_NAME']],
        [None, None, report_settings['AGENCY_NAME']],
        [None, None, report_settings['REPORT_TITLE']],
        [],
        [],
        ['Kecamatan', f": {facility_short_name(facility)}"],
        ['Bulan', f": {period.month_label()}"],
        ['Tahun', f": {period.year_label()}"],
        [],
        ['Nama Petugas', f": {officer_name}"],
        [],
    ]


def build_officer_layouts(records: Iterable[ServiceRecord], facility: str,
                          period: PeriodSelector, used_names: Optional[Set[str]] = None) -> List[SheetLayout]:
    """
    One sheet per officer of a facility, officers alphabetically.

    Each sheet opens with the official header block, then the column
    header and the officer's records by date.
    """
    used_names = used_names if used_names is not None else set()
    layouts = []

    for officer_name, officer_records in group_by_officer(records):
        layout = SheetLayout(name=unique_sheet_name(officer_name, used_names))
        header_block = officer_header_block(facility, officer_name, period)
        for index, row in enumerate(header_block):
            if index < 3:
                layout.add_title(row)
            else:
                layout.add_row(row)

        layout.add_header(RECORD_COLUMNS)
        data_rows = [record_row(record) for record in officer_records]
        for row in data_rows:
            layout.add_row(row)

        layout.column_widths = column_widths(RECORD_COLUMNS, data_rows)
        layouts.append(layout)

    return layouts
