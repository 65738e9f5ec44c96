"""
Report Exports

Generates Excel and PDF documents from sheet layouts and recaps.

Every export returns an ExportDocument (filename, content type, bytes);
serving or saving it is the caller's concern. An empty snapshot still
produces a valid document.
"""

import logging
from dataclasses import dataclass
from io import BytesIO
from typing import Iterable, List, Optional, Set
from xml.sax.saxutils import escape

from django.utils import timezone
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font
from openpyxl.utils import get_column_letter
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from reports.formatting import format_dose, plain_number
from reports.layout import (
    CASE_RECAP_COLUMNS,
    MEDICINE_RECAP_COLUMNS,
    SheetLayout,
    build_facility_layouts,
    build_officer_layouts,
    build_recap_layout,
    export_filename,
    facility_short_name,
    recap_kind,
    unique_sheet_name,
)
from reports.services.filters import filter_by_facility
from reports.services.periods import PeriodSelector
from reports.services.recap import RecapData, build_recap
from service_records.records import ServiceRecord
from service_records.reference import ReferenceLists

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
PDF_CONTENT_TYPE = 'application/pdf'

FACILITY_REPORT_KIND = 'laporan_puskeswan'
EMPTY_SHEET_NAME = 'Laporan'


@dataclass(frozen=True)
class ExportDocument:
    filename: str
    content_type: str
    content: bytes


# =============================================================================
# EXCEL
# =============================================================================

def render_workbook(layouts: Iterable[SheetLayout]) -> bytes:
    """
    Write sheet layouts to an xlsx workbook.

    With no layouts the workbook keeps a single empty sheet.
    """
    wb = Workbook()
    default_sheet = wb.active
    default_sheet.title = EMPTY_SHEET_NAME

    header_font = Font(bold=True)
    title_font = Font(bold=True, size=12)

    sheet_count = 0
    for layout in layouts:
        if sheet_count == 0:
            ws = default_sheet
            ws.title = layout.name
        else:
            ws = wb.create_sheet(layout.name)
        sheet_count += 1

        header_rows = set(layout.header_rows)
        title_rows = set(layout.title_rows)

        for row_index, values in enumerate(layout.rows, start=1):
            for col_index, value in enumerate(values, start=1):
                if value is None:
                    continue
                cell = ws.cell(row=row_index, column=col_index, value=value)
                if row_index - 1 in header_rows:
                    cell.font = header_font
                    cell.alignment = Alignment(horizontal='center')
                elif row_index - 1 in title_rows:
                    cell.font = title_font

        for col_index, width in enumerate(layout.column_widths, start=1):
            ws.column_dimensions[get_column_letter(col_index)].width = width

    output = BytesIO()
    wb.save(output)
    output.seek(0)
    logger.debug(f"Rendered workbook with {sheet_count} sheets")
    return output.getvalue()


def export_facility_workbook(records: Iterable[ServiceRecord], reference: ReferenceLists,
                             period: PeriodSelector) -> ExportDocument:
    """
    Flat export of a filtered snapshot, one sheet per facility.

    Args:
        records: Snapshot already filtered to `period`
        reference: Supplies the facility order
        period: Used for the filename
    """
    layouts = build_facility_layouts(records, reference)
    if not layouts:
        logger.info("Facility export has no records; writing an empty workbook")
    return ExportDocument(
        filename=export_filename(FACILITY_REPORT_KIND, period),
        content_type=XLSX_CONTENT_TYPE,
        content=render_workbook(layouts),
    )


def export_recap_workbook(records: Iterable[ServiceRecord], facility: str,
                          period: PeriodSelector, include_officer_sheets: bool = True) -> ExportDocument:
    """
    Recap workbook of one facility.

    Officer sheets (one per officer, official header block) come first,
    followed by the recap sheet with the case and medicine sections.

    Args:
        records: Snapshot already filtered to `period`; other
                 facilities' records are ignored
        facility: Puskeswan name
        period: Labels the sheets and the filename
    """
    facility_records = filter_by_facility(records, facility)
    recap = build_recap(facility_records)

    used_names: Set[str] = set()
    layouts: List[SheetLayout] = []
    if include_officer_sheets:
        layouts.extend(build_officer_layouts(facility_records, facility, period, used_names))

    recap_sheet_name = unique_sheet_name(f"Rekap {facility_short_name(facility)}", used_names)
    layouts.append(build_recap_layout(recap, period, facility, sheet_name=recap_sheet_name))

    return ExportDocument(
        filename=export_filename(recap_kind(facility), period),
        content_type=XLSX_CONTENT_TYPE,
        content=render_workbook(layouts),
    )


# =============================================================================
# PDF
# =============================================================================

def render_recap_pdf(recap: RecapData, period: PeriodSelector, facility: str) -> bytes:
    """Recap of one facility as an A4 PDF, same ordering as the recap sheet"""
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1*cm,
        leftMargin=1*cm,
        topMargin=1.5*cm,
        bottomMargin=1.5*cm,
        title=f"Rekap {facility}",
    )

    styles = getSampleStyleSheet()
    styles.add(ParagraphStyle(
        name='MainTitle',
        parent=styles['Heading1'],
        fontSize=16,
        spaceAfter=12,
        alignment=TA_CENTER,
        textColor=colors.HexColor('#1B5E20')
    ))
    styles.add(ParagraphStyle(
        name='SectionTitle',
        parent=styles['Heading2'],
        fontSize=13,
        spaceBefore=12,
        spaceAfter=8,
        textColor=colors.HexColor('#2E7D32')
    ))
    styles.add(ParagraphStyle(
        name='SubInfo',
        parent=styles['Normal'],
        fontSize=9,
        alignment=TA_CENTER,
        textColor=colors.grey
    ))

    table_style = TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#2E7D32')),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
    ])

    elements = [
        Paragraph(escape(f"Rekap {facility}"), styles['MainTitle']),
        Paragraph(
            escape(f"Bulan: {period.month_label()} | Tahun: {period.year_label()} | "
                   f"Dibuat: {timezone.localtime().strftime('%d-%m-%Y %H:%M')}"),
            styles['SubInfo']
        ),
        Spacer(1, 12),
        Paragraph("Rekap Kasus", styles['SectionTitle']),
    ]

    case_data = [CASE_RECAP_COLUMNS[1:]]
    for village, species, diagnosis, count in recap.case_rows():
        case_data.append([village, species, diagnosis, str(plain_number(count))])
    case_table = Table(case_data, repeatRows=1)
    case_table.setStyle(table_style)
    elements.append(case_table)

    elements.append(Paragraph("Rekap Obat", styles['SectionTitle']))
    medicine_data = [MEDICINE_RECAP_COLUMNS[1:]]
    for name, total in recap.medicine_rows():
        medicine_data.append([name, f"{format_dose(total.count)} {total.unit}".strip()])
    medicine_table = Table(medicine_data, repeatRows=1)
    medicine_table.setStyle(table_style)
    elements.append(medicine_table)

    doc.build(elements)
    return buffer.getvalue()


def export_recap_pdf(records: Iterable[ServiceRecord], facility: str,
                     period: PeriodSelector, recap: Optional[RecapData] = None) -> ExportDocument:
    """PDF recap of one facility; pass `recap` to reuse an already built one"""
    if recap is None:
        recap = build_recap(filter_by_facility(records, facility))
    return ExportDocument(
        filename=export_filename(recap_kind(facility), period, extension='pdf'),
        content_type=PDF_CONTENT_TYPE,
        content=render_recap_pdf(recap, period, facility),
    )
