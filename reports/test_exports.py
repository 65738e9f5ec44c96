"""
Tests for Excel and PDF export documents.
Workbooks are read back with openpyxl to check sheets, cells and styling.
"""
import pytest
from datetime import date
from io import BytesIO

from openpyxl import load_workbook

from reports.exports import (
    PDF_CONTENT_TYPE,
    XLSX_CONTENT_TYPE,
    export_facility_workbook,
    export_recap_pdf,
    export_recap_workbook,
    render_workbook,
)
from reports.layout import RECORD_COLUMNS, SheetLayout
from reports.services.periods import ALL, PeriodSelector


def read_workbook(document):
    return load_workbook(BytesIO(document.content))


@pytest.fixture
def snapshot(make_record):
    return [
        make_record(puskeswan='Puskeswan Topoyo', officer_name='Haslim', owner_name='Pak Budi',
                    treatments=[('Penstrep', 5, 'ml')]),
        make_record(puskeswan='Puskeswan Topoyo', officer_name='Fitriani', owner_name='Bu Ani',
                    date=date(2024, 1, 20), treatments=[('Vitol', 2, 'unit')]),
        make_record(puskeswan='Puskeswan Tobadak', officer_name='Jupry', owner_name='Pak Made'),
    ]


class TestRenderWorkbook:

    def test_no_layouts_gives_single_empty_sheet(self):
        wb = load_workbook(BytesIO(render_workbook([])))
        assert wb.sheetnames == ['Laporan']

    def test_styles_and_widths(self):
        layout = SheetLayout(name='Uji')
        layout.add_title(['Judul'])
        layout.add_header(['Kolom A', 'Kolom B'])
        layout.add_row(['isi', None])
        layout.column_widths = [9, 12]

        ws = load_workbook(BytesIO(render_workbook([layout])))['Uji']

        assert ws['A1'].font.bold
        assert ws['A2'].font.bold
        assert ws['A2'].alignment.horizontal == 'center'
        assert not ws['A3'].font.bold
        assert ws['B3'].value is None
        assert ws.column_dimensions['A'].width == 9
        assert ws.column_dimensions['B'].width == 12


class TestFacilityWorkbook:

    def test_one_sheet_per_facility_in_reference_order(self, snapshot, reference):
        document = export_facility_workbook(snapshot, reference, PeriodSelector(2024, 1))

        assert document.filename == 'laporan_puskeswan_Januari_2024.xlsx'
        assert document.content_type == XLSX_CONTENT_TYPE
        wb = read_workbook(document)
        assert wb.sheetnames == ['Puskeswan Tobadak', 'Puskeswan Topoyo']

    def test_sheet_content(self, snapshot, reference):
        wb = read_workbook(export_facility_workbook(snapshot, reference, PeriodSelector(2024, 1)))
        ws = wb['Puskeswan Topoyo']

        assert ws['A1'].value == 'Nama Petugas: Fitriani'
        assert [cell.value for cell in ws[2]] == RECORD_COLUMNS
        assert ws['B3'].value == 'Bu Ani'
        assert ws['A6'].value == 'Nama Petugas: Haslim'
        assert ws['B8'].value == 'Pak Budi'
        assert ws.column_dimensions['A'].width == 12

    def test_empty_snapshot(self, reference):
        document = export_facility_workbook([], reference, PeriodSelector(ALL, ALL))
        assert document.filename == 'laporan_puskeswan_SemuaBulan_SemuaTahun.xlsx'
        assert read_workbook(document).sheetnames == ['Laporan']


class TestRecapWorkbook:

    def test_officer_sheets_then_recap(self, snapshot):
        document = export_recap_workbook(snapshot, 'Puskeswan Topoyo', PeriodSelector(2024, 1))

        assert document.filename == 'rekap_topoyo_Januari_2024.xlsx'
        wb = read_workbook(document)
        assert wb.sheetnames == ['Fitriani', 'Haslim', 'Rekap Topoyo']

    def test_recap_sheet_only(self, snapshot):
        document = export_recap_workbook(snapshot, 'Puskeswan Topoyo', PeriodSelector(2024, 1),
                                         include_officer_sheets=False)
        ws = read_workbook(document)['Rekap Topoyo']

        assert ws['A1'].value == 'REKAP KASUS'
        assert [ws.cell(row=3, column=c).value for c in range(1, 6)] == [
            'Januari', 'Topoyo', 'Sapi Bali', 'Scabies', 2,
        ]
        assert ws['A5'].value == 'REKAP OBAT'
        assert ws['B7'].value == 'Penstrep'
        assert ws['C7'].value == '5 ml'
        assert ws['B8'].value == 'Vitol'
        assert ws['C8'].value == '2 unit'

    def test_facility_without_records(self, snapshot):
        document = export_recap_workbook(snapshot, 'Puskeswan Karossa', PeriodSelector(2024, 1))
        wb = read_workbook(document)
        assert wb.sheetnames == ['Rekap Karossa']
        assert wb['Rekap Karossa']['A1'].value == 'REKAP KASUS'


class TestRecapPdf:

    def test_pdf_document(self, snapshot):
        document = export_recap_pdf(snapshot, 'Puskeswan Topoyo', PeriodSelector(2024, ALL))

        assert document.filename == 'rekap_topoyo_SemuaBulan_2024.pdf'
        assert document.content_type == PDF_CONTENT_TYPE
        assert document.content.startswith(b'%PDF')

    def test_empty_recap_still_renders(self):
        document = export_recap_pdf([], 'Puskeswan Topoyo', PeriodSelector(2024, 1))
        assert document.content.startswith(b'%PDF')
