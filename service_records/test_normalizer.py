"""
Tests for the record normalizer: timestamp conversion, legacy gap
filling, schema validation and snapshot building.
"""
import logging
from datetime import date, datetime, timezone as dt_timezone

import pytest

from service_records.normalizer import (
    StoredDocument,
    build_snapshot,
    fill_legacy_gaps,
    normalize_record,
    split_legacy_dosage,
    to_calendar_date,
)
from service_records.records import CaseDevelopmentEntry, ServiceRecord, Treatment

# 2024-01-31 20:00 UTC, already 1 February in Sulawesi (UTC+8)
LATE_EVENING_UTC = 1706731200


class TestToCalendarDate:
    """Storage timestamps become calendar dates in the service time zone"""

    def test_aware_datetime_uses_local_date(self):
        moment = datetime(2024, 1, 31, 20, 0, tzinfo=dt_timezone.utc)
        assert to_calendar_date(moment) == date(2024, 2, 1)

    def test_naive_datetime_keeps_its_date(self):
        assert to_calendar_date(datetime(2024, 1, 31, 20, 0)) == date(2024, 1, 31)

    def test_date_passes_through(self):
        assert to_calendar_date(date(2024, 5, 17)) == date(2024, 5, 17)

    def test_epoch_seconds(self):
        assert to_calendar_date(LATE_EVENING_UTC) == date(2024, 2, 1)

    def test_timestamp_mapping(self):
        assert to_calendar_date({'seconds': LATE_EVENING_UTC, 'nanoseconds': 0}) == date(2024, 2, 1)
        assert to_calendar_date({'_seconds': LATE_EVENING_UTC, '_nanoseconds': 5}) == date(2024, 2, 1)

    def test_iso_strings(self):
        assert to_calendar_date('2024-03-05') == date(2024, 3, 5)
        assert to_calendar_date('2024-03-05T10:00:00+00:00') == date(2024, 3, 5)

    def test_unparseable_string_raises(self):
        with pytest.raises(ValueError):
            to_calendar_date('kemarin')

    def test_unsupported_type_raises(self):
        with pytest.raises(TypeError):
            to_calendar_date(None)

    @pytest.mark.parametrize('value', [10 ** 18, -(10 ** 18), {'seconds': 10 ** 18}])
    def test_out_of_range_epoch_raises_value_error(self, value):
        with pytest.raises(ValueError):
            to_calendar_date(value)


class TestLegacyGaps:
    """Older documents are brought up to the current schema"""

    def test_missing_breakdown_uses_legacy_status_and_livestock_count(self, raw_document):
        data = fill_legacy_gaps(raw_document(caseDevelopments=None, caseDevelopment='Mati'))
        assert data['caseDevelopments'] == [{'status': 'Mati', 'count': 3}]
        assert 'caseDevelopment' not in data

    def test_missing_breakdown_defaults_to_resolved(self, raw_document):
        data = fill_legacy_gaps(raw_document(caseDevelopments=[]))
        assert data['caseDevelopments'] == [{'status': 'Sembuh', 'count': 3}]

    def test_blank_legacy_status_defaults_to_resolved(self, raw_document):
        data = fill_legacy_gaps(raw_document(caseDevelopments=None, caseDevelopment='  '))
        assert data['caseDevelopments'][0]['status'] == 'Sembuh'

    @pytest.mark.parametrize('livestock_count', [None, 0, 'abc'])
    def test_missing_livestock_count_counts_one(self, raw_document, livestock_count):
        document = raw_document(caseDevelopments=None)
        document['livestockCount'] = livestock_count
        data = fill_legacy_gaps(document)
        assert data['caseDevelopments'][0]['count'] == 1

    def test_existing_breakdown_untouched(self, raw_document):
        document = raw_document()
        data = fill_legacy_gaps(document)
        assert data['caseDevelopments'] == document['caseDevelopments']

    def test_source_document_not_mutated(self, raw_document):
        document = raw_document(caseDevelopments=None)
        fill_legacy_gaps(document)
        assert 'caseDevelopments' not in document

    def test_free_text_dosage_is_split(self, raw_document):
        document = raw_document(treatments=[
            {'medicineType': 'Vitamin', 'medicineName': 'B12', 'dosage': '2,5 ml'},
        ])
        treatment = fill_legacy_gaps(document)['treatments'][0]
        assert treatment['dosageValue'] == 2.5
        assert treatment['dosageUnit'] == 'ml'
        assert 'dosage' not in treatment

    @pytest.mark.parametrize('dosage, expected', [
        ('10', (10.0, 'unit')),
        ('1.5cc', (1.5, 'cc')),
        (' 3 ml ', (3.0, 'ml')),
        ('ml', (None, 'ml')),
        (4, (4.0, 'unit')),
    ])
    def test_split_legacy_dosage(self, dosage, expected):
        assert split_legacy_dosage(dosage) == expected


class TestNormalizeRecord:
    """Valid documents become records; invalid ones are dropped and logged"""

    def test_valid_document(self, raw_document):
        record = normalize_record(raw_document(), 'doc-1', date(2024, 1, 15))

        assert record == ServiceRecord(
            id='doc-1',
            date=date(2024, 1, 15),
            puskeswan='Puskeswan Topoyo',
            officer_name='Haslim',
            owner_name='Pak Budi',
            owner_address='Topoyo',
            livestock_type='Sapi Bali',
            livestock_count=3,
            clinical_symptoms='Demam, nafsu makan turun',
            diagnosis='Scabies',
            treatment_type='Pengobatan',
            treatments=(Treatment('Antibiotik', 'Penstrep', 5.0, 'ml'),),
            case_developments=(
                CaseDevelopmentEntry('Sembuh', 2),
                CaseDevelopmentEntry('Tidak Sembuh', 1),
            ),
            case_id='ISK-001',
            nik='7606010101800001',
            phone_number='081234567890',
        )

    def test_date_falls_back_to_document_field(self, raw_document):
        record = normalize_record(raw_document(date='2024-06-01'), 'doc-1')
        assert record.date == date(2024, 6, 1)

    def test_legacy_document_is_normalized(self, raw_document):
        document = raw_document(
            caseDevelopments=None,
            caseDevelopment='Sembuh',
            treatments=[{'medicineName': 'Vitol', 'dosage': '4 ml'}],
        )
        record = normalize_record(document, 'legacy-1', LATE_EVENING_UTC)

        assert record.date == date(2024, 2, 1)
        assert record.case_developments == (CaseDevelopmentEntry('Sembuh', 3),)
        assert record.treatments == (Treatment('', 'Vitol', 4.0, 'ml'),)

    def test_missing_unit_becomes_generic(self, raw_document):
        document = raw_document(treatments=[
            {'medicineName': 'Vitol', 'dosageValue': 2, 'dosageUnit': ''},
        ])
        record = normalize_record(document, 'doc-1', date(2024, 1, 1))
        assert record.treatments[0].dosage_unit == 'unit'

    def test_missing_required_field_is_dropped(self, raw_document, caplog):
        with caplog.at_level(logging.WARNING, logger='service_records.normalizer'):
            record = normalize_record(raw_document(ownerName=None), 'bad-1', date(2024, 1, 1))

        assert record is None
        assert 'bad-1' in caplog.text

    def test_case_total_above_livestock_count_is_dropped(self, raw_document):
        document = raw_document(caseDevelopments=[
            {'status': 'Sembuh', 'count': 3},
            {'status': 'Mati', 'count': 1},
        ])
        assert normalize_record(document, 'bad-2', date(2024, 1, 1)) is None

    def test_record_without_treatments_is_dropped(self, raw_document):
        assert normalize_record(raw_document(treatments=[]), 'bad-3', date(2024, 1, 1)) is None

    def test_non_positive_dose_is_dropped(self, raw_document):
        document = raw_document(treatments=[
            {'medicineName': 'Penstrep', 'dosageValue': 0, 'dosageUnit': 'ml'},
        ])
        assert normalize_record(document, 'bad-4', date(2024, 1, 1)) is None

    def test_zero_livestock_count_is_dropped(self, raw_document):
        document = raw_document(livestockCount=0, caseDevelopments=None)
        assert normalize_record(document, 'bad-5', date(2024, 1, 1)) is None

    def test_non_mapping_document_is_dropped(self, caplog):
        with caplog.at_level(logging.WARNING, logger='service_records.normalizer'):
            record = normalize_record(None, 'bad-7', date(2024, 1, 1))

        assert record is None
        assert 'bad-7' in caplog.text

    def test_invalid_date_is_dropped(self, raw_document, caplog):
        with caplog.at_level(logging.WARNING, logger='service_records.normalizer'):
            record = normalize_record(raw_document(), 'bad-6', 'bukan tanggal')

        assert record is None
        assert 'bad-6' in caplog.text


class TestBuildSnapshot:
    """One corrupt document never blocks the others"""

    def test_invalid_documents_are_skipped(self, raw_document):
        documents = [
            StoredDocument('a', raw_document(ownerName='Ani'), date(2024, 1, 1)),
            StoredDocument('b', raw_document(diagnosis=None), date(2024, 1, 2)),
            ('c', raw_document(ownerName='Cici'), date(2024, 1, 3)),
        ]

        records = build_snapshot(documents)

        assert [r.id for r in records] == ['a', 'c']
        assert [r.owner_name for r in records] == ['Ani', 'Cici']

    def test_empty_input(self):
        assert build_snapshot([]) == []

    def test_non_mapping_data_is_skipped(self, raw_document, caplog):
        documents = [
            ('none', None, date(2024, 1, 1)),
            ('list', ['not', 'a', 'document'], date(2024, 1, 1)),
            ('ok', raw_document(), date(2024, 1, 1)),
        ]

        with caplog.at_level(logging.WARNING, logger='service_records.normalizer'):
            records = build_snapshot(documents)

        assert [r.id for r in records] == ['ok']
        assert 'none' in caplog.text
        assert 'list' in caplog.text

    def test_malformed_items_are_skipped(self, raw_document):
        documents = [
            None,
            ('too', 'short'),
            StoredDocument('ok', raw_document(), date(2024, 1, 1)),
        ]
        assert [r.id for r in build_snapshot(documents)] == ['ok']

    def test_out_of_range_timestamp_is_skipped(self, raw_document):
        documents = [
            ('bad', raw_document(), {'seconds': 10 ** 18}),
            ('ok', raw_document(), date(2024, 1, 1)),
        ]
        assert [r.id for r in build_snapshot(documents)] == ['ok']
