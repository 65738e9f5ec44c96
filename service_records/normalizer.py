"""
Record Normalizer

Turns raw stored documents into immutable ServiceRecords for one report
snapshot:
1. Storage timestamp -> calendar date in the service time zone
2. Legacy gap filling (single caseDevelopment string, free-text dosage)
3. Schema validation through ServiceRecordSerializer

A document that fails validation is dropped from the snapshot and
logged. One corrupt document never aborts a report.
"""

import logging
import re
from datetime import date, datetime, timezone as dt_timezone
from typing import Any, Iterable, List, Mapping, NamedTuple, Optional

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_date, parse_datetime

from .records import GENERIC_DOSE_UNIT, ServiceRecord
from .serializers import ServiceRecordSerializer

logger = logging.getLogger(__name__)

# "5", "2.5 ml", "1,5ml", "10 cc/ekor"
LEGACY_DOSAGE_PATTERN = re.compile(r'^\s*(?P<value>\d+(?:[.,]\d+)?)?\s*(?P<unit>.*?)\s*$')


class StoredDocument(NamedTuple):
    """A document as handed over by the record store"""
    id: str
    data: Mapping[str, Any]
    stored_at: Any = None


def to_calendar_date(value) -> date:
    """
    Convert a storage timestamp to a calendar date.

    Accepts datetimes (aware ones are shifted to TIME_ZONE first), dates,
    epoch seconds, ISO-8601 strings and {'seconds', 'nanoseconds'}
    mappings as exported by document stores.

    Raises:
        ValueError: unparseable string or out-of-range epoch value
        TypeError: unsupported value type
    """
    if isinstance(value, datetime):
        if timezone.is_aware(value):
            return timezone.localtime(value).date()
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, Mapping):
        seconds = value.get('seconds', value.get('_seconds'))
        if seconds is None:
            raise ValueError(f"Timestamp mapping without seconds: {value!r}")
        nanoseconds = value.get('nanoseconds', value.get('_nanoseconds', 0)) or 0
        value = seconds + nanoseconds / 1e9

    if isinstance(value, (int, float)) and not isinstance(value, bool):
        try:
            moment = datetime.fromtimestamp(value, tz=dt_timezone.utc)
            return timezone.localtime(moment).date()
        except (OverflowError, OSError) as e:
            raise ValueError(f"Timestamp out of range: {value!r}") from e

    if isinstance(value, str):
        parsed = parse_datetime(value.strip())
        if parsed is not None:
            return to_calendar_date(parsed)
        parsed_date = parse_date(value.strip())
        if parsed_date is not None:
            return parsed_date
        raise ValueError(f"Unrecognised date string: {value!r}")

    raise TypeError(f"Unsupported timestamp type: {type(value).__name__}")


def split_legacy_dosage(dosage) -> tuple:
    """
    Split a free-text dosage ("2,5 ml") into (value, unit).

    Returns (None, unit) when no leading number is present, which the
    schema then rejects.
    """
    match = LEGACY_DOSAGE_PATTERN.match(str(dosage))
    number = match.group('value')
    unit = match.group('unit') or GENERIC_DOSE_UNIT
    value = float(number.replace(',', '.')) if number else None
    return value, unit


def _upgrade_treatment(treatment):
    if not isinstance(treatment, Mapping):
        return treatment
    if treatment.get('dosageValue') not in (None, '') or 'dosage' not in treatment:
        return treatment

    upgraded = {k: v for k, v in treatment.items() if k != 'dosage'}
    value, unit = split_legacy_dosage(treatment['dosage'])
    upgraded['dosageValue'] = value
    upgraded.setdefault('dosageUnit', unit)
    return upgraded


def _legacy_case_count(livestock_count) -> int:
    try:
        count = int(livestock_count)
    except (TypeError, ValueError):
        return 1
    return count if count > 0 else 1


def fill_legacy_gaps(raw: Mapping[str, Any]) -> dict:
    """
    Bring an older stored document up to the current schema.

    - Missing or empty caseDevelopments becomes a single entry: the old
      caseDevelopment status (or the default resolved status) covering
      the whole livestock count, or 1 animal when no count was stored.
    - Treatments stored with a free-text `dosage` get dosageValue and
      dosageUnit.
    """
    data = dict(raw)

    treatments = data.get('treatments')
    if isinstance(treatments, (list, tuple)):
        data['treatments'] = [_upgrade_treatment(t) for t in treatments]

    if not data.get('caseDevelopments'):
        status = settings.REPORTS['DEFAULT_CASE_STATUS']
        legacy_status = data.get('caseDevelopment')
        if isinstance(legacy_status, str) and legacy_status.strip():
            status = legacy_status.strip()
        data['caseDevelopments'] = [{
            'status': status,
            'count': _legacy_case_count(data.get('livestockCount')),
        }]

    data.pop('caseDevelopment', None)
    return data


def normalize_record(raw: Mapping[str, Any], doc_id, stored_at=None) -> Optional[ServiceRecord]:
    """
    Normalize one stored document.

    Args:
        raw: Stored key/value data
        doc_id: Storage-assigned identifier
        stored_at: Stored timestamp; falls back to raw['date']

    Returns:
        ServiceRecord, or None when the document is invalid and must be
        discarded from the snapshot
    """
    if not isinstance(raw, Mapping):
        logger.warning(f"Dropping service record {doc_id}: document data is {type(raw).__name__}, not a mapping")
        return None

    data = fill_legacy_gaps(raw)
    data['id'] = str(doc_id)

    try:
        data['date'] = to_calendar_date(stored_at if stored_at is not None else raw.get('date'))
    except (TypeError, ValueError) as e:
        logger.warning(f"Dropping service record {doc_id}: invalid date ({e})")
        return None

    serializer = ServiceRecordSerializer(data=data)
    if not serializer.is_valid():
        logger.warning(f"Dropping service record {doc_id}: {serializer.errors}")
        return None

    return serializer.to_record()


def build_snapshot(documents: Iterable) -> List[ServiceRecord]:
    """
    Normalize stored documents into a report snapshot.

    Args:
        documents: StoredDocument items or (id, data, stored_at) tuples

    Returns:
        Valid records in input order; invalid documents are left out
    """
    records = []
    dropped = 0

    for position, document in enumerate(documents):
        try:
            doc_id, raw, stored_at = document
        except (TypeError, ValueError):
            logger.warning(f"Dropping malformed stored document at position {position}: {document!r}")
            dropped += 1
            continue

        record = normalize_record(raw, doc_id, stored_at)
        if record is None:
            dropped += 1
            continue
        records.append(record)

    if dropped:
        logger.info(f"Snapshot built with {len(records)} records, {dropped} dropped")
    else:
        logger.debug(f"Snapshot built with {len(records)} records")

    return records
