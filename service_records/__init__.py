"""
Service Records App

Canonical shape of a field animal-health service event and the
normalizer that turns raw stored documents into it:
- ServiceRecord, Treatment, CaseDevelopmentEntry (immutable records)
- ServiceRecordSerializer (schema for stored documents)
- normalize_record / build_snapshot (report snapshot boundary)
"""
