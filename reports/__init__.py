"""
Reports App

Aggregation and export engine for animal health service records:
- Filter pipeline (period, free text, facility)
- Grouping engine and statistics bundle
- Medicine / case recap builder
- Export layout engine (xlsx via openpyxl, pdf via reportlab)
"""
