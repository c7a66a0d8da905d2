"""
Inspection report generator.

Collects inspection data (sites, control points, evidence photos, narrative
sections) and renders it into a paginated A4 PDF with ReportLab.
"""
__version__ = "1.0.0"
