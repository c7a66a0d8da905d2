"""Exception hierarchy for the report generator."""


class InspectionReportError(Exception):
    """Base class for all report generator errors."""


class ReportStructureError(InspectionReportError, TypeError):
    """Report data is not shaped as a Report. Fatal: the render aborts."""


class InvalidReportFile(InspectionReportError, ValueError):
    """An imported JSON file could not be read as a report."""

    def __init__(self, message: str = "Fichier JSON invalide."):
        super().__init__(message)


class ImageDecodeError(InspectionReportError, ValueError):
    """An image reference could not be decoded into an embeddable image."""


class UnsupportedImageError(InspectionReportError, ValueError):
    """An uploaded file is not an accepted image (format or size)."""
