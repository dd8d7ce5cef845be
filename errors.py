class ReportGeneratorError(Exception):
    """Base class for failures surfaced by the report generator."""


class AuthError(ReportGeneratorError):
    """Sign-in, sign-out or session check against Google failed."""


class ExtractionError(ReportGeneratorError):
    """The selected spreadsheet is missing the expected tabs or columns."""


class UpdateError(ReportGeneratorError):
    """Writing an athlete into the Dashboard tab failed."""


class ExportError(ReportGeneratorError):
    """Exporting the Dashboard tab as PDF failed."""


class LogAppendError(ReportGeneratorError):
    """Mirroring a log entry into the PDF_Log tab failed."""
