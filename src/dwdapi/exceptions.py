"""
Exceptions for DWD data access and decoding.

Two families matter to callers:

- ``DWDNotFoundError`` / ``DWDConnectionError``: the upstream resource could
  not be fetched at all.
- ``DWDStructuralError``: the resource arrived but its overall shape is
  unusable (missing header row, broken XML, unparseable issue time, ...).

Problems with a single row, element or field never raise; the decoders drop
or default the offending value and keep going.
"""


class DWDError(Exception):
    """Base exception for dwdapi errors."""

    kind = "internal_error"
    status_code = 500
    default_message = "Internal error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)


class DWDConnectionError(DWDError):
    """Error connecting to a DWD endpoint."""

    kind = "connection_error"
    status_code = 502
    default_message = "Could not reach the DWD open data server"


class DWDNotFoundError(DWDError):
    """The requested upstream resource does not exist."""

    kind = "not_found"
    status_code = 404
    default_message = "Resource not found"


class NoStationListingError(DWDNotFoundError):
    kind = "no_station_listing"
    default_message = "No station listing was found"


class NoForecastError(DWDNotFoundError):
    kind = "no_forecast"
    default_message = "No forecast was found for this station"


class NoReportError(DWDNotFoundError):
    kind = "no_report"
    default_message = "No report was found for this station"


class DWDStructuralError(DWDError):
    """The upstream document does not have the shape required to decode it."""

    kind = "structural_error"
    default_message = "The upstream document could not be decoded"


# weather report


class MissingHeaderRowError(DWDStructuralError):
    kind = "missing_header_row"
    default_message = "The report's CSV file didn't have a header row"


class MissingUnitRowError(DWDStructuralError):
    kind = "missing_unit_row"
    default_message = "The report's CSV file didn't have a unit row"


class UnitCountMismatchError(DWDStructuralError):
    kind = "unit_count_mismatch"
    default_message = (
        "The report's CSV didn't declare exactly one unit for each property"
    )


class MalformedRowError(DWDStructuralError):
    kind = "malformed_row"
    default_message = "The report's CSV file contained an unreadable row"


# weather forecast


class BadZipFileError(DWDStructuralError):
    kind = "bad_zip_file"
    default_message = "The forecast's zip file was invalid"


class NoZipEntryError(DWDStructuralError):
    kind = "no_zip_entry"
    default_message = "The forecast's zip file didn't contain a forecast"


class InvalidDocumentError(DWDStructuralError):
    kind = "invalid_document"
    default_message = "Couldn't read KML document"


class InvalidIssueTimeError(DWDStructuralError):
    kind = "invalid_issue_time"
    default_message = "Couldn't parse issue-time"
