"""Shared exception hierarchy for revenue reporting services.

Every error carries the HTTP status it maps to and the message shown to
the caller. Causes are logged server-side; messages never leak them.
"""


class ReportError(Exception):
    """Base exception for the reporting pipeline."""

    status_code: int = 500
    message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


# ── Access ────────────────────────────────────────────────────────────────────


class AuthenticationRequiredError(ReportError):
    """No valid session / token was presented."""

    status_code = 401
    message = "Unauthorized"


class AuthorizationDeniedError(ReportError):
    """Authenticated caller is not an administrator."""

    status_code = 403
    message = "Forbidden: Admin access required"


# ── Request ───────────────────────────────────────────────────────────────────


class InvalidTimeRangeError(ReportError):
    """Explicit bounds could not be parsed or are inverted."""

    status_code = 400
    message = "Invalid date range"


class UnsupportedFormatError(ReportError):
    """Requested export format is not known."""

    status_code = 400
    message = "Unsupported export format"


class UnsupportedCapabilityError(ReportError):
    """Requested export format is known but not implemented."""

    status_code = 501
    message = "PDF export is not implemented in this example"


class ReportTooLargeError(ReportError):
    """Report would exceed the configured row ceiling."""

    status_code = 413

    def __init__(self, limit: int) -> None:
        self.limit = limit
        super().__init__(
            f"Report exceeds the maximum of {limit} rows; narrow the date range"
        )


# ── Store ─────────────────────────────────────────────────────────────────────


class RecordSourceError(ReportError):
    """A record store query failed. ``detail`` is for logs only."""

    status_code = 500
    message = "Internal server error"

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__()

    def __str__(self) -> str:
        return self.detail
