"""
Domain exceptions for seer.

Every error carries a machine-readable ``code`` and the HTTP status it maps
to; the API layer renders them as ``{"detail": ..., "error_type": code}``.
"""


class SeerError(Exception):
    """Base exception for seer domain errors."""

    code: str = "internal"
    status_code: int = 500

    def __init__(self, message: str, **context) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class NotFoundError(SeerError):
    """Raised when an id does not match any stored resource."""

    code = "not_found"
    status_code = 404

    def __init__(self, resource: str, resource_id) -> None:
        super().__init__(
            f"{resource} {resource_id} not found",
            resource=resource,
            resource_id=resource_id,
        )


class ValidationError(SeerError):
    code = "validation_error"
    status_code = 422


class InvalidSourceTypeError(SeerError):
    """Raised when a source type is unknown or not active for the plan."""

    code = "invalid_source_type"
    status_code = 400


class QuotaExceededError(SeerError):
    """Raised when a plan limit (e.g. max RSS sources) would be exceeded."""

    code = "quota_exceeded"
    status_code = 403


class ForbiddenError(SeerError):
    code = "forbidden"
    status_code = 403


class FetchInProgressError(SeerError):
    code = "fetch_in_progress"
    status_code = 409


class UpstreamFetchError(SeerError):
    """Raised by an adapter when a source cannot be retrieved at all.

    Recorded per source by the fetcher; never surfaced from a batch fetch.
    """

    code = "upstream_fetch_failure"
    status_code = 502

    def __init__(self, message: str, source_type: str | None = None) -> None:
        super().__init__(message, source_type=source_type)
        self.source_type = source_type


class SummarizerUnavailableError(SeerError):
    """Raised when the AI summarizer cannot produce an analysis.

    Report generation converts this into an "unavailable" summary result.
    """

    code = "summarizer_unavailable"
    status_code = 503
