"""
Custom exceptions for SiteAudit
Provides structured error handling across all pipeline stages
"""
from typing import Any, Dict, Optional


class SiteAuditError(Exception):
    """Base exception for all SiteAudit errors"""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON output"""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(SiteAuditError):
    """Raised when input validation fails"""

    def __init__(self, message: str, field: Optional[str] = None, **details):
        super().__init__(
            message=message,
            error_code="VALIDATION_ERROR",
            details={"field": field, **details} if field else details,
        )


class FetchFailure(SiteAuditError):
    """Neither the lightweight fetch nor the browser render produced usable HTML"""

    def __init__(self, url: str, cause: Optional[BaseException] = None, **details):
        message = f"Unable to retrieve HTML for {url}"
        if cause is not None:
            message += f": {cause}"
        super().__init__(
            message=message,
            error_code="FETCH_FAILURE",
            details={"url": url, "cause": repr(cause) if cause else None, **details},
        )
        self.url = url
        self.cause = cause


class CouldNotFetch(FetchFailure):
    """Raised by the fetch layer when both fetch strategies fail"""


class RenderTimeout(SiteAuditError):
    """Browser navigation exceeded its bound; partial content may still be usable"""

    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(
            message=f"Render of {url} exceeded {timeout_seconds}s",
            error_code="RENDER_TIMEOUT",
            details={"url": url, "timeout_seconds": timeout_seconds},
        )


class PartialExtractionFailure(SiteAuditError):
    """A single extractor failed; recovered locally with a neutral default"""

    def __init__(self, extractor: str, message: str, **details):
        super().__init__(
            message=f"{extractor}: {message}",
            error_code="PARTIAL_EXTRACTION_FAILURE",
            details={"extractor": extractor, **details},
        )
        self.extractor = extractor


class AnalysisTimeout(SiteAuditError):
    """Raised when a caller-side timeout expires before the analysis completes"""

    def __init__(self, url: str, timeout_seconds: float):
        super().__init__(
            message=f"Analysis of {url} did not complete within {timeout_seconds}s",
            error_code="ANALYSIS_TIMEOUT",
            details={"url": url, "timeout_seconds": timeout_seconds},
        )

