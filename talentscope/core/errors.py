"""Error taxonomy shared by aggregation, interpretation, and scoring."""


class TalentScopeError(Exception):
    """Base class for every error raised by the core."""


class NotFound(TalentScopeError):
    """The requested candidate identity (or repository) does not exist upstream."""


class UpstreamUnavailable(TalentScopeError):
    """Transport failure or rate limiting from the code-hosting platform."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PartialAggregationFailure(TalentScopeError):
    """A non-critical sub-fetch failed. Absorbed by the aggregator, never raised to callers."""

    def __init__(self, handle: str, source: str, cause: BaseException) -> None:
        super().__init__(f"{source} unavailable for '{handle}': {cause}")
        self.handle = handle
        self.source = source
        self.cause = cause


class MalformedReasoningOutput(TalentScopeError):
    """The reasoning collaborator returned text that failed parsing or validation."""

    def __init__(self, reason: str, raw: str = "") -> None:
        excerpt = raw.strip()[:200]
        message = f"Malformed reasoning output: {reason}"
        if excerpt:
            message += f" (response began: {excerpt!r})"
        super().__init__(message)
        self.reason = reason
        self.raw = raw


class ReasoningUnavailable(TalentScopeError):
    """The reasoning collaborator could not be reached or is not configured."""


class UnsupportedInput(TalentScopeError):
    """Input rejected before processing (unknown media type, oversized or empty document)."""
