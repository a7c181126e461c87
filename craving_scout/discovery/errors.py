"""
Error taxonomy for restaurant discovery.

Every failure that leaves the engine is one of these. The message passed to
the constructor is the user-facing text; upstream detail stays on
``__cause__`` and in the server logs.
"""


class DiscoveryError(Exception):
    """Base class for all discovery failures."""

    error_type = "UNKNOWN"
    http_status = 500
    default_message = "An unexpected error occurred. Please try again."

    def __init__(self, message: str | None = None) -> None:
        self.user_message = message or self.default_message
        super().__init__(self.user_message)


class QuotaExceeded(DiscoveryError):
    """Upstream rate limit or quota, raised only after retries ran out."""

    error_type = "QUOTA_EXCEEDED"
    http_status = 429
    default_message = "API rate limit exceeded. Please wait a few minutes and try again."


class InvalidCredentials(DiscoveryError):
    """Missing or rejected API key."""

    error_type = "API_KEY_ERROR"
    http_status = 401
    default_message = "Invalid API key."


class ConnectivityFailure(DiscoveryError):
    """The model service could not be reached."""

    error_type = "NETWORK_ERROR"
    http_status = 503
    default_message = "Network error. Please check your internet connection."


class InvalidResponse(DiscoveryError):
    """The model output was structurally unusable."""

    error_type = "INVALID_RESPONSE"
    http_status = 502
    default_message = "AI returned invalid data format. Please try again."


class NoResultsFound(InvalidResponse):
    """
    Parsing succeeded but nothing survived verification and deduplication.

    ``candidates_unverified`` tells "the model named nothing" apart from
    "the model named places the grounding step could not confirm".
    """

    default_message = "No restaurants found. Try a different search."

    def __init__(
        self,
        candidates_parsed: int = 0,
        candidates_unverified: int = 0,
        message: str | None = None,
    ) -> None:
        self.candidates_parsed = candidates_parsed
        self.candidates_unverified = candidates_unverified
        if message is None and candidates_unverified:
            message = "We couldn't verify any matching restaurants nearby. Try a different search."
        super().__init__(message)


class ValidationFailure(DiscoveryError):
    """The caller's request violated the inbound contract."""

    error_type = "VALIDATION_ERROR"
    http_status = 400
    default_message = "Invalid search request."


class UnclassifiedFailure(DiscoveryError):
    """Anything else, with internals redacted."""
