"""
Maps arbitrary failures onto the discovery error taxonomy.

Upstream errors (google-genai ``APIError``, httpx, plain exceptions) are
inspected for a status code, a status string and their message. Errors that
are already part of the taxonomy are judged by their type only.
"""

import httpx
import structlog

from craving_scout.discovery.errors import (
    ConnectivityFailure,
    DiscoveryError,
    InvalidCredentials,
    QuotaExceeded,
    UnclassifiedFailure,
)

logger = structlog.get_logger()

QUOTA_STATUS_CODES = frozenset({429})
QUOTA_STATUS_TEXT = frozenset({"RESOURCE_EXHAUSTED"})
QUOTA_PATTERNS = (
    "429",
    "quota",
    "rate limit",
    "rate-limit",
    "ratelimit",
    "resource_exhausted",
    "resource exhausted",
    "too many requests",
)

CREDENTIAL_STATUS_CODES = frozenset({401, 403})
CREDENTIAL_STATUS_TEXT = frozenset({"UNAUTHENTICATED", "PERMISSION_DENIED"})
CREDENTIAL_PATTERNS = (
    "api key",
    "api_key",
    "unauthorized",
    "unauthenticated",
    "permission denied",
    "permission_denied",
)

CONNECTIVITY_EXCEPTIONS = (httpx.TransportError, ConnectionError, TimeoutError)
CONNECTIVITY_PATTERNS = (
    "network",
    "connection refused",
    "connection reset",
    "connection error",
    "failed to establish",
    "name or service not known",
    "temporary failure in name resolution",
    "offline",
)


def _status_codes(exc: BaseException) -> set[int]:
    codes = set()
    for attr in ("code", "status_code", "status"):
        value = getattr(exc, attr, None)
        if isinstance(value, int) and not isinstance(value, bool):
            codes.add(value)
    response = getattr(exc, "response", None)
    response_status = getattr(response, "status_code", None)
    if isinstance(response_status, int):
        codes.add(response_status)
    return codes


def _status_text(exc: BaseException) -> str:
    value = getattr(exc, "status", None)
    return value.upper() if isinstance(value, str) else ""


def _matches(
    exc: BaseException,
    codes: frozenset[int],
    status_text: frozenset[str],
    patterns: tuple[str, ...],
) -> bool:
    if _status_codes(exc) & codes:
        return True
    if _status_text(exc) in status_text:
        return True
    message = str(exc).lower()
    return any(pattern in message for pattern in patterns)


def is_rate_limit_error(exc: BaseException) -> bool:
    """True when a failure signals exhausted quota or rate limiting."""
    if isinstance(exc, DiscoveryError):
        return isinstance(exc, QuotaExceeded)
    return _matches(exc, QUOTA_STATUS_CODES, QUOTA_STATUS_TEXT, QUOTA_PATTERNS)


def is_credential_error(exc: BaseException) -> bool:
    """True when a failure signals a missing, invalid or unauthorized key."""
    if isinstance(exc, DiscoveryError):
        return isinstance(exc, InvalidCredentials)
    return _matches(exc, CREDENTIAL_STATUS_CODES, CREDENTIAL_STATUS_TEXT, CREDENTIAL_PATTERNS)


def is_connectivity_error(exc: BaseException) -> bool:
    """True when the model service could not be reached."""
    if isinstance(exc, DiscoveryError):
        return isinstance(exc, ConnectivityFailure)
    if isinstance(exc, CONNECTIVITY_EXCEPTIONS):
        return True
    message = str(exc).lower()
    return any(pattern in message for pattern in CONNECTIVITY_PATTERNS)


def classify_error(exc: BaseException) -> DiscoveryError:
    """
    Map any failure onto the taxonomy.

    Precedence: quota, credentials, connectivity, already-classified,
    then everything else as UnclassifiedFailure. The returned error never
    carries upstream detail in its message; the original is chained as
    ``__cause__`` for server-side logs.
    """
    if is_rate_limit_error(exc):
        classified: DiscoveryError = exc if isinstance(exc, QuotaExceeded) else QuotaExceeded()
    elif is_credential_error(exc):
        classified = exc if isinstance(exc, InvalidCredentials) else InvalidCredentials()
    elif is_connectivity_error(exc):
        classified = exc if isinstance(exc, ConnectivityFailure) else ConnectivityFailure()
    elif isinstance(exc, DiscoveryError):
        return exc
    else:
        logger.error(
            "Unclassified discovery failure",
            error_class=type(exc).__name__,
            error=str(exc),
        )
        classified = UnclassifiedFailure()

    if classified is not exc:
        classified.__cause__ = exc
    return classified
