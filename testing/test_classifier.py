import httpx
import pytest

from craving_scout.discovery.classifier import classify_error, is_rate_limit_error
from craving_scout.discovery.errors import (
    ConnectivityFailure,
    InvalidCredentials,
    InvalidResponse,
    NoResultsFound,
    QuotaExceeded,
    UnclassifiedFailure,
    ValidationFailure,
)
from testing.sample_inputs import PermissionError403, RateLimitError


class StatusError(Exception):
    def __init__(self, message, status):
        super().__init__(message)
        self.status = status


class TestRateLimitPredicate:
    @pytest.mark.parametrize(
        "exc",
        [
            RateLimitError(),
            StatusError("Too Many Requests", 429),
            StatusError("upstream said no", "RESOURCE_EXHAUSTED"),
            Exception("You exceeded your current quota"),
            Exception("rate limit hit"),
        ],
    )
    def test_retryable(self, exc):
        assert is_rate_limit_error(exc)

    @pytest.mark.parametrize(
        "exc",
        [
            PermissionError403(),
            Exception("400 INVALID_ARGUMENT"),
            InvalidResponse(),
            ValueError("boom"),
        ],
    )
    def test_not_retryable(self, exc):
        assert not is_rate_limit_error(exc)


class TestClassifyError:
    def test_quota_signal(self):
        original = RateLimitError()
        classified = classify_error(original)

        assert isinstance(classified, QuotaExceeded)
        assert classified.__cause__ is original
        assert "RESOURCE_EXHAUSTED" not in classified.user_message

    def test_credential_signals(self):
        assert isinstance(classify_error(PermissionError403()), InvalidCredentials)
        assert isinstance(classify_error(StatusError("Unauthorized", 401)), InvalidCredentials)
        assert isinstance(
            classify_error(Exception("400 API key not valid. Please pass a valid API key.")),
            InvalidCredentials,
        )

    def test_connectivity_signals(self):
        assert isinstance(classify_error(httpx.ConnectError("Connection refused")), ConnectivityFailure)
        assert isinstance(classify_error(ConnectionResetError()), ConnectivityFailure)
        assert isinstance(classify_error(TimeoutError()), ConnectivityFailure)

    def test_quota_takes_precedence_over_credentials(self):
        exc = StatusError("quota exceeded for this API key", 429)
        assert isinstance(classify_error(exc), QuotaExceeded)

    @pytest.mark.parametrize(
        "exc",
        [
            QuotaExceeded(),
            InvalidCredentials(),
            ConnectivityFailure(),
            InvalidResponse(),
            NoResultsFound(candidates_parsed=2, candidates_unverified=2),
            ValidationFailure("Search query cannot be empty."),
        ],
    )
    def test_tagged_errors_pass_through_unchanged(self, exc):
        assert classify_error(exc) is exc

    def test_tagged_error_judged_by_type_not_message(self):
        exc = InvalidResponse("quota of restaurants reached over the network")
        assert classify_error(exc) is exc

    def test_everything_else_is_redacted(self):
        original = KeyError("candidates[0].content.parts")
        classified = classify_error(original)

        assert isinstance(classified, UnclassifiedFailure)
        assert "candidates" not in classified.user_message
        assert classified.error_type == "UNKNOWN"
        assert classified.http_status == 500
