import asyncio
import inspect
from collections.abc import Awaitable, Callable
from types import SimpleNamespace
from unittest.mock import patch

import pytest

from craving_scout.discovery.errors import InvalidCredentials, QuotaExceeded
from craving_scout.discovery.invoker import ModelInvoker, extract_token_usage
from craving_scout.discovery.models import ModelTier
from testing.sample_inputs import (
    SAMPLE_COORDINATES,
    FakeClient,
    RateLimitError,
    RecordingSleep,
    get_test_config,
    ramen_reply,
)


@pytest.mark.parametrize("api_key", ["", "   "])
@patch("craving_scout.discovery.invoker.genai.Client")
def test_missing_key_is_rejected_before_client_creation(mock_client_cls, api_key):
    with pytest.raises(InvalidCredentials):
        ModelInvoker(api_key=api_key, config=get_test_config())

    mock_client_cls.assert_not_called()


@patch("craving_scout.discovery.invoker.genai.Client")
def test_client_built_with_injected_key(mock_client_cls):
    ModelInvoker(api_key="injected-key", config=get_test_config(api_version="v1beta"))

    _, kwargs = mock_client_cls.call_args
    assert kwargs["api_key"] == "injected-key"
    assert kwargs["http_options"].api_version == "v1beta"


def test_generation_config_grounds_on_coordinates():
    invoker = ModelInvoker(api_key="k", config=get_test_config(), client=FakeClient([]))

    config = invoker.build_generation_config(SAMPLE_COORDINATES, language_code="ar")

    assert config.tools[0].google_maps is not None
    retrieval = config.tool_config.retrieval_config
    assert retrieval.lat_lng.latitude == 1.0
    assert retrieval.lat_lng.longitude == 1.0
    assert retrieval.language_code == "ar"


def test_generate_returns_raw_response():
    reply = ramen_reply()
    client = FakeClient([reply])
    invoker = ModelInvoker(api_key="k", config=get_test_config(), client=client, sleep=RecordingSleep())

    response = asyncio.run(invoker.generate("prompt", SAMPLE_COORDINATES, tier=ModelTier.STANDARD))

    assert response is reply
    assert client.models.calls[0]["contents"] == "prompt"
    assert client.models.calls[0]["model"] == "gemini-2.5-flash"


def test_exhausted_rate_limit_raises_quota_exceeded():
    sleep = RecordingSleep()
    client = FakeClient([RateLimitError(), RateLimitError(), RateLimitError()])
    invoker = ModelInvoker(api_key="k", config=get_test_config(), client=client, sleep=sleep)

    with pytest.raises(QuotaExceeded) as exc_info:
        asyncio.run(invoker.generate("prompt", SAMPLE_COORDINATES))

    assert isinstance(exc_info.value.__cause__, RateLimitError)
    assert sleep.delays == [2.0, 4.0]


def test_non_retryable_error_propagates_unchanged():
    sleep = RecordingSleep()
    error = ValueError("400 INVALID_ARGUMENT")
    client = FakeClient([error])
    invoker = ModelInvoker(api_key="k", config=get_test_config(), client=client, sleep=sleep)

    with pytest.raises(ValueError) as exc_info:
        asyncio.run(invoker.generate("prompt", SAMPLE_COORDINATES))

    assert exc_info.value is error
    assert sleep.delays == []


def test_attempts_follow_config():
    sleep = RecordingSleep()
    client = FakeClient([RateLimitError(), RateLimitError()])
    config = get_test_config(max_attempts=2, retry_base_delay_seconds=1.0)
    invoker = ModelInvoker(api_key="k", config=config, client=client, sleep=sleep)

    with pytest.raises(QuotaExceeded):
        asyncio.run(invoker.generate("prompt", SAMPLE_COORDINATES))

    assert len(client.models.calls) == 2
    assert sleep.delays == [1.0]


def test_token_usage_defaults_to_zero():
    usage = extract_token_usage(SimpleNamespace(usage_metadata=None), "gemini-2.5-flash")

    assert usage.input_tokens == 0
    assert usage.output_tokens == 0
    assert usage.model_used == "gemini-2.5-flash"


def test_sleep_is_an_awaitable_delay_callable():
    parameter = inspect.signature(ModelInvoker.__init__).parameters["sleep"]

    assert parameter.annotation == Callable[[float], Awaitable[None]]
    assert parameter.default is asyncio.sleep


def test_injected_sleep_receives_backoff_delays():
    sleep = RecordingSleep()
    reply = ramen_reply()
    client = FakeClient([RateLimitError(), reply])
    invoker = ModelInvoker(api_key="k", config=get_test_config(), client=client, sleep=sleep)

    assert asyncio.run(invoker.generate("prompt", SAMPLE_COORDINATES)) is reply
    assert sleep.delays == [2.0]
