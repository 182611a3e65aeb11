"""Tests for the generative client's retry policy."""

import asyncio
from types import SimpleNamespace
from unittest.mock import AsyncMock

import httpx
import openai
import pytest

from neuroblog.services.ai_generator import GenerativeClient
from neuroblog.services.errors import AIServiceUnavailable, AuthorizationDenied, InvalidRequest

REQUEST = httpx.Request("POST", "https://api.openai.com/v1/responses")


def status_error(cls, status, code=None):
    body = {"error": {"message": "boom", "code": code}} if code else None
    resp = httpx.Response(status, request=REQUEST, json=body or {})
    return cls("boom", response=resp, body=body)


def make_client(side_effect):
    create = AsyncMock(side_effect=side_effect)
    fake = SimpleNamespace(responses=SimpleNamespace(create=create))
    sleeps = []

    async def sleep(s):
        sleeps.append(s)

    return GenerativeClient(client=fake, sleep=sleep), create, sleeps


def ok(text="generated text"):
    return SimpleNamespace(output_text=text)


class TestBackoff:
    def test_exponential_and_capped(self):
        err = status_error(openai.InternalServerError, 503)
        client, create, sleeps = make_client([err] * 6)
        with pytest.raises(AIServiceUnavailable):
            asyncio.run(client.generate("prompt", max_attempts=6))
        assert create.await_count == 6
        assert sleeps == [1.0, 2.0, 4.0, 8.0, 10.0]

    def test_exhaustion_keeps_last_cause(self):
        client, _, _ = make_client([ok(""), ok("")])
        with pytest.raises(AIServiceUnavailable) as exc:
            asyncio.run(client.generate("prompt", max_attempts=2))
        assert "no valid response" in str(exc.value)


class TestGenerate:
    def test_returns_text(self):
        client, create, sleeps = make_client([ok("hello")])
        assert asyncio.run(client.generate("prompt")) == "hello"
        assert create.await_count == 1
        assert sleeps == []

    def test_passes_generation_parameters(self):
        client, create, _ = make_client([ok()])
        asyncio.run(client.generate("prompt", temperature=0.3, max_tokens=100))
        kwargs = create.await_args.kwargs
        assert kwargs["input"] == "prompt"
        assert kwargs["temperature"] == 0.3
        assert kwargs["max_output_tokens"] == 100
        assert kwargs["timeout"] == 30.0

    def test_sustained_overload_exhausts_attempts(self):
        err = status_error(openai.InternalServerError, 503)
        client, create, sleeps = make_client([err, err, err, err])
        with pytest.raises(AIServiceUnavailable):
            asyncio.run(client.generate("prompt", max_attempts=3))
        assert create.await_count == 3
        assert sleeps == [1.0, 2.0]

    def test_vendor_overloaded_code_is_retried(self):
        err = status_error(openai.InternalServerError, 500, code="overloaded")
        client, create, _ = make_client([err, ok("recovered")])
        assert asyncio.run(client.generate("prompt")) == "recovered"
        assert create.await_count == 2

    def test_timeout_is_retried(self):
        client, create, _ = make_client([openai.APITimeoutError(request=REQUEST), ok("late")])
        assert asyncio.run(client.generate("prompt")) == "late"
        assert create.await_count == 2

    def test_empty_output_is_retried(self):
        client, create, _ = make_client([ok(""), ok("   "), ok("finally")])
        assert asyncio.run(client.generate("prompt")) == "finally"
        assert create.await_count == 3

    def test_bad_request_is_not_retried(self):
        client, create, sleeps = make_client([status_error(openai.BadRequestError, 400), ok()])
        with pytest.raises(InvalidRequest):
            asyncio.run(client.generate("prompt"))
        assert create.await_count == 1
        assert sleeps == []

    def test_permission_denied_is_not_retried(self):
        client, create, _ = make_client([status_error(openai.PermissionDeniedError, 403), ok()])
        with pytest.raises(AuthorizationDenied):
            asyncio.run(client.generate("prompt"))
        assert create.await_count == 1

    def test_other_errors_fail_fast(self):
        client, create, _ = make_client([status_error(openai.AuthenticationError, 401), ok()])
        with pytest.raises(AIServiceUnavailable):
            asyncio.run(client.generate("prompt"))
        assert create.await_count == 1

    def test_invalid_request_is_an_ai_service_error(self):
        assert issubclass(InvalidRequest, AIServiceUnavailable)
        assert issubclass(AuthorizationDenied, AIServiceUnavailable)
