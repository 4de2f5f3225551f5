"""Tests for submission sinks and prefill sources."""

import json

import httpx
import pytest

from stepform import (
    FieldKind,
    FormController,
    HTTPSubmissionSink,
    MappingPrefill,
    SubmissionError,
    ValidationConfig,
)
from stepform.sinks import PrefillSource, SubmissionSink

URL = "https://api.example.com/bookings"


def _sink(handler, **kwargs) -> HTTPSubmissionSink:
    return HTTPSubmissionSink(URL, transport=httpx.MockTransport(handler), **kwargs)


class TestHTTPSubmissionSink:
    @pytest.mark.anyio
    async def test_posts_json_and_returns_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(201, json={"reference": "BK-1"})

        sink = _sink(handler, headers={"Authorization": "Bearer t0k3n"})
        payload = await sink.submit({"fullName": "Ada Obi"})

        assert payload == {"reference": "BK-1"}
        request = seen[0]
        assert request.method == "POST"
        assert str(request.url) == URL
        assert request.headers["Authorization"] == "Bearer t0k3n"
        assert json.loads(request.content) == {"fullName": "Ada Obi"}

    @pytest.mark.anyio
    async def test_custom_method(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"method": request.method})

        assert await _sink(handler, method="PUT").submit({}) == {"method": "PUT"}

    @pytest.mark.anyio
    async def test_empty_body(self) -> None:
        sink = _sink(lambda request: httpx.Response(204))
        assert await sink.submit({"a": "b"}) is None

    @pytest.mark.anyio
    async def test_error_status(self) -> None:
        sink = _sink(lambda request: httpx.Response(422, text="checkOutDate is invalid"))
        with pytest.raises(SubmissionError) as exc_info:
            await sink.submit({})
        assert exc_info.value.status == 422
        assert exc_info.value.detail == "checkOutDate is invalid"

    @pytest.mark.anyio
    async def test_non_json_body(self) -> None:
        sink = _sink(lambda request: httpx.Response(200, text="<html>ok</html>"))
        with pytest.raises(SubmissionError, match="non-JSON"):
            await sink.submit({})

    @pytest.mark.anyio
    async def test_transport_failure(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(SubmissionError) as exc_info:
            await _sink(handler).submit({})
        assert isinstance(exc_info.value.original, httpx.ConnectError)
        assert exc_info.value.status is None

    def test_is_a_submission_sink(self) -> None:
        assert isinstance(_sink(lambda request: httpx.Response(204)), SubmissionSink)

    @pytest.mark.anyio
    async def test_form_submits_through_sink(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"echo": json.loads(request.content)})

        form = FormController(
            {"email": ValidationConfig(required=True, kind=FieldKind.EMAIL)},
            initial_values={"email": "ada@example.com"},
        )
        result = await form.handle_submit(_sink(handler))
        assert result.submitted
        assert result.payload == {"echo": {"email": "ada@example.com"}}

    @pytest.mark.anyio
    async def test_form_propagates_sink_failure(self) -> None:
        form = FormController(
            {"email": ValidationConfig(required=True, kind=FieldKind.EMAIL)},
            initial_values={"email": "ada@example.com"},
        )
        with pytest.raises(SubmissionError) as exc_info:
            await form.handle_submit(_sink(lambda request: httpx.Response(500, text="boom")))
        assert exc_info.value.status == 500
        assert not form.is_submitting


class TestMappingPrefill:
    def test_stringifies_values(self) -> None:
        prefill = MappingPrefill({"batch": 2023, "stream": "A", "phone": None})
        assert prefill.load() == {"batch": "2023", "stream": "A", "phone": ""}

    def test_is_a_prefill_source(self) -> None:
        assert isinstance(MappingPrefill({}), PrefillSource)
