"""
Unit tests for the httpx upstream backend.

The real NutrientBuildBackend is wired into the app with an httpx
MockTransport, so these tests cover the wire format sent upstream and how
upstream responses map to endpoint responses.
"""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from app import app
from buildproxy.upstream import NutrientBuildBackend, UploadedDocument

from conftest import VALID_INSTRUCTIONS, make_pdf

UPSTREAM_URL = "https://upstream.test/build"


class RecordingHandler:
    """MockTransport handler that stores requests and replays a canned response."""

    def __init__(self, response: httpx.Response = None, error: Exception = None):
        self.response = response
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def use_handler(client: TestClient):
    """Install a real backend talking to a MockTransport handler."""
    def _install(handler: RecordingHandler) -> RecordingHandler:
        transport = httpx.MockTransport(handler)
        app.state.backend = NutrientBuildBackend(httpx.AsyncClient(transport=transport), UPSTREAM_URL)
        return handler

    return _install


class TestWireFormat:
    """The upstream receives an authenticated multipart request."""

    def test_request_shape(self, post_build, use_handler, sample_docx):
        handler = use_handler(RecordingHandler(httpx.Response(200, content=make_pdf(15000))))

        response = post_build()

        assert response.status_code == 200
        assert len(handler.requests) == 1

        request = handler.requests[0]
        assert request.method == "POST"
        assert str(request.url) == UPSTREAM_URL
        assert request.headers["authorization"] == "Bearer test-api-key"
        assert request.headers["content-type"].startswith("multipart/form-data")

        body = request.content
        assert b'name="file"; filename="test.docx"' in body
        assert sample_docx[1] in body
        assert sample_docx[2].encode() in body
        assert b'name="instructions"' in body
        assert VALID_INSTRUCTIONS.encode() in body

    def test_success_body_is_returned_verbatim(self, post_build, use_handler):
        pdf = make_pdf(15000)
        use_handler(RecordingHandler(httpx.Response(200, content=pdf)))

        response = post_build()

        assert response.status_code == 200
        assert response.headers["content-length"] == "15000"
        assert response.content == pdf


class TestUpstreamResponses:
    """Upstream failures surface as mirrored statuses."""

    @pytest.mark.parametrize("status_code", [400, 401, 500, 503])
    def test_failure_status_is_mirrored(self, post_build, use_handler, status_code: int):
        use_handler(RecordingHandler(httpx.Response(status_code, text="upstream said no")))

        response = post_build()

        assert response.status_code == status_code
        assert response.json() == {"error": f"Upstream conversion error: {status_code}"}

    def test_undersized_success_is_rejected(self, post_build, use_handler):
        use_handler(RecordingHandler(httpx.Response(200, content=make_pdf(5000))))

        response = post_build()

        assert response.status_code == 400
        assert response.json() == {"error": "PDF too small: 5000 bytes (minimum 10 KB required)"}

    def test_timeout_becomes_upstream_failure(self, post_build, use_handler):
        use_handler(RecordingHandler(error=httpx.ReadTimeout("timed out")))

        response = post_build()

        assert response.status_code == 504
        assert response.json() == {"error": "Upstream conversion timed out"}

    def test_connection_failure_is_internal_error(self, post_build, use_handler):
        use_handler(RecordingHandler(error=httpx.ConnectError("connection refused")))

        response = post_build()

        assert response.status_code == 500
        assert response.json() == {"error": "Internal server error"}

    def test_no_call_for_invalid_request(self, post_build, use_handler):
        handler = use_handler(RecordingHandler(httpx.Response(200, content=make_pdf(15000))))

        response = post_build(instructions=json.dumps({"parts": []}))

        assert response.status_code == 400
        assert handler.requests == []


class TestUploadedDocument:
    """Tests for the in-memory upload wrapper."""

    def test_defaults(self):
        document = UploadedDocument(None, b"abc")

        assert document.filename == "document"
        assert document.content_type == "application/octet-stream"
        assert document.size == 3

    def test_stem(self):
        assert UploadedDocument("report.final.docx", b"").stem == "report.final"
