"""
Shared test configuration and fixtures for build proxy tests.
"""

import json
from typing import Callable, List, Optional

import pytest
from fastapi.testclient import TestClient

from app import app
from buildproxy.config import Settings
from buildproxy.upstream import BuildBackend, UploadedDocument


DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

VALID_INSTRUCTIONS = json.dumps({"parts": [{"file": "file"}], "output": {"type": "pdf"}})


def make_pdf(size: int) -> bytes:
    """Bytes that look like a PDF and are exactly size bytes long."""
    header = b"%PDF-1.7\n"
    trailer = b"\n%%EOF"
    return header + b"0" * (size - len(header) - len(trailer)) + trailer


class FakeBackend(BuildBackend):
    """Backend that records calls and answers with canned content or an exception."""

    def __init__(self, content: bytes = b"", error: Optional[Exception] = None):
        self.content = content
        self.error = error
        self.calls: List[dict] = []

    async def build(self, document: UploadedDocument, instructions: str, api_key: str) -> bytes:
        self.calls.append({
            "filename": document.filename,
            "content": document.content,
            "content_type": document.content_type,
            "instructions": instructions,
            "api_key": api_key,
        })
        if self.error is not None:
            raise self.error
        return self.content


# ===== STANDARD FIXTURES =====

@pytest.fixture
def fake_backend():
    """Backend returning a valid 15,000 byte PDF."""
    return FakeBackend(content=make_pdf(15000))


@pytest.fixture
def settings():
    return Settings(api_key="test-api-key", upstream_url="https://upstream.test/build")


@pytest.fixture
def client(settings, fake_backend):
    """FastAPI test client with injected settings and a fake upstream."""
    with TestClient(app) as test_client:
        app.state.settings = settings
        app.state.backend = fake_backend
        yield test_client


@pytest.fixture
def sample_docx():
    """Placeholder DOCX upload tuple for multipart requests."""
    return ("test.docx", b"PK\x03\x04 placeholder docx content", DOCX_MEDIA_TYPE)


@pytest.fixture
def post_build(client: TestClient, sample_docx) -> Callable:
    """Factory fixture posting to /api/build with valid defaults."""
    def _post(file=sample_docx, instructions: Optional[str] = VALID_INSTRUCTIONS):
        files = {"file": file} if file is not None else None
        data = {"instructions": instructions} if instructions is not None else None
        return client.post("/api/build", files=files, data=data)

    return _post
