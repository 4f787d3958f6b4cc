#!/usr/bin/env python3
"""
Demo client for the /api/build endpoint.

Builds a small placeholder DOCX, sends it to a running build proxy with
instructions asking for PDF output, checks the result is larger than 10 KB
and saves it as demo-output.pdf.

Usage:
    python -m buildproxy.demo --base-url http://localhost:8000 --output-dir .
"""

import argparse
import io
import json
import logging
import sys
import zipfile
from enum import Enum
from pathlib import Path
from typing import Optional

import httpx

from .config import MIN_OUTPUT_BYTES
from .utils.logging_config import setup_logging

logger = logging.getLogger(__name__)

DOCX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

DEMO_FILENAME = "test.docx"
DEMO_OUTPUT_FILENAME = "demo-output.pdf"
DEMO_TEXT = "This is a test document for demo purposes."

DEMO_INSTRUCTIONS = {
    "parts": [{"file": "file"}],
    "output": {"type": "pdf"},
}

_CONTENT_TYPES_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Types xmlns="http://schemas.openxmlformats.org/package/2006/content-types">
<Default Extension="rels" ContentType="application/vnd.openxmlformats-package.relationships+xml"/>
<Default Extension="xml" ContentType="application/xml"/>
<Override PartName="/word/document.xml" ContentType="application/vnd.openxmlformats-officedocument.wordprocessingml.document.main+xml"/>
</Types>"""

_RELS_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<Relationships xmlns="http://schemas.openxmlformats.org/package/2006/relationships">
<Relationship Id="rId1" Type="http://schemas.openxmlformats.org/officeDocument/2006/relationships/officeDocument" Target="word/document.xml"/>
</Relationships>"""

_DOCUMENT_XML = """<?xml version="1.0" encoding="UTF-8" standalone="yes"?>
<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">
<w:body><w:p><w:r><w:t>{text}</w:t></w:r></w:p></w:body>
</w:document>"""


class DemoState(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"


class DemoResult:
    """Outcome of one demo run."""

    def __init__(self, success: bool, message: str, size: Optional[int] = None,
                 output_path: Optional[Path] = None):
        self.success = success
        self.message = message
        self.size = size
        self.output_path = output_path

    def __repr__(self) -> str:
        return f"DemoResult(success={self.success}, message={self.message!r}, size={self.size})"


def create_placeholder_docx(text: str = DEMO_TEXT) -> bytes:
    """Create a minimal single-paragraph DOCX in memory."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, 'w', zipfile.ZIP_DEFLATED) as zf:
        zf.writestr("[Content_Types].xml", _CONTENT_TYPES_XML)
        zf.writestr("_rels/.rels", _RELS_XML)
        zf.writestr("word/document.xml", _DOCUMENT_XML.format(text=text))
    return buffer.getvalue()


class DemoClient:
    """
    Runs the DOCX to PDF demo against a build proxy.

    state is REQUESTING while a request is in flight and IDLE otherwise;
    last_result holds the success or error outcome of the latest run.
    """

    def __init__(self, base_url: str = "http://localhost:8000",
                 output_dir: Path = Path("."),
                 client: Optional[httpx.Client] = None,
                 timeout: float = 120.0):
        self.base_url = base_url.rstrip("/")
        self.output_dir = Path(output_dir)
        self.client = client
        self.timeout = timeout
        self.state = DemoState.IDLE
        self.last_result: Optional[DemoResult] = None

    def run(self) -> DemoResult:
        self.last_result = None
        self.state = DemoState.REQUESTING

        try:
            result = self._run()
        except Exception as e:
            logger.warning(f"Demo failed: {e}")
            result = DemoResult(success=False, message=str(e) or "Unknown error occurred")
        finally:
            self.state = DemoState.IDLE

        self.last_result = result
        return result

    def _post(self, files, data) -> httpx.Response:
        url = f"{self.base_url}/api/build"
        if self.client is not None:
            return self.client.post(url, files=files, data=data)
        with httpx.Client(timeout=self.timeout) as client:
            return client.post(url, files=files, data=data)

    def _run(self) -> DemoResult:
        files = {"file": (DEMO_FILENAME, create_placeholder_docx(), DOCX_MEDIA_TYPE)}
        data = {"instructions": json.dumps(DEMO_INSTRUCTIONS)}

        response = self._post(files, data)

        if not response.is_success:
            raise RuntimeError(f"HTTP {response.status_code}: {response.text}")

        content = response.content
        size = len(content)

        if size <= MIN_OUTPUT_BYTES:
            raise RuntimeError(f"PDF too small: {size} bytes (minimum 10 KB required)")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        output_path = self.output_dir / DEMO_OUTPUT_FILENAME
        output_path.write_bytes(content)

        return DemoResult(
            success=True,
            message=f"Success! Generated PDF ({size} bytes)",
            size=size,
            output_path=output_path,
        )


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Run the DOCX to PDF build demo")
    parser.add_argument("--base-url", default="http://localhost:8000",
                        help="Base URL of the build proxy")
    parser.add_argument("--output-dir", default=".", type=Path,
                        help="Directory to save demo-output.pdf into")
    parser.add_argument("--log-format", default=None, choices=["standard", "dev", "json"],
                        help="Log line format")
    args = parser.parse_args(argv)
    setup_logging(format_type=args.log_format)

    result = DemoClient(base_url=args.base_url, output_dir=args.output_dir).run()

    if result.success:
        print(f"✅ Success: {result.message}")
        print(f"Saved to {result.output_path}")
        return 0

    print(f"❌ Error: {result.message}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
