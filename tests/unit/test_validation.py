"""
Unit tests for instruction and output validators.
"""

import json

import pytest

from buildproxy.utils.error_handling import (
    ErrorCode,
    InvalidInstructionsError,
    MalformedInstructionsError,
    MissingInstructionsError,
    OutputTooSmallError,
)
from buildproxy.validate import (
    InstructionsValidator,
    PDFOutputValidator,
    validate_instructions,
    validate_output,
)

from conftest import make_pdf


class TestInstructionsValidator:
    """Test cases for the instructions validator."""

    def test_valid_instructions_keep_raw_text(self):
        raw = '{"parts": [{"file": "file"}], "output": {"type": "pdf"}}'

        instructions = validate_instructions(raw)

        assert instructions.raw == raw
        assert instructions.parsed["parts"] == [{"file": "file"}]
        assert instructions.output_type == "pdf"

    def test_extra_keys_are_allowed(self):
        raw = json.dumps({"parts": [{"file": "file"}], "output": {"type": "pdf"}, "actions": []})

        assert validate_instructions(raw).parsed["actions"] == []

    def test_output_type_absent(self):
        instructions = validate_instructions(json.dumps({"parts": [{"file": "a"}], "output": "pdf"}))

        assert instructions.output_type is None

    @pytest.mark.parametrize("raw", [None, "", "   \n"])
    def test_missing(self, raw):
        with pytest.raises(MissingInstructionsError) as exc_info:
            InstructionsValidator().validate(raw)

        assert exc_info.value.status_code == 400
        assert exc_info.value.error_code == ErrorCode.MISSING_INSTRUCTIONS

    def test_malformed(self):
        with pytest.raises(MalformedInstructionsError) as exc_info:
            validate_instructions('{"parts": [')

        assert exc_info.value.message == "Invalid JSON in instructions"

    @pytest.mark.parametrize("parsed", [
        {"output": {"type": "pdf"}},
        {"parts": [{"file": "file"}]},
        {"parts": [], "output": {"type": "pdf"}},
        {"parts": [{"file": "file"}], "output": {}},
        ["parts", "output"],
        None,
    ])
    def test_invalid_shape(self, parsed):
        with pytest.raises(InvalidInstructionsError):
            validate_instructions(json.dumps(parsed))


class TestPDFOutputValidator:
    """Test cases for the converted document size check."""

    @pytest.mark.parametrize("size", [0, 1, 5000, 10240])
    def test_too_small(self, size):
        with pytest.raises(OutputTooSmallError) as exc_info:
            validate_output(b"x" * size)

        error = exc_info.value
        assert error.size == size
        assert error.status_code == 400
        assert error.message == f"PDF too small: {size} bytes (minimum 10 KB required)"

    def test_large_enough(self):
        content = make_pdf(10241)

        assert validate_output(content) is content

    def test_missing_pdf_header_is_only_logged(self):
        content = b"x" * 20000

        assert PDFOutputValidator().validate(content) is content

    def test_custom_minimum(self):
        with pytest.raises(OutputTooSmallError):
            validate_output(b"x" * 2048, min_bytes=2048)

        assert validate_output(b"x" * 2049, min_bytes=2048)
