"""
Validation for build requests and their results.

The endpoint validates the instruction text before any upstream call and the
converted document after it.
"""

from typing import Optional

from ..config import MIN_OUTPUT_BYTES
from .formats.instructions import BuildInstructions, InstructionsValidator
from .formats.pdf import PDFOutputValidator


def validate_instructions(raw: Optional[str]) -> BuildInstructions:
    """Parse and shape-check instruction text."""
    return InstructionsValidator().validate(raw)


def validate_output(content: bytes, min_bytes: int = MIN_OUTPUT_BYTES) -> bytes:
    """Reject converted documents that are not strictly larger than min_bytes."""
    return PDFOutputValidator(min_bytes=min_bytes).validate(content)


__all__ = [
    'BuildInstructions',
    'InstructionsValidator',
    'PDFOutputValidator',
    'validate_instructions',
    'validate_output',
]
