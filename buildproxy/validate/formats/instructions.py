"""
Build instruction validation.

Instructions are opaque to the proxy beyond one shape rule: a JSON object
with non-empty ``parts`` and ``output`` entries.
"""

import json as json_lib
from typing import Any, Dict, Optional

from ...utils.error_handling import (
    InvalidInstructionsError,
    MalformedInstructionsError,
    MissingInstructionsError,
)
from ..base_validator import TextBasedValidator

REQUIRED_KEYS = ("parts", "output")


class BuildInstructions:
    """Instructions as received (raw text) together with their parsed form."""

    def __init__(self, raw: str, parsed: Dict[str, Any]):
        self.raw = raw
        self.parsed = parsed

    @property
    def output_type(self) -> Optional[str]:
        output = self.parsed.get("output")
        if isinstance(output, dict):
            return output.get("type")
        return None


class InstructionsValidator(TextBasedValidator):
    """Validator for the ``instructions`` form field."""

    def __init__(self):
        super().__init__("instructions")

    def _validate_content(self, content: Optional[str], **options) -> BuildInstructions:
        """
        Validate instructions text.

        Args:
            content: Raw instructions text from the form

        Returns:
            BuildInstructions: raw text plus parsed object

        Raises:
            MissingInstructionsError: If the field is absent or empty
            MalformedInstructionsError: If the text is not valid JSON
            InvalidInstructionsError: If parts or output is missing
        """
        if self._is_blank(content):
            raise MissingInstructionsError()

        try:
            parsed = json_lib.loads(content)
        except json_lib.JSONDecodeError as e:
            self.logger.info(f"Rejecting instructions that are not JSON: {e}")
            raise MalformedInstructionsError()

        if not isinstance(parsed, dict):
            raise InvalidInstructionsError()

        missing = [key for key in REQUIRED_KEYS if not parsed.get(key)]
        if missing:
            self.logger.info(f"Rejecting instructions missing {missing}")
            raise InvalidInstructionsError()

        return BuildInstructions(raw=content, parsed=parsed)
