"""
Base validator classes for build request inputs and outputs.

Validators raise BuildError subclasses so the endpoint can report every
failure through the same error path.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Union


class BaseValidator(ABC):
    """
    Base class for content validators.

    Subclasses implement _validate_content and raise a BuildError subclass
    when the content is not acceptable.
    """

    def __init__(self, format_name: str):
        self.format_name = format_name
        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    def validate(self, content: Union[str, bytes, None], **options) -> Any:
        """Validate content and return its validated form."""
        return self._validate_content(content, **options)

    @abstractmethod
    def _validate_content(self, content: Union[str, bytes, None], **options) -> Any:
        """
        Perform format-specific content validation.

        Raises:
            BuildError: If validation fails
        """
        pass


class TextBasedValidator(BaseValidator):
    """Base class for validators of text form fields."""

    def _is_blank(self, content: Union[str, None]) -> bool:
        return content is None or not content.strip()


class BinaryBasedValidator(BaseValidator):
    """Base class for validators of binary payloads."""

    def _byte_length(self, content: bytes) -> int:
        return len(content) if content else 0
