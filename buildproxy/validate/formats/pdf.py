"""
Validation of the converted PDF returned by the upstream service.
"""

from ...config import MIN_OUTPUT_BYTES
from ...utils.error_handling import OutputTooSmallError
from ..base_validator import BinaryBasedValidator


class PDFOutputValidator(BinaryBasedValidator):
    """Guards against the upstream producing an empty or placeholder document."""

    def __init__(self, min_bytes: int = MIN_OUTPUT_BYTES):
        super().__init__("pdf")
        self.min_bytes = min_bytes

    def _validate_content(self, content: bytes, **options) -> bytes:
        """
        Check that the document is strictly larger than the minimum size.

        Raises:
            OutputTooSmallError: If the document has min_bytes bytes or fewer
        """
        size = self._byte_length(content)
        if size <= self.min_bytes:
            raise OutputTooSmallError(size, self.min_bytes)

        # Not fatal: the upstream decides what it returns for the requested output
        if not content.startswith(b'%PDF-'):
            self.logger.warning(f"Upstream document of {size} bytes has no PDF header")

        return content
