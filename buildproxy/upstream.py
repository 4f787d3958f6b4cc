"""
Upstream document processing service.

The endpoint talks to the upstream through the narrow BuildBackend interface:
submit a file and instruction text, get the converted bytes back or an
UpstreamError. NutrientBuildBackend is the httpx implementation used in
production; tests swap in their own backend.
"""

import logging
from abc import ABC, abstractmethod
from pathlib import PurePath
from typing import Optional

import httpx

from .config import DEFAULT_UPLOAD_CONTENT_TYPE
from .utils.error_handling import UpstreamError

logger = logging.getLogger(__name__)

# Upstream bodies are logged for diagnosis, never returned to the caller
MAX_LOGGED_BODY = 500


class UploadedDocument:
    """A file received from the caller, fully read into memory."""

    def __init__(self, filename: Optional[str], content: bytes, content_type: Optional[str] = None):
        self.filename = filename or "document"
        self.content = content
        self.content_type = content_type or DEFAULT_UPLOAD_CONTENT_TYPE

    @property
    def size(self) -> int:
        return len(self.content)

    @property
    def stem(self) -> str:
        return PurePath(self.filename).stem or "document"


class BuildBackend(ABC):
    """Single synchronous conversion operation of the upstream service."""

    @abstractmethod
    async def build(self, document: UploadedDocument, instructions: str, api_key: str) -> bytes:
        """
        Convert a document.

        Args:
            document: The uploaded file to forward
            instructions: The instruction JSON text exactly as received
            api_key: Bearer credential for the upstream service

        Returns:
            The converted document bytes

        Raises:
            UpstreamError: If the upstream does not report success
        """


class NutrientBuildBackend(BuildBackend):
    """Forwards build requests to the Nutrient processor API over HTTP."""

    def __init__(self, client: httpx.AsyncClient, url: str):
        self.client = client
        self.url = url

    async def build(self, document: UploadedDocument, instructions: str, api_key: str) -> bytes:
        files = {"file": (document.filename, document.content, document.content_type)}
        data = {"instructions": instructions}

        logger.info(f"Forwarding {document.filename} ({document.size} bytes) to {self.url}")

        try:
            response = await self.client.post(
                self.url,
                files=files,
                data=data,
                headers={"Authorization": f"Bearer {api_key}"},
            )
        except httpx.TimeoutException as e:
            logger.error(f"Upstream call to {self.url} timed out: {type(e).__name__}")
            raise UpstreamError(504, message="Upstream conversion timed out")

        if not response.is_success:
            error_text = response.text
            logger.error(f"Upstream API error: {response.status_code} {error_text[:MAX_LOGGED_BODY]}")
            raise UpstreamError(response.status_code, error_text)

        return response.content
