"""
Build router for the /api/build endpoint.

Accepts a document plus JSON build instructions, forwards both to the upstream
document processing service and returns the converted PDF once it passes the
minimum size check.
"""

import logging

from fastapi import APIRouter, Request, Response
from starlette.datastructures import UploadFile
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import DEFAULT_MAX_FIELD_BYTES, PDF_MEDIA_TYPE, Settings
from .upstream import BuildBackend, UploadedDocument
from .utils.error_handling import (
    BuildError,
    MissingFileError,
    ServiceMisconfiguredError,
    UnreadableRequestError,
    build_error_response,
    internal_error_response,
)
from .validate import validate_instructions, validate_output

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["build"])

ERROR_RESPONSES = {
    400: {"description": "Missing or malformed input, or undersized output"},
    500: {"description": "Service misconfigured or internal error"},
}


def _get_settings(request: Request) -> Settings:
    settings = getattr(request.app.state, "settings", None)
    if settings is None or not settings.is_configured:
        logger.error("NUTRIENT_API_KEY not configured")
        raise ServiceMisconfiguredError()
    return settings


def _max_field_bytes(request: Request) -> int:
    settings = getattr(request.app.state, "settings", None)
    if settings is None:
        return DEFAULT_MAX_FIELD_BYTES
    return settings.max_field_bytes


def _get_backend(request: Request) -> BuildBackend:
    return request.app.state.backend


def _content_disposition(document: UploadedDocument) -> str:
    # Header values must stay ASCII
    stem = document.stem.encode('ascii', 'ignore').decode('ascii').replace('"', '') or "document"
    return f'inline; filename="{stem}.pdf"'


async def _build(request: Request) -> Response:
    try:
        form = await request.form(max_part_size=_max_field_bytes(request))
    except StarletteHTTPException as e:
        # Malformed multipart bodies and parser limits
        raise UnreadableRequestError(e.detail)

    upload = form.get("file")
    if not isinstance(upload, UploadFile):
        raise MissingFileError()

    raw_instructions = form.get("instructions")
    if not isinstance(raw_instructions, str):
        raw_instructions = None
    instructions = validate_instructions(raw_instructions)

    settings = _get_settings(request)

    document = UploadedDocument(
        filename=upload.filename,
        content=await upload.read(),
        content_type=upload.content_type,
    )

    content = await _get_backend(request).build(document, instructions.raw, settings.api_key)
    validate_output(content, settings.min_output_bytes)

    logger.info(f"Built {document.filename} into {len(content)} byte PDF")

    return Response(
        content=content,
        status_code=200,
        media_type=PDF_MEDIA_TYPE,
        headers={
            "Content-Length": str(len(content)),
            "Content-Disposition": _content_disposition(document),
        },
    )


@router.post("/build", responses=ERROR_RESPONSES)
async def build_document(request: Request):
    """
    Convert an uploaded document through the upstream build API.

    Form fields:
    - file: the document to convert
    - instructions: JSON text with at least ``parts`` and ``output``

    Returns the converted PDF (always larger than 10 KB) or a JSON body
    ``{"error": "<message>"}``.
    """
    try:
        return await _build(request)
    except BuildError as e:
        return build_error_response(e)
    except Exception:
        logger.exception("Error in /api/build")
        return internal_error_response()
