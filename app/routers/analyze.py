"""
Contract analysis endpoints.

All analyses require a logged-in session. Model and transport failures
are reported as a single "Analysis failed" error carrying the
underlying message; nothing is saved when an analysis fails.
"""

import logging
from typing import Optional

from fastapi import APIRouter, File, HTTPException, Request, UploadFile, status
from pydantic import BaseModel, Field

from app.audit.builder import build_request
from app.audit.interpreter import AnalysisError
from app.audit.uploads import prepare_upload
from app.config import ConfigurationError
from app.deeplink import clear_deep_link, parse_deep_link
from app.dependencies import get_analysis_service, get_config, get_session_manager
from app.models import AnalysisResult, InputMode

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/analyze", tags=["analyze"])


class AnalyzeRequest(BaseModel):
    content: str = Field(..., min_length=1)
    mode: InputMode = InputMode.TEXT
    mime_type: Optional[str] = Field(default=None, alias="mimeType")
    file_name: Optional[str] = Field(default=None, alias="fileName")

    class Config:
        populate_by_name = True


def _require_user():
    user = get_session_manager().get_current_user()
    if user is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail={
                "error": "Login required",
                "detail": "Sign up or log in to run an analysis.",
                "code": "LOGIN_REQUIRED",
            },
        )
    return user


async def _run_analysis(
    content: str,
    mode: InputMode,
    mime_type: Optional[str] = None,
    file_name: Optional[str] = None,
) -> AnalysisResult:
    """Run one analysis, mapping failures to HTTP errors."""
    service = get_analysis_service()
    try:
        service.provider.ensure_configured()
    except ConfigurationError as e:
        logger.error(f"Analysis unavailable: {e}")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail={
                "error": "Analysis failed",
                "detail": "The analysis service is not available right now.",
                "code": "NOT_CONFIGURED",
            },
        )

    try:
        analysis_request = build_request(
            content, mode, mime_type=mime_type, file_name=file_name
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid input", "detail": str(e), "code": "INVALID_INPUT"},
        )

    try:
        return await service.run(analysis_request)
    except AnalysisError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={"error": "Analysis failed", "detail": str(e), "code": "BAD_MODEL_REPLY"},
        )
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Analysis failed",
                "detail": str(e) or type(e).__name__,
                "code": "MODEL_CALL_FAILED",
            },
        )


@router.post("")
async def analyze(request: AnalyzeRequest):
    """Analyze pasted text, a URL/company name, or a base64 file payload."""
    _require_user()
    result = await _run_analysis(
        request.content, request.mode, request.mime_type, request.file_name
    )
    return {"result": result.to_dict()}


@router.post("/upload")
async def analyze_upload(file: UploadFile = File(...)):
    """Analyze an uploaded document (PDF/PowerPoint as file, others as text)."""
    _require_user()

    data = await file.read()
    max_bytes = get_config().max_upload_bytes
    if len(data) > max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail={
                "error": "File too large",
                "detail": f"Maximum file size is {max_bytes // (1024 * 1024)}MB",
                "code": "FILE_TOO_LARGE",
            },
        )

    try:
        upload = prepare_upload(file.filename, data, file.content_type)
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Invalid file", "detail": str(e), "code": "INVALID_FILE"},
        )

    result = await _run_analysis(
        upload.content, upload.mode, upload.mime_type, upload.file_name
    )
    return {"result": result.to_dict()}


@router.get("/link")
async def analyze_deep_link(request: Request):
    """
    Run a deep-linked URL analysis (?url=...).

    Without a session the link is reported as pending; it runs once the
    user logs in and the link is opened again.
    """
    target = parse_deep_link(request.query_params)
    if target is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Missing url", "detail": "Add ?url=<site or company>", "code": "NO_TARGET"},
        )

    if get_session_manager().get_current_user() is None:
        return {"status": "pending_login", "target": target}

    result = await _run_analysis(target, InputMode.URL)
    return {
        "status": "complete",
        "target": target,
        "location": clear_deep_link(str(request.url)),
        "result": result.to_dict(),
    }
