"""
Contract audit module.

Builds the model request from user input, interprets the structured
reply, and runs the end-to-end analysis pipeline.
"""

from .builder import AnalysisRequest, ContentPart, build_request, strip_data_uri
from .interpreter import (
    AnalysisError,
    EmptyResponseError,
    ParseError,
    extract_sources,
    interpret_reply,
)
from .service import NO_RETRY, AnalysisService, CallPolicy
from .uploads import UploadError, prepare_upload

__all__ = [
    "AnalysisRequest",
    "ContentPart",
    "build_request",
    "strip_data_uri",
    "AnalysisError",
    "EmptyResponseError",
    "ParseError",
    "extract_sources",
    "interpret_reply",
    "NO_RETRY",
    "AnalysisService",
    "CallPolicy",
    "UploadError",
    "prepare_upload",
]
