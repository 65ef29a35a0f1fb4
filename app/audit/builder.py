"""
Analysis request builder.

Turns user input (contract text, a URL or company name, or a base64 file
payload) into the provider-neutral request sent to the model: ordered
content parts, the web-search flag, the declared response schema and the
input metadata recorded with the result.
"""

from __future__ import annotations

import base64
import binascii
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from app.audit.prompts import COMMON_INSTRUCTION, text_prompt, url_prompt
from app.audit.schema import RESPONSE_SCHEMA
from app.models import AnalysisInput, InputMode

logger = logging.getLogger(__name__)

DEFAULT_FILE_NAME = "Uploaded Document"
BASE64_MARKER = "base64,"


@dataclass
class ContentPart:
    """
    One part of the model request.

    Either text, or inline data (base64 string plus MIME type).
    """

    text: Optional[str] = None
    mime_type: Optional[str] = None
    data: Optional[str] = None

    @property
    def is_inline_data(self) -> bool:
        return self.data is not None


@dataclass
class AnalysisRequest:
    """Everything needed for one model call."""

    parts: List[ContentPart]
    input: AnalysisInput
    use_search: bool = False
    response_schema: Dict[str, Any] = field(default_factory=lambda: RESPONSE_SCHEMA)

    @property
    def mode(self) -> InputMode:
        return self.input.mode


def strip_data_uri(content: str) -> str:
    """Drop a "data:<mime>;base64," prefix, leaving the bare base64 payload."""
    if BASE64_MARKER in content:
        return content.split(BASE64_MARKER, 1)[1]
    return content


def build_request(
    content: str,
    mode: Union[InputMode, str] = InputMode.TEXT,
    mime_type: Optional[str] = None,
    file_name: Optional[str] = None,
) -> AnalysisRequest:
    """
    Build the model request for one analysis.

    Args:
        content: Contract text, URL/company name, or base64 file payload
        mode: "text", "url" or "file"
        mime_type: MIME type of the file payload (file mode)
        file_name: Original filename, recorded instead of the payload

    Returns:
        AnalysisRequest

    Raises:
        ValueError: If mode is unknown, content is empty, or a file payload
            is not valid base64
    """
    mode = InputMode(mode)
    if not content or not content.strip():
        raise ValueError("Nothing to analyze: content is empty")

    if mode == InputMode.URL:
        target = content.strip()
        return AnalysisRequest(
            parts=[ContentPart(text=url_prompt(target))],
            input=AnalysisInput(mode=mode, value=target),
            use_search=True,
        )

    if mode == InputMode.FILE and mime_type:
        payload = strip_data_uri(content).strip()
        try:
            base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise ValueError(f"File payload is not valid base64: {e}") from e
        return AnalysisRequest(
            parts=[
                ContentPart(text=COMMON_INSTRUCTION),
                ContentPart(mime_type=mime_type, data=payload),
            ],
            input=AnalysisInput(
                mode=mode,
                value=file_name or DEFAULT_FILE_NAME,
                mime_type=mime_type,
            ),
        )

    if mode == InputMode.FILE:
        # Without a MIME type the payload is treated as contract text, but the
        # recorded input still never carries it
        logger.warning("File submitted without MIME type; sending as text")
        return AnalysisRequest(
            parts=[ContentPart(text=text_prompt(content))],
            input=AnalysisInput(mode=mode, value=file_name or DEFAULT_FILE_NAME),
        )

    return AnalysisRequest(
        parts=[ContentPart(text=text_prompt(content))],
        input=AnalysisInput(mode=mode, value=content),
    )
