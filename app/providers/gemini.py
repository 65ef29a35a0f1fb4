"""
Gemini provider using the google-genai SDK.

Sends the built request with JSON structured output, a thinking budget
and, for URL analyses, the Google Search tool.
"""

from __future__ import annotations

import asyncio
import base64
import binascii
import logging
from typing import Any, Dict, List, Optional

import httpx
from google import genai
from google.genai import errors as genai_errors
from google.genai import types

from app.audit.builder import AnalysisRequest
from app.config import DEFAULT_MODEL, DEFAULT_THINKING_BUDGET, require_api_key
from app.providers.base import AnalysisProvider, ModelReply

logger = logging.getLogger(__name__)

RESPONSE_MIME_TYPE = "application/json"
RETRYABLE_STATUS_CODES = (429,)


class GeminiProvider(AnalysisProvider):
    """
    Calls Gemini generate_content once per analysis.

    Usage:
        provider = GeminiProvider(api_key="...")
        reply = await provider.generate(request)
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        model: str = DEFAULT_MODEL,
        thinking_budget: int = DEFAULT_THINKING_BUDGET,
        timeout_seconds: Optional[float] = None,
    ):
        """
        Args:
            api_key: Gemini API key; analysis fails with ConfigurationError without it
            model: Model name
            thinking_budget: Thinking token budget (0 disables thinking)
            timeout_seconds: HTTP timeout; None keeps the SDK default
        """
        self._api_key = api_key
        self._model = model
        self._thinking_budget = thinking_budget
        self._timeout_seconds = timeout_seconds
        self._client: Optional[genai.Client] = None

    @property
    def source_name(self) -> str:
        return "gemini"

    @property
    def model(self) -> str:
        return self._model

    def ensure_configured(self) -> None:
        require_api_key(self._api_key)

    def _get_client(self) -> genai.Client:
        api_key = require_api_key(self._api_key)
        if self._client is None:
            http_options = None
            if self._timeout_seconds:
                # HttpOptions.timeout is in milliseconds
                http_options = types.HttpOptions(timeout=int(self._timeout_seconds * 1000))
            self._client = genai.Client(api_key=api_key, http_options=http_options)
        return self._client

    def _build_parts(self, request: AnalysisRequest) -> List[types.Part]:
        parts = []
        for part in request.parts:
            if part.is_inline_data:
                try:
                    payload = base64.b64decode(part.data, validate=True)
                except (binascii.Error, ValueError) as e:
                    raise ValueError(f"File payload is not valid base64: {e}") from e
                parts.append(types.Part.from_bytes(data=payload, mime_type=part.mime_type))
            else:
                parts.append(types.Part.from_text(text=part.text))
        return parts

    def _build_config(self, request: AnalysisRequest) -> types.GenerateContentConfig:
        tools = None
        if request.use_search:
            tools = [types.Tool(google_search=types.GoogleSearch())]

        return types.GenerateContentConfig(
            thinking_config=types.ThinkingConfig(thinking_budget=self._thinking_budget),
            tools=tools,
            response_mime_type=RESPONSE_MIME_TYPE,
            response_schema=request.response_schema,
        )

    async def generate(self, request: AnalysisRequest) -> ModelReply:
        client = self._get_client()

        logger.info(
            f"Calling {self._model} mode={request.mode.value} "
            f"search={request.use_search} parts={len(request.parts)}"
        )
        response = await client.aio.models.generate_content(
            model=self._model,
            contents=types.Content(role="user", parts=self._build_parts(request)),
            config=self._build_config(request),
        )

        return ModelReply(
            text=response.text,
            grounding_chunks=_grounding_chunks(response),
        )

    def is_transient(self, error: BaseException) -> bool:
        if isinstance(error, (asyncio.TimeoutError, httpx.TransportError)):
            return True
        if isinstance(error, genai_errors.ServerError):
            return True
        if isinstance(error, genai_errors.APIError):
            return error.code in RETRYABLE_STATUS_CODES
        return False


def _grounding_chunks(response: Any) -> List[Dict[str, Any]]:
    """Grounding chunks of the first candidate as plain dicts."""
    candidates = getattr(response, "candidates", None) or []
    if not candidates:
        return []

    metadata = getattr(candidates[0], "grounding_metadata", None)
    chunks = getattr(metadata, "grounding_chunks", None) or []
    return [chunk.model_dump(exclude_none=True) for chunk in chunks]
