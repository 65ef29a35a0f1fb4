"""
Analysis response interpreter.

Validates the model's JSON reply into an AnalysisResult, records what
was analyzed and attaches the web sources cited by search-grounded calls.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, List, Optional

from pydantic import ValidationError as SchemaError

from app.audit.builder import AnalysisRequest
from app.models import AnalysisResult
from app.providers.base import ModelReply

logger = logging.getLogger(__name__)


class AnalysisError(Exception):
    """Base error for a failed analysis reply."""

    pass


class EmptyResponseError(AnalysisError):
    """The model returned no body."""

    pass


class ParseError(AnalysisError):
    """The model body is not valid JSON or does not match the schema."""

    pass


def _strip_code_fence(text: str) -> str:
    """Remove a markdown code fence around a JSON body, if present."""
    text = text.strip()
    if text.startswith("```json"):
        text = text[7:]
    elif text.startswith("```"):
        text = text[3:]
    if text.endswith("```"):
        text = text[:-3]
    return text.strip()


def _describe(error: SchemaError) -> str:
    first = error.errors()[0]
    location = ".".join(str(part) for part in first["loc"]) or "reply"
    return f"{location}: {first['msg']}"


def extract_sources(grounding_chunks: Optional[Iterable[Any]]) -> Optional[List[str]]:
    """
    Collect cited web addresses from grounding chunks.

    Each chunk looks like {"web": {"uri": "...", "title": "..."}}; chunks
    without a string URI are ignored. Duplicates are dropped keeping the
    first occurrence.

    Returns:
        List of URIs, or None if there are none
    """
    sources: List[str] = []
    for chunk in grounding_chunks or []:
        web = chunk.get("web") if isinstance(chunk, dict) else None
        uri = web.get("uri") if isinstance(web, dict) else None
        if isinstance(uri, str) and uri not in sources:
            sources.append(uri)
    return sources or None


def interpret_reply(reply: ModelReply, request: AnalysisRequest) -> AnalysisResult:
    """
    Turn a model reply into an AnalysisResult.

    Args:
        reply: Raw reply from the provider
        request: The request that produced it

    Returns:
        AnalysisResult with input metadata and, for search calls, sources

    Raises:
        EmptyResponseError: If the reply body is absent or blank
        ParseError: If the body is not JSON or violates the schema
    """
    if reply.text is None or not reply.text.strip():
        raise EmptyResponseError("No response from AI.")

    try:
        result = AnalysisResult.model_validate_json(_strip_code_fence(reply.text))
    except SchemaError as e:
        logger.error(f"Model reply rejected: {e.error_count()} validation errors")
        raise ParseError(f"Invalid analysis response ({_describe(e)})") from e

    sources = extract_sources(reply.grounding_chunks) if request.use_search else None

    return result.model_copy(update={"input": request.input, "sources": sources})
