"""
Analysis pipeline: build request, call the model, interpret, save.

The model call is the only suspending step. By default it is made once
with no timeout; CallPolicy makes the timeout and retry behaviour an
explicit setting instead of a transport default.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Optional, Union
from uuid import uuid4

from app.audit.builder import AnalysisRequest, build_request
from app.audit.interpreter import interpret_reply
from app.history_store import HistoryStore
from app.models import AnalysisResult, InputMode
from app.providers.base import AnalysisProvider, ModelReply

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CallPolicy:
    """
    Timeout and retry policy for the model call.

    Attributes:
        timeout_seconds: Per-attempt timeout; None waits indefinitely
        max_retries: Extra attempts after a transient failure (0 = single attempt)
    """
    timeout_seconds: Optional[float] = None
    max_retries: int = 0

    async def call(self, provider: AnalysisProvider, request: AnalysisRequest) -> ModelReply:
        """
        Run provider.generate under this policy.

        Non-transient errors, and the last transient one, propagate unchanged.
        """
        attempt = 0
        while True:
            attempt += 1
            try:
                if self.timeout_seconds is None:
                    return await provider.generate(request)
                return await asyncio.wait_for(
                    provider.generate(request), timeout=self.timeout_seconds
                )
            except Exception as e:
                if attempt > self.max_retries or not provider.is_transient(e):
                    raise
                logger.warning(
                    f"Transient {provider.source_name} error on attempt {attempt}: {e!r}; retrying"
                )


NO_RETRY = CallPolicy()


class AnalysisService:
    """
    Runs analyses and records them in history.

    Usage:
        service = AnalysisService(provider, history)
        result = await service.analyze(text, "text")
    """

    def __init__(
        self,
        provider: AnalysisProvider,
        history: HistoryStore,
        policy: CallPolicy = NO_RETRY,
    ):
        self._provider = provider
        self._history = history
        self._policy = policy

    @property
    def provider(self) -> AnalysisProvider:
        return self._provider

    @property
    def policy(self) -> CallPolicy:
        return self._policy

    async def analyze(
        self,
        content: str,
        mode: Union[InputMode, str] = InputMode.TEXT,
        mime_type: Optional[str] = None,
        file_name: Optional[str] = None,
    ) -> AnalysisResult:
        """
        Analyze a document and save the result to history.

        Returns:
            The saved AnalysisResult (id and timestamp assigned)

        Raises:
            ConfigurationError: If the provider has no credential
            ValueError: If the input is empty or the mode unknown
            EmptyResponseError, ParseError: If the reply is unusable
            Exception: Transport errors from the provider, unmodified
        """
        self._provider.ensure_configured()
        request = build_request(content, mode, mime_type=mime_type, file_name=file_name)
        return await self.run(request)

    async def run(self, request: AnalysisRequest) -> AnalysisResult:
        """
        Call the model for an already built request and save the result.

        Any error from the call or the reply, including a ValueError raised
        by the model client, propagates unchanged and nothing is saved.
        """
        started = time.monotonic()
        try:
            reply = await self._policy.call(self._provider, request)
            result = interpret_reply(reply, request)
        except Exception as e:
            logger.error(f"Error analyzing contract (mode={request.mode.value}): {e}")
            raise

        result = result.model_copy(
            update={"id": str(uuid4()), "timestamp": int(time.time() * 1000)}
        )
        self._history.save_to_history(result)

        logger.info(
            f"Analysis {result.id} complete: verdict={result.verdict.value} "
            f"score={result.overall_risk_score} clauses={len(result.clauses)} "
            f"elapsed_ms={int((time.monotonic() - started) * 1000)}"
        )
        return result
