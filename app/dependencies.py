# app/dependencies.py
"""
Process-wide service instances.

The key-value store, session manager, history and analysis service are
created lazily from AppConfig. Tests swap them with set_store() /
set_provider() and reset_dependencies().
"""
from __future__ import annotations

import logging
from typing import Optional

from app.audit.service import AnalysisService, CallPolicy
from app.config import AppConfig, get_api_key, load_config
from app.history_store import HistoryStore
from app.providers import AnalysisProvider, ProviderFactory
from auth.service import LOGIN_DELAY_SECONDS, SIGNUP_DELAY_SECONDS, SessionManager
from storage import KeyValueStore, SqliteStore

logger = logging.getLogger(__name__)

_config: Optional[AppConfig] = None
_store: Optional[KeyValueStore] = None
_provider: Optional[AnalysisProvider] = None
_sessions: Optional[SessionManager] = None
_history: Optional[HistoryStore] = None
_analysis: Optional[AnalysisService] = None


def get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = load_config()
    return _config


def get_store() -> KeyValueStore:
    """Get the global key-value store singleton."""
    global _store
    if _store is None:
        _store = SqliteStore(get_config().db_path)
    return _store


def get_session_manager() -> SessionManager:
    global _sessions
    if _sessions is None:
        config = get_config()
        if config.simulate_latency:
            _sessions = SessionManager(get_store())
        else:
            _sessions = SessionManager(get_store(), signup_delay=0, login_delay=0)
        logger.debug(
            f"Session manager ready (latency={'on' if config.simulate_latency else 'off'}, "
            f"signup={SIGNUP_DELAY_SECONDS}s login={LOGIN_DELAY_SECONDS}s)"
        )
    return _sessions


def get_history_store() -> HistoryStore:
    """Get the global history store singleton."""
    global _history
    if _history is None:
        _history = HistoryStore(get_store())
    return _history


def get_provider() -> AnalysisProvider:
    global _provider
    if _provider is None:
        config = get_config()
        if config.provider == "gemini":
            _provider = ProviderFactory.get_provider(
                "gemini",
                api_key=get_api_key(),
                model=config.model,
                thinking_budget=config.thinking_budget,
                timeout_seconds=config.model_timeout_seconds,
            )
        else:
            _provider = ProviderFactory.get_provider(config.provider)
    return _provider


def get_analysis_service() -> AnalysisService:
    global _analysis
    if _analysis is None:
        config = get_config()
        policy = CallPolicy(
            timeout_seconds=config.model_timeout_seconds,
            max_retries=config.model_max_retries,
        )
        _analysis = AnalysisService(get_provider(), get_history_store(), policy)
    return _analysis


def set_store(store: KeyValueStore) -> None:
    """Use store for sessions and history (drops dependent singletons)."""
    global _store, _sessions, _history, _analysis
    _store = store
    _sessions = None
    _history = None
    _analysis = None


def set_provider(provider: AnalysisProvider) -> None:
    """Use provider for analyses."""
    global _provider, _analysis
    _provider = provider
    _analysis = None


def reset_dependencies() -> None:
    """Forget all instances; the next access rebuilds them from config."""
    global _config, _store, _provider, _sessions, _history, _analysis
    _config = None
    _store = None
    _provider = None
    _sessions = None
    _history = None
    _analysis = None
