# app/config.py
"""
Centralized configuration management with startup validation.

Reads the model credential, model settings, storage location and the
call policy from the environment. Invalid optional values fall back to
defaults with a logged warning; a missing API key is only fatal when an
analysis is requested.
"""
import logging
import os
import re
from dataclasses import dataclass, field
from typing import Optional

logger = logging.getLogger(__name__)

# =============================================================================
# Constants
# =============================================================================

SERVICE_NAME = "legalis"
SERVICE_VERSION = "0.1.0"

DEFAULT_MODEL = "gemini-3-pro-preview"
DEFAULT_THINKING_BUDGET = 2048
DEFAULT_PROVIDER = "gemini"
DEFAULT_DB_PATH = os.path.join("data", "legalis.db")

# Base64 inflates uploads by a third, so the request cap sits above the file cap
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024
DEFAULT_MAX_REQUEST_SIZE_BYTES = 16 * 1024 * 1024
MIN_REQUEST_SIZE_BYTES = 1024  # 1KB minimum

API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

# Sensitive substrings that should never appear in logs
SENSITIVE_SUBSTRINGS = ("key", "token", "secret", "password", "credential", "auth")


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(Exception):
    """Raised when required configuration is missing or invalid."""

    pass


# =============================================================================
# Configuration Dataclass
# =============================================================================


@dataclass
class AppConfig:
    """Application configuration loaded from environment."""

    # Service info
    service_name: str = SERVICE_NAME
    service_version: str = SERVICE_VERSION
    environment: str = "development"

    # Model settings
    provider: str = DEFAULT_PROVIDER
    model: str = DEFAULT_MODEL
    thinking_budget: int = DEFAULT_THINKING_BUDGET
    api_key_present: bool = False

    # Call policy (no timeout, single attempt unless overridden)
    model_timeout_seconds: Optional[float] = None
    model_max_retries: int = 0

    # Storage
    db_path: str = DEFAULT_DB_PATH
    simulate_latency: bool = True

    # Request limits
    max_request_size_bytes: int = DEFAULT_MAX_REQUEST_SIZE_BYTES
    max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES

    # Warnings collected during config load
    warnings: list = field(default_factory=list)


# =============================================================================
# Configuration Loading
# =============================================================================


def _parse_int_env(
    name: str, default: int, min_value: Optional[int] = None
) -> tuple[int, Optional[str]]:
    """
    Parse an integer environment variable with validation.

    Returns (value, warning_message).
    On invalid input, returns default with a warning.
    """
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default, None

    try:
        value = int(raw)
    except ValueError:
        warning = f"{name}='{raw}' is not a valid integer; using default {default}"
        return default, warning

    if min_value is not None and value < min_value:
        warning = f"{name}={value} is below minimum {min_value}; using default {default}"
        return default, warning

    return value, None


def _parse_float_env(name: str) -> tuple[Optional[float], Optional[str]]:
    """Parse an optional positive float. Unset means None."""
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return None, None

    try:
        value = float(raw)
    except ValueError:
        return None, f"{name}='{raw}' is not a valid number; ignoring"

    if value <= 0:
        return None, f"{name}={value} must be positive; ignoring"

    return value, None


def _parse_bool_env(name: str, default: bool = False) -> bool:
    """Parse a boolean environment variable."""
    raw = os.environ.get(name, "").lower()
    if raw in ("true", "1", "yes", "on"):
        return True
    if raw in ("false", "0", "no", "off"):
        return False
    return default


def get_api_key() -> Optional[str]:
    """Get the model API key (GEMINI_API_KEY, then API_KEY)."""
    for name in API_KEY_ENV_VARS:
        value = os.environ.get(name)
        if value:
            return value
    return None


def require_api_key(api_key: Optional[str]) -> str:
    """
    Return api_key, failing if it is missing.

    Raises:
        ConfigurationError: If api_key is None or empty
    """
    if not api_key:
        raise ConfigurationError("API Key is missing.")
    return api_key


def load_config() -> AppConfig:
    """
    Load and validate application configuration from environment.

    Returns:
        AppConfig instance with validated configuration.
    """
    warnings = []

    environment = os.environ.get("RAILWAY_ENVIRONMENT", "development")

    provider = os.environ.get("LEGALIS_PROVIDER", DEFAULT_PROVIDER).strip().lower()
    model = os.environ.get("LEGALIS_MODEL", DEFAULT_MODEL).strip() or DEFAULT_MODEL

    thinking_budget, budget_warning = _parse_int_env(
        "LEGALIS_THINKING_BUDGET", DEFAULT_THINKING_BUDGET, min_value=0
    )
    if budget_warning:
        warnings.append(budget_warning)

    timeout, timeout_warning = _parse_float_env("LEGALIS_MODEL_TIMEOUT_SECONDS")
    if timeout_warning:
        warnings.append(timeout_warning)

    max_retries, retries_warning = _parse_int_env(
        "LEGALIS_MODEL_MAX_RETRIES", 0, min_value=0
    )
    if retries_warning:
        warnings.append(retries_warning)

    max_request_size, size_warning = _parse_int_env(
        "MAX_REQUEST_SIZE_BYTES",
        DEFAULT_MAX_REQUEST_SIZE_BYTES,
        min_value=MIN_REQUEST_SIZE_BYTES,
    )
    if size_warning:
        warnings.append(size_warning)

    max_upload, upload_warning = _parse_int_env(
        "LEGALIS_MAX_UPLOAD_BYTES", DEFAULT_MAX_UPLOAD_BYTES, min_value=1
    )
    if upload_warning:
        warnings.append(upload_warning)

    api_key_present = get_api_key() is not None
    if provider == "gemini" and not api_key_present:
        warnings.append(
            "GEMINI_API_KEY is not set; analysis requests will fail until it is configured"
        )

    for warning in warnings:
        logger.warning(f"[CONFIG] {warning}")

    return AppConfig(
        environment=environment,
        provider=provider,
        model=model,
        thinking_budget=thinking_budget,
        api_key_present=api_key_present,
        model_timeout_seconds=timeout,
        model_max_retries=max_retries,
        db_path=os.environ.get("LEGALIS_DB_PATH", DEFAULT_DB_PATH),
        simulate_latency=_parse_bool_env("LEGALIS_SIMULATE_LATENCY", True),
        max_request_size_bytes=max_request_size,
        max_upload_bytes=max_upload,
        warnings=warnings,
    )


def log_config_snapshot(config: AppConfig) -> str:
    """
    Generate and log a safe configuration snapshot.

    Returns the snapshot string for testing purposes.
    Never logs actual secret values - only boolean presence flags.
    """
    snapshot = (
        f"[STARTUP] service={config.service_name} "
        f"version={config.service_version} "
        f"environment={config.environment} "
        f"provider={config.provider} "
        f"model={config.model} "
        f"thinking_budget={config.thinking_budget} "
        f"model_timeout_seconds={config.model_timeout_seconds} "
        f"model_max_retries={config.model_max_retries} "
        f"db_path={config.db_path} "
        f"max_upload_bytes={config.max_upload_bytes} "
        f"api_key_present={config.api_key_present}"
    )
    logger.info(snapshot)
    return snapshot


def validate_config_snapshot_safety(snapshot: str) -> bool:
    """
    Validate that a config snapshot doesn't contain sensitive values.

    Returns True if safe, False if potentially unsafe.
    """
    snapshot_lower = snapshot.lower()

    # "api_key_present=true" is allowed; "key=AIza..." is not
    for sensitive in SENSITIVE_SUBSTRINGS:
        pattern = rf"{sensitive}=(?!true|false)"
        if re.search(pattern, snapshot_lower):
            return False

    return True
