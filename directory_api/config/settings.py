"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
import secrets
from dataclasses import dataclass
from pathlib import Path

from directory_api.core.audit import AUDIT_LOG_FILENAME

logger = logging.getLogger(__name__)

SECRETS_DIR = Path("/run/secrets")
DEMO_AUDIT_SIGNING_KEY = "demo-audit-signing-key-change-in-production"
LOG_LEVELS = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}


def _load_secret_from_file(secret_name: str, env_var: str | None = None) -> str | None:
    """
    Load secret from /run/secrets (Docker secrets pattern).

    Priority:
    1. /run/secrets/{secret_name} (Docker secrets mount)
    2. Environment variable (fallback)

    Args:
        secret_name: Name of the secret file in /run/secrets
        env_var: Optional environment variable name to check as fallback

    Returns:
        Secret value or None if not found
    """
    secret_file = SECRETS_DIR / secret_name

    # Priority 1: Read from /run/secrets
    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from %s", secret_name, SECRETS_DIR)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read %s/%s: %s", SECRETS_DIR, secret_name, e)

    # Priority 2: Fallback to environment variable
    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


def _env_bool(var_name: str, default: bool) -> bool:
    return os.environ.get(var_name, str(default)).strip().lower() == "true"


def _env_int(var_name: str, default: int) -> int:
    raw = os.environ.get(var_name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"Environment variable {var_name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"Environment variable {var_name} must be positive, got {value}")
    return value


@dataclass
class AppConfig:
    """Application configuration container."""
    # Mode
    demo_mode: bool

    # Flask
    secret_key: str
    secret_key_generated: bool = False
    api_prefix: str = "/api"
    log_level: str = "INFO"
    json_max_size_bytes: int = 65536  # 64 KB

    # Sessions
    token_lifetime_seconds: int = 3600

    # Audit
    audit_log_enabled: bool = True
    audit_log_dir: Path = Path(".runtime/audit")
    audit_log_signing_key: str = ""

    @property
    def audit_log_file(self) -> Path:
        return Path(self.audit_log_dir) / AUDIT_LOG_FILENAME


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets.

    Raises:
        RuntimeError: If a secret required in production mode is missing
        ValueError: If a setting has an invalid value
    """
    demo_mode = _env_bool("DEMO_MODE", False)

    # Flask secret key (also signs bearer tokens)
    secret_key = _load_secret_from_file("flask_secret_key", "FLASK_SECRET_KEY")
    secret_key_generated = False
    if not secret_key:
        if not demo_mode:
            raise RuntimeError("FLASK_SECRET_KEY not found in /run/secrets or environment")
        secret_key = secrets.token_urlsafe(48)
        secret_key_generated = True
        os.environ["FLASK_SECRET_KEY"] = secret_key
        logger.warning("[demo-mode] Generated temporary FLASK_SECRET_KEY")

    # Audit log signing key
    audit_log_signing_key = _load_secret_from_file("audit_log_signing_key", "AUDIT_LOG_SIGNING_KEY") or ""
    if not audit_log_signing_key and demo_mode:
        audit_log_signing_key = os.environ.get("AUDIT_LOG_SIGNING_KEY_DEMO", DEMO_AUDIT_SIGNING_KEY)
        logger.warning("[demo-mode] Using demo AUDIT_LOG_SIGNING_KEY")

    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ValueError(f"LOG_LEVEL must be one of {sorted(LOG_LEVELS)}, got {log_level!r}")

    api_prefix = "/" + os.environ.get("API_PREFIX", "/api").strip().strip("/")

    cfg = AppConfig(
        demo_mode=demo_mode,
        secret_key=secret_key,
        secret_key_generated=secret_key_generated,
        api_prefix=api_prefix,
        log_level=log_level,
        json_max_size_bytes=_env_int("JSON_MAX_SIZE_BYTES", 65536),
        token_lifetime_seconds=_env_int("TOKEN_LIFETIME_SECONDS", 3600),
        audit_log_enabled=_env_bool("AUDIT_LOG_ENABLED", True),
        audit_log_dir=Path(os.environ.get("AUDIT_LOG_DIR", ".runtime/audit")),
        audit_log_signing_key=audit_log_signing_key,
    )

    mode_label = "DEMO" if demo_mode else "PRODUCTION"
    logger.info("Mode=%s; api_prefix=%s; audit_log=%s", mode_label, cfg.api_prefix,
                cfg.audit_log_file if cfg.audit_log_enabled else "disabled")
    if demo_mode:
        logger.warning("Demo credentials in use. Do not deploy with these defaults.")

    return cfg
