"""Flask application factory and bootstrap.

This module provides the create_app() factory function for initializing
the Flask application with all blueprints, listeners, and configuration.
"""
from __future__ import annotations
import logging
from typing import Optional

from flask import Flask

from directory_api.config import AppConfig, load_settings
from directory_api.core.audit import AuditListener
from directory_api.core.events import ListenerService, LoggingListener
from directory_api.core.session import SessionRegistry

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Application Factory
# ─────────────────────────────────────────────────────────────────────────────
def create_app(
    cfg: Optional[AppConfig] = None,
    sessions: Optional[SessionRegistry] = None,
    listener_service: Optional[ListenerService] = None,
) -> Flask:
    """Create and configure Flask application.

    Args:
        cfg: Settings; loaded from the environment if None
        sessions: Session registry; demo sessions in demo mode, else empty
        listener_service: Event sink; if None, one is built with the logging
            listener and, when enabled, the audit listener
    """
    if cfg is None:
        cfg = load_settings()

    logging.getLogger("directory_api").setLevel(cfg.log_level)

    app = Flask(__name__)

    # Store config for easy access in routes
    app.config["APP_CONFIG"] = cfg
    app.config["SECRET_KEY"] = cfg.secret_key
    app.config["MAX_CONTENT_LENGTH"] = cfg.json_max_size_bytes

    if sessions is None:
        if cfg.demo_mode:
            from directory_api.demo import build_demo_sessions
            sessions = build_demo_sessions()
        else:
            sessions = SessionRegistry()
    app.config["SESSION_REGISTRY"] = sessions

    if listener_service is None:
        listener_service = ListenerService([LoggingListener()])
        if cfg.audit_log_enabled:
            listener_service.register(AuditListener(cfg.audit_log_file, cfg.audit_log_signing_key))
    app.config["LISTENER_SERVICE"] = listener_service

    # Register blueprints
    from directory_api.api import directories, errors, health

    app.register_blueprint(health.bp)
    app.register_blueprint(directories.bp, url_prefix=cfg.api_prefix)

    # Register error handlers
    errors.register_error_handlers(app)

    mode_label = "DEMO" if cfg.demo_mode else "PRODUCTION"
    logger.info("Mode=%s; directory API registered at %s; %d session(s)",
                mode_label, cfg.api_prefix, len(sessions))
    if cfg.demo_mode:
        logger.warning("Demo mode active - do not deploy with demo sessions")

    return app


# ─────────────────────────────────────────────────────────────────────────────
# Application Instance (for WSGI servers)
# ─────────────────────────────────────────────────────────────────────────────
app = create_app()


if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
