"""Gunicorn configuration for the directory API.

Run with:
    gunicorn -c gunicorn.conf.py

Sessions and the demo directories live in process memory, so the service
runs a single worker process and scales with threads instead. Every worker
would otherwise hold its own copy of each directory.

Secrets are read by directory_api.config.settings from /run/secrets first,
then from the environment.
"""
import os

wsgi_app = "directory_api.flask_app:app"
bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = 1
threads = int(os.environ.get("GUNICORN_THREADS", "8"))
accesslog = "-"
errorlog = "-"
loglevel = os.environ.get("LOG_LEVEL", "info").lower()


def post_fork(server, worker):
    """Report where secrets will come from before the app is loaded."""
    from pathlib import Path

    demo_mode = os.environ.get("DEMO_MODE", "false").lower() == "true"
    if demo_mode:
        worker.log.warning("DEMO_MODE=true: demo sessions and generated secrets in use")
        return

    secrets_dir = Path("/run/secrets")
    if secrets_dir.is_dir() and (secrets_dir / "flask_secret_key").is_file():
        worker.log.info("Using FLASK_SECRET_KEY from %s", secrets_dir)
    elif os.environ.get("FLASK_SECRET_KEY"):
        worker.log.info("Using FLASK_SECRET_KEY from environment")
    else:
        worker.log.error("FLASK_SECRET_KEY missing from /run/secrets and environment; startup will fail")
