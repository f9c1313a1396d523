"""Gunicorn configuration for the Cognito admin API.

Settings are read from the environment:
- GUNICORN_BIND (default 0.0.0.0:8000)
- GUNICORN_WORKERS (default 2)
- GUNICORN_TIMEOUT (default 30 seconds)
- LOG_LEVEL (default info)

Run with:
    gunicorn -c gunicorn.conf.py cognito_admin.flask_app:app
"""
import os

bind = os.environ.get("GUNICORN_BIND", "0.0.0.0:8000")
workers = int(os.environ.get("GUNICORN_WORKERS", "2"))
timeout = int(os.environ.get("GUNICORN_TIMEOUT", "30"))
loglevel = os.environ.get("LOG_LEVEL", "info").lower()
accesslog = "-"
errorlog = "-"


def post_fork(server, worker):
    """
    Called just after a worker has been forked.

    Each worker builds its own app (and boto3 client) on import; this only
    reports which user pool the worker will administer.
    """
    demo_mode = os.environ.get("DEMO_MODE", "false").lower() == "true"
    pool_id = os.environ.get("COGNITO_USER_POOL_ID", "<demo>" if demo_mode else "<unset>")
    worker.log.info("Worker %s serving user pool %s (demo_mode=%s)", worker.pid, pool_id, demo_mode)

    # Static credentials are optional; the default boto3 chain applies otherwise
    from pathlib import Path
    secrets_dir = Path("/run/secrets")
    if secrets_dir.exists() and secrets_dir.is_dir():
        secret_files = list(secrets_dir.glob("aws_*"))
        if secret_files:
            worker.log.info(f"Found {len(secret_files)} AWS secrets in /run/secrets")
