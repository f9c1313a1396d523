"""Settings loader with environment variable and Docker secrets integration."""
from __future__ import annotations
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)

DEMO_USER_POOL_ID = "us-east-1_demo00000"


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
    secret_file = Path("/run/secrets") / secret_name

    if secret_file.exists() and secret_file.is_file():
        try:
            secret_value = secret_file.read_text().strip()
            if secret_value:
                logger.info("Loaded %s from /run/secrets", secret_name)
                return secret_value
        except OSError as e:
            logger.warning("Failed to read /run/secrets/%s: %s", secret_name, e)

    if env_var:
        secret_value = os.getenv(env_var)
        if secret_value:
            return secret_value

    return None


def _env_flag(var_name: str, default: bool) -> bool:
    return os.environ.get(var_name, str(default)).strip().lower() == "true"


def _env_int(var_name: str, default: int) -> int:
    raw = os.environ.get(var_name, "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise RuntimeError(f"Environment variable {var_name} must be an integer, got {raw!r}")


@dataclass
class AppConfig:
    """Application configuration container."""
    # Mode
    demo_mode: bool

    # AWS / Cognito
    aws_region: str = "us-east-1"
    cognito_user_pool_id: str = ""
    cognito_app_client_id: str = ""
    cognito_endpoint_url: Optional[str] = None
    aws_access_key_id: Optional[str] = None
    aws_secret_access_key: Optional[str] = None

    # API authentication
    auth_enabled: bool = False
    admin_group: str = ""

    # Listing
    upstream_fetch_cap: int = 60
    over_fetch_factor: int = 3
    default_page_size: int = 20
    max_page_size: int = 100

    # Logging
    log_level: str = "INFO"

    @property
    def cognito_issuer(self) -> str:
        """Issuer URL of access tokens minted by the configured user pool."""
        return f"https://cognito-idp.{self.aws_region}.amazonaws.com/{self.cognito_user_pool_id}"

    @property
    def jwks_url(self) -> str:
        return f"{self.cognito_issuer}/.well-known/jwks.json"

    def upstream_limit(self, page_size: int) -> int:
        """Number of records to request from Cognito for one listing page.

        Over-fetches so in-memory filtering still has enough candidates,
        capped at the Cognito maximum for ListUsers/ListGroups.
        """
        return max(1, min(self.upstream_fetch_cap, page_size * self.over_fetch_factor))


def _get_or_default(var_name: str, demo_default: Optional[str] = None, required: bool = True, demo_mode: bool = False) -> str:
    """Get environment variable or use demo default."""
    value = os.environ.get(var_name)
    if value:
        return value

    if demo_mode and demo_default is not None:
        logger.info("[demo-mode] Using default for %s", var_name)
        return demo_default

    if not required:
        return ""

    raise RuntimeError(f"Environment variable {var_name} is required in production mode.")


def load_settings() -> AppConfig:
    """Load application settings from environment and /run/secrets."""
    demo_mode = _env_flag("DEMO_MODE", False)

    aws_region = os.environ.get("AWS_REGION", os.environ.get("AWS_DEFAULT_REGION", "us-east-1"))
    cognito_user_pool_id = _get_or_default(
        "COGNITO_USER_POOL_ID",
        demo_default=DEMO_USER_POOL_ID,
        demo_mode=demo_mode,
    )
    cognito_app_client_id = os.environ.get("COGNITO_APP_CLIENT_ID", "")
    cognito_endpoint_url = os.environ.get("COGNITO_ENDPOINT_URL") or None

    # Static credentials are optional; boto3 falls back to its default chain
    aws_access_key_id = _load_secret_from_file("aws_access_key_id", "AWS_ACCESS_KEY_ID")
    aws_secret_access_key = _load_secret_from_file("aws_secret_access_key", "AWS_SECRET_ACCESS_KEY")

    auth_enabled = _env_flag("API_AUTH_ENABLED", False)
    admin_group = os.environ.get("API_ADMIN_GROUP", "").strip()

    upstream_fetch_cap = _env_int("LISTING_UPSTREAM_FETCH_CAP", 60)
    over_fetch_factor = _env_int("LISTING_OVER_FETCH_FACTOR", 3)
    default_page_size = _env_int("LISTING_DEFAULT_PAGE_SIZE", 20)
    max_page_size = _env_int("LISTING_MAX_PAGE_SIZE", 100)
    if not 1 <= upstream_fetch_cap <= 60:
        raise RuntimeError("LISTING_UPSTREAM_FETCH_CAP must be between 1 and 60 (Cognito limit).")
    if not 1 <= max_page_size <= 100:
        raise RuntimeError("LISTING_MAX_PAGE_SIZE must be between 1 and 100.")
    if not 1 <= default_page_size <= max_page_size:
        raise RuntimeError("LISTING_DEFAULT_PAGE_SIZE must be between 1 and LISTING_MAX_PAGE_SIZE.")

    log_level = os.environ.get("LOG_LEVEL", "INFO").strip().upper()

    mode_label = "DEMO" if demo_mode else "PRODUCTION"
    logger.info(
        "[settings] Mode=%s; region=%s; user_pool=%s; auth_enabled=%s",
        mode_label, aws_region, cognito_user_pool_id, auth_enabled,
    )
    if demo_mode:
        logger.warning("[settings] Demo user pool in use. Do not deploy with these defaults.")

    return AppConfig(
        demo_mode=demo_mode,
        aws_region=aws_region,
        cognito_user_pool_id=cognito_user_pool_id,
        cognito_app_client_id=cognito_app_client_id,
        cognito_endpoint_url=cognito_endpoint_url,
        aws_access_key_id=aws_access_key_id,
        aws_secret_access_key=aws_secret_access_key,
        auth_enabled=auth_enabled,
        admin_group=admin_group,
        upstream_fetch_cap=upstream_fetch_cap,
        over_fetch_factor=over_fetch_factor,
        default_page_size=default_page_size,
        max_page_size=max_page_size,
        log_level=log_level,
    )
