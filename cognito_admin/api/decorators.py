"""
Flask decorators for authentication and authorization.

This module provides OAuth 2.0 Bearer Token validation for the admin API.
Implements RFC 6750 (Bearer Token) and validates access tokens issued by the
configured Cognito user pool.

Security:
- RSA-SHA256 signature verification via the pool JWKS (RFC 7517)
- Expiration, issuer, token_use and client_id validation
- Optional admin group check on the cognito:groups claim
- JWKS caching for performance (1-hour refresh)
"""

import hashlib
import logging
from functools import wraps
from typing import Any, Dict, Optional

import jwt
from jwt import PyJWKClient
from jwt.exceptions import (
    DecodeError,
    ExpiredSignatureError,
    InvalidIssuerError,
    InvalidSignatureError,
    InvalidTokenError,
    PyJWKClientError,
)
from flask import current_app, g, request

from ..core.errors import AuthenticationError, AuthorizationError

logger = logging.getLogger(__name__)

# Global JWKS client (cached singleton)
_jwks_client: Optional[PyJWKClient] = None

# ============================================================================
# OAuth 2.0 Bearer Token Validation (RFC 6750)
# ============================================================================

class TokenValidationError(Exception):
    """Exception raised when access token validation fails."""
    pass


def get_jwks_client() -> PyJWKClient:
    """
    Get cached JWKS client (singleton pattern).

    The user pool publishes its signing keys at
    https://cognito-idp.<region>.amazonaws.com/<pool>/.well-known/jwks.json

    Returns:
        PyJWKClient: Configured client for the user pool
    """
    global _jwks_client

    if _jwks_client is None:
        cfg = current_app.config["APP_CONFIG"]
        logger.info("Initializing JWKS client for: %s", cfg.jwks_url)
        _jwks_client = PyJWKClient(
            cfg.jwks_url,
            cache_keys=True,
            max_cached_keys=16,
            lifespan=3600,
            headers={"User-Agent": "cognito-admin-api/1.0"},
        )

    return _jwks_client


def _token_fingerprint(token: str) -> str:
    return hashlib.sha256(token.encode("utf-8")).hexdigest()[:12]


def validate_access_token(token: str) -> Dict[str, Any]:
    """
    Validate a Cognito access token.

    Validations performed:
    1. Signature verification (RS256 via JWKS)
    2. Expiration (exp claim)
    3. Issuer (iss claim equals the user pool issuer)
    4. token_use == "access"
    5. client_id (when COGNITO_APP_CLIENT_ID is configured)

    Cognito access tokens carry no aud claim, so audience is not verified.

    Args:
        token: JWT string (without "Bearer " prefix)

    Returns:
        dict: Validated token claims

    Raises:
        TokenValidationError: If any validation fails
    """
    cfg = current_app.config["APP_CONFIG"]

    try:
        signing_key = get_jwks_client().get_signing_key_from_jwt(token)
        claims = jwt.decode(
            token,
            signing_key.key,
            algorithms=["RS256"],
            issuer=cfg.cognito_issuer,
            options={
                "verify_signature": True,
                "verify_exp": True,
                "verify_iss": True,
                "verify_aud": False,
                "require": ["exp", "iss", "token_use"],
            },
            leeway=5,
        )
    except ExpiredSignatureError:
        raise TokenValidationError("Token expired (exp claim)")
    except InvalidIssuerError as e:
        raise TokenValidationError(f"Invalid issuer (token from another user pool): {e}")
    except InvalidSignatureError:
        raise TokenValidationError("Invalid signature (token tampered or wrong key)")
    except DecodeError as e:
        raise TokenValidationError(f"Token decode error (malformed JWT): {e}")
    except (InvalidTokenError, PyJWKClientError) as e:
        raise TokenValidationError(f"Token validation failed: {e}")

    if claims.get("token_use") != "access":
        raise TokenValidationError("Token is not an access token (token_use claim)")

    if cfg.cognito_app_client_id and claims.get("client_id") != cfg.cognito_app_client_id:
        raise TokenValidationError("Token was issued to another app client (client_id claim)")

    logger.debug("JWT validated for client: %s", claims.get("client_id", "unknown"))
    return claims


def require_bearer_token(fn):
    """
    Decorator requiring a valid Cognito Bearer token when API auth is enabled.

    With API_AUTH_ENABLED=false the route runs unauthenticated. When
    API_ADMIN_GROUP is set, the token's cognito:groups must include it.

    Raises:
        AuthenticationError: Missing, malformed, invalid or expired token (401)
        AuthorizationError: Token lacks the admin group (403)

    Example:
        @bp.route("/api/users", methods=["POST"])
        @require_bearer_token
        def create_user():
            ...
    """
    @wraps(fn)
    def wrapper(*args, **kwargs):
        cfg = current_app.config["APP_CONFIG"]
        if not cfg.auth_enabled:
            return fn(*args, **kwargs)

        auth_header = request.headers.get("Authorization", "")
        if not auth_header:
            logger.warning("API request missing Authorization header")
            raise AuthenticationError("Authorization header required. Use 'Authorization: Bearer <token>'")
        if not auth_header.startswith("Bearer "):
            logger.warning("API request with invalid Authorization format")
            raise AuthenticationError("Invalid Authorization header format. Expected 'Bearer <token>'")

        token = auth_header[7:].strip()
        if not token:
            raise AuthenticationError("Bearer token is empty")

        try:
            claims = validate_access_token(token)
        except TokenValidationError as e:
            logger.warning("JWT validation failed for token %s: %s", _token_fingerprint(token), e)
            raise AuthenticationError(str(e))

        if cfg.admin_group:
            groups = claims.get("cognito:groups") or []
            if cfg.admin_group not in groups:
                logger.warning(
                    "API request lacks admin group %s (client %s)",
                    cfg.admin_group, claims.get("client_id"),
                )
                raise AuthorizationError(f"Required group: {cfg.admin_group}")

        g.token_claims = claims
        return fn(*args, **kwargs)

    return wrapper


def get_token_claims() -> Optional[dict]:
    """
    Get validated token claims of the current request.

    Returns:
        dict: JWT claims, or None when auth is disabled
    """
    return getattr(g, "token_claims", None)


def get_acting_principal() -> str:
    """Name of the caller for audit log lines ("anonymous" when auth is disabled)."""
    claims = get_token_claims()
    if not claims:
        return "anonymous"
    return claims.get("username") or claims.get("client_id") or "unknown"
