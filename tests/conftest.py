"""Pytest shared fixtures for the Cognito admin API."""
import os
import pathlib
import sys
from datetime import datetime, timezone
from unittest.mock import MagicMock

# Add project root to Python path
ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Configure test environment BEFORE any app imports
# (cognito_admin.flask_app builds a module-level app on import)
os.environ.setdefault("DEMO_MODE", "true")
os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")

import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import rsa

from cognito_admin.config import AppConfig
from cognito_admin.core.cognito import CognitoClient, GroupService, UserService
from cognito_admin.flask_app import create_app

POOL_ID = "us-east-1_TestPool1"
APP_CLIENT_ID = "test-app-client"


def make_config(**overrides) -> AppConfig:
    base = dict(
        demo_mode=False,
        aws_region="us-east-1",
        cognito_user_pool_id=POOL_ID,
        cognito_app_client_id=APP_CLIENT_ID,
        auth_enabled=False,
        admin_group="",
    )
    base.update(overrides)
    return AppConfig(**base)


def cognito_user(username, email=None, status="CONFIRMED", enabled=True, created=None, **attributes):
    """Build a Cognito UserType dict as returned by ListUsers."""
    attrs = [{"Name": "sub", "Value": f"sub-{username}"}]
    if email is not None:
        attrs.append({"Name": "email", "Value": email})
    attrs.extend({"Name": name, "Value": value} for name, value in attributes.items())
    user = {
        "Username": username,
        "Attributes": attrs,
        "Enabled": enabled,
        "UserStatus": status,
    }
    if created is not None:
        user["UserCreateDate"] = created
        user["UserLastModifiedDate"] = created
    return user


def cognito_group(name, description=None, precedence=None, created=None):
    """Build a Cognito GroupType dict."""
    group = {"GroupName": name, "UserPoolId": POOL_ID}
    if description is not None:
        group["Description"] = description
    if precedence is not None:
        group["Precedence"] = precedence
    if created is not None:
        group["CreationDate"] = created
        group["LastModifiedDate"] = created
    return group


# ─────────────────────────────────────────────────────────────────────────────
# Cognito Client Mocks
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def boto_client():
    """MagicMock standing in for a boto3 cognito-idp client."""
    return MagicMock(name="cognito-idp")


@pytest.fixture()
def cognito(boto_client):
    return CognitoClient(boto_client, POOL_ID)


@pytest.fixture()
def user_service(cognito):
    return UserService(cognito, make_config())


@pytest.fixture()
def group_service(cognito):
    return GroupService(cognito, make_config())


@pytest.fixture()
def created_at():
    return datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)


# ─────────────────────────────────────────────────────────────────────────────
# Flask Test Client
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture()
def app():
    """Flask app whose services are replaced by MagicMocks."""
    flask_app = create_app(config=make_config(), cognito_client=MagicMock())
    flask_app.config.update(TESTING=True)
    flask_app.extensions["user_service"] = MagicMock(spec=UserService)
    flask_app.extensions["group_service"] = MagicMock(spec=GroupService)
    return flask_app


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


@pytest.fixture()
def users_mock(app):
    return app.extensions["user_service"]


@pytest.fixture()
def groups_mock(app):
    return app.extensions["group_service"]


# ─────────────────────────────────────────────────────────────────────────────
# RSA Key Pair for JWT Testing
# ─────────────────────────────────────────────────────────────────────────────
@pytest.fixture(scope="session")
def rsa_key_pair():
    """Generate RSA key pair for JWT signing in tests."""
    private_key = rsa.generate_private_key(public_exponent=65537, key_size=2048)

    private_pem = private_key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.PKCS8,
        encryption_algorithm=serialization.NoEncryption(),
    )
    public_key = private_key.public_key()

    return {
        "private_key": private_key,
        "private_pem": private_pem,
        "public_key": public_key,
    }
