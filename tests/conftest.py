"""
Pytest configuration and shared fixtures.

This module provides common fixtures for testing:
- Configuration pointing at a temporary data directory
- Password hashing and JWT handling
- Document and user stores
- API clients
"""

import os
import sys
from pathlib import Path
from typing import Generator

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Set test environment variables before imports
os.environ["JWT_SECRET"] = "test_jwt_secret_key_for_testing_only_32bytes!"
os.environ["BCRYPT_ROUNDS"] = "4"

from planner.auth import JWTHandler, PasswordHandler, UserStore, User
from planner.config import AuthConfig, Config, ServerConfig, StorageConfig
from planner.storage import DocumentStore


# =============================================================================
# Configuration
# =============================================================================

@pytest.fixture(scope="session")
def test_config():
    """Test configuration values."""
    return {
        "jwt_secret": "test_jwt_secret_key_for_testing_only_32bytes!",
        "username": "alice",
        "password": "password123",
        "first_name": "Alice",
        "last_name": "Liddell",
    }


@pytest.fixture
def data_dir(tmp_path) -> Path:
    """Temporary data directory for JSON collections."""
    return tmp_path / "data"


@pytest.fixture
def app_config(test_config, data_dir) -> Config:
    """Application config isolated to the temp data directory."""
    return Config(
        auth=AuthConfig(
            jwt_secret=test_config["jwt_secret"],
            jwt_expiry_seconds=86400 * 7,
            bcrypt_rounds=4
        ),
        storage=StorageConfig(data_dir=data_dir),
        server=ServerConfig(client_origin="*", log_level="DEBUG")
    )


# =============================================================================
# Auth Fixtures
# =============================================================================

@pytest.fixture
def password_handler() -> PasswordHandler:
    """Create a fast PasswordHandler (minimum bcrypt cost)."""
    return PasswordHandler(rounds=4)


@pytest.fixture
def jwt_handler(test_config) -> JWTHandler:
    """Create a JWTHandler with test secret."""
    return JWTHandler(secret_key=test_config["jwt_secret"])


@pytest.fixture
def principal(test_config) -> dict:
    """Token principal for a user that need not exist in any store."""
    return {
        "id": "user-id-123",
        "username": test_config["username"],
        "firstName": test_config["first_name"],
        "lastName": test_config["last_name"],
    }


@pytest.fixture
def valid_token(jwt_handler, principal) -> str:
    """Create a valid token."""
    return jwt_handler.issue(principal)


@pytest.fixture
def expired_token(jwt_handler, principal) -> str:
    """Create a token that expired a minute ago."""
    return jwt_handler.issue(principal, expires_in=-60)


# =============================================================================
# Store Fixtures
# =============================================================================

@pytest.fixture
def document_store(data_dir) -> DocumentStore:
    """Create a DocumentStore in a temporary directory."""
    return DocumentStore(data_dir)


@pytest.fixture
def user_store(document_store, password_handler) -> UserStore:
    """Create a UserStore over the temporary document store."""
    return UserStore(document_store, password_handler)


@pytest_asyncio.fixture
async def sample_user(user_store, test_config) -> User:
    """Create a sample user in the store."""
    return await user_store.create_user(
        username=test_config["username"],
        password=test_config["password"],
        first_name=test_config["first_name"],
        last_name=test_config["last_name"]
    )


# =============================================================================
# API Client Fixtures
# =============================================================================

@pytest.fixture
def api_app(app_config):
    """Create FastAPI app for testing."""
    from api.main import create_app
    return create_app(app_config)


@pytest.fixture
def api_client(api_app) -> Generator[TestClient, None, None]:
    """Create synchronous test client for API."""
    with TestClient(api_app) as client:
        yield client


@pytest.fixture
def signed_up_user(api_client, test_config) -> dict:
    """Sign up the default user through the API and return the profile."""
    response = api_client.post("/api/users", json={
        "username": test_config["username"],
        "password": test_config["password"],
        "firstName": test_config["first_name"],
        "lastName": test_config["last_name"],
    })
    assert response.status_code == 201
    return response.json()


@pytest.fixture
def auth_token(api_client, signed_up_user, test_config) -> str:
    """Log the default user in and return the auth token."""
    response = api_client.post("/api/auth/login", json={
        "username": test_config["username"],
        "password": test_config["password"],
    })
    assert response.status_code == 200
    return response.json()["authToken"]


@pytest.fixture
def auth_headers(auth_token) -> dict:
    return {"Authorization": f"Bearer {auth_token}"}


@pytest.fixture
def make_user_headers(api_client):
    """Factory: sign up and log in another user, returning Bearer headers."""
    def _make(username: str, password: str = "anotherpass1") -> dict:
        api_client.post("/api/users", json={"username": username, "password": password})
        response = api_client.post("/api/auth/login", json={"username": username, "password": password})
        return {"Authorization": f"Bearer {response.json()['authToken']}"}
    return _make


# =============================================================================
# Pytest Configuration
# =============================================================================

def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as unit test"
    )
    config.addinivalue_line(
        "markers", "api: mark test as API endpoint test"
    )
