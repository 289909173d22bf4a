"""
API dependencies.

Provides dependency injection for services and bearer-token authentication.
Services are built once per app by create_app() and kept on app.state.
"""

import logging
from typing import Optional, Annotated
from dataclasses import dataclass

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from planner.config import Config
from planner.auth import JWTHandler, PasswordHandler, UserStore
from planner.services import EVENTS, ITEMS, OwnedResourceService, UserAuthService
from planner.storage import DocumentStore

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer(auto_error=False)


@dataclass
class Services:
    """Container for all services."""
    config: Config
    store: DocumentStore
    jwt: JWTHandler
    users: UserStore
    user_auth: UserAuthService
    events: OwnedResourceService
    items: OwnedResourceService


@dataclass
class Principal:
    """Identity attached to a request by a verified bearer token."""
    id: str
    username: str
    first_name: str = ""
    last_name: str = ""


def build_services(config: Config) -> Services:
    """Create every service from an explicit config."""
    logger.info("Initializing services...")

    store = DocumentStore(config.storage.data_dir)
    jwt = JWTHandler(
        secret_key=config.auth.jwt_secret,
        expires_in=config.auth.jwt_expiry_seconds
    )
    users = UserStore(store, PasswordHandler(rounds=config.auth.bcrypt_rounds))

    services = Services(
        config=config,
        store=store,
        jwt=jwt,
        users=users,
        user_auth=UserAuthService(jwt, users),
        events=OwnedResourceService(store, EVENTS),
        items=OwnedResourceService(store, ITEMS)
    )

    logger.info(f"Services initialized (data dir: {config.storage.data_dir})")
    return services


def services_dep(request: Request) -> Services:
    """FastAPI dependency for services."""
    return request.app.state.services


ServicesDep = Annotated[Services, Depends(services_dep)]


def unauthorized() -> HTTPException:
    """The one 401 every auth failure collapses into."""
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"}
    )


# Authentication dependencies

async def get_bearer_token(
    credentials: Annotated[Optional[HTTPAuthorizationCredentials], Depends(security)]
) -> str:
    """
    Extract the raw bearer token.

    Raises 401 if the Authorization header is absent or not a Bearer token.
    """
    if credentials is None or not credentials.credentials:
        raise unauthorized()
    return credentials.credentials


BearerToken = Annotated[str, Depends(get_bearer_token)]


async def get_current_principal(token: BearerToken, services: ServicesDep) -> Principal:
    """
    Verify the bearer token and return its principal.

    Raises 401 on any failure; expired and invalid tokens look the same.
    """
    payload = services.user_auth.verify_access_token(token)
    if payload is None:
        raise unauthorized()

    user = payload.user
    return Principal(
        id=user["id"],
        username=user["username"],
        first_name=user.get("firstName", ""),
        last_name=user.get("lastName", "")
    )


CurrentPrincipal = Annotated[Principal, Depends(get_current_principal)]
