"""Configuration module for the Planner API."""

import os
from dataclasses import dataclass, field
from pathlib import Path
from dotenv import load_dotenv

load_dotenv()

DEFAULT_JWT_SECRET = "planner-secret-key-change-in-production"


@dataclass
class AuthConfig:
    """Token signing and password hashing settings."""
    jwt_secret: str = field(default_factory=lambda: os.getenv("JWT_SECRET", DEFAULT_JWT_SECRET))
    jwt_expiry_seconds: int = field(default_factory=lambda: int(os.getenv("JWT_EXPIRY_SECONDS", str(86400 * 7))))
    bcrypt_rounds: int = field(default_factory=lambda: int(os.getenv("BCRYPT_ROUNDS", "12")))


@dataclass
class StorageConfig:
    """Document store location."""
    data_dir: Path = field(default_factory=lambda: Path(os.getenv("DATA_DIR", "data")))


@dataclass
class ServerConfig:
    """HTTP server settings."""
    host: str = field(default_factory=lambda: os.getenv("HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: int(os.getenv("PORT", "8080")))
    client_origin: str = field(default_factory=lambda: os.getenv("CLIENT_ORIGIN", "*"))
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))


@dataclass
class Config:
    """Main configuration container."""
    auth: AuthConfig = field(default_factory=AuthConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def load_config() -> Config:
    """Load configuration from environment variables."""
    return Config()
