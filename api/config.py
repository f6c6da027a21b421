"""
API configuration settings.
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings


class APIConfig(BaseSettings):
    """API configuration settings."""

    # API Settings
    api_title: str = "Book Resource Service"
    api_version: str = "1.0.0"
    api_description: str = "A minimal in-memory CRUD API for books"

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    debug: bool = False

    # Security Settings
    # Single shared secret for every protected route. Placeholder only.
    bearer_token: str = "secret-token-123"
    auth_realm: str = "simple-demo"
    session_cookie_name: str = "sessionId"

    # Response Settings
    server_note: str = "served-by-fastapi"
    default_page_limit: int = 10

    # CORS Settings
    cors_allow_origin: str = "*"  # Configure appropriately for production
    cors_allow_methods: str = "GET,POST,PUT,PATCH,DELETE,OPTIONS"
    cors_allow_headers: str = "Content-Type,Authorization"

    # Logging
    log_level: str = "INFO"
    log_format: str = "console"
    log_file: Optional[str] = None

    model_config = {
        "env_file": ".env",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields from .env
    }

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        """Ensure port is a usable TCP port."""
        if v < 1 or v > 65535:
            raise ValueError('port must be between 1 and 65535')
        return v

    @field_validator('default_page_limit')
    @classmethod
    def validate_page_limit(cls, v):
        """Ensure the default page size is positive."""
        if v < 1:
            raise ValueError('default_page_limit must be at least 1')
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        """Ensure log level is valid."""
        valid_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
        if v.upper() not in valid_levels:
            raise ValueError(f'log_level must be one of: {valid_levels}')
        return v.upper()

    @field_validator('log_format')
    @classmethod
    def validate_log_format(cls, v):
        """Ensure log format is valid."""
        valid_formats = ['json', 'console']
        if v.lower() not in valid_formats:
            raise ValueError(f'log_format must be one of: {valid_formats}')
        return v.lower()

    def get_cors_headers(self) -> dict:
        """Get the CORS headers attached to every response."""
        return {
            "Access-Control-Allow-Origin": self.cors_allow_origin,
            "Access-Control-Allow-Methods": self.cors_allow_methods,
            "Access-Control-Allow-Headers": self.cors_allow_headers,
        }


# Global config instance
config = APIConfig()
