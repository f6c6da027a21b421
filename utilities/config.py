"""
Configuration for the order script using environment variables.
"""

from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings


class OrderClientConfig(BaseSettings):
    """
    Settings for placing an order against the external books API.
    Every field can be set with an ``ORDER_`` prefixed environment variable.
    """

    # Target API
    base_url: str = Field(default="https://simple-books-api.click")
    orders_path: str = Field(default="/orders/")
    access_token: str = Field(default="")
    request_timeout: float = Field(default=30.0)

    # Order payload
    book_id: int = Field(default=1)
    customer_name: str = Field(default="yakuza")

    # Logging Configuration
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")
    log_file: Optional[str] = Field(default=None)

    model_config = {
        "env_prefix": "ORDER_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore"  # Ignore extra fields from .env
    }

    @field_validator('request_timeout')
    @classmethod
    def validate_timeout(cls, v):
        """Ensure timeout is reasonable."""
        if v <= 0 or v > 300:
            raise ValueError('request_timeout must be between 0 and 300 seconds')
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

    def get_order_url(self) -> str:
        """Get the full URL orders are posted to."""
        return self.base_url.rstrip("/") + "/" + self.orders_path.lstrip("/")

    def get_headers(self) -> dict:
        """Get headers for the order request."""
        headers = {"Content-Type": "application/json"}
        if self.access_token:
            headers["Authorization"] = f"Bearer {self.access_token}"
        return headers

    def get_payload(self) -> dict:
        """Get the order request body."""
        return {"bookId": self.book_id, "customerName": self.customer_name}
