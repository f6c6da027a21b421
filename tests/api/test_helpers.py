"""
Tests for request parsing, authentication helpers and configuration.
"""

import pytest
from fastapi.security import HTTPAuthorizationCredentials
from pydantic import ValidationError
from starlette.requests import Request

from api.auth import check_bearer_token, generate_session_id, requires_auth
from api.config import APIConfig
from api.errors import AuthError, ClientInputError, NotFoundError
from api.parsing import parse_int, read_json_body


def make_request(body: bytes) -> Request:
    """Build a Starlette request whose body arrives in two chunks."""
    chunks = [body[:3], body[3:]]

    async def receive():
        chunk = chunks.pop(0)
        return {"type": "http.request", "body": chunk, "more_body": bool(chunks)}

    scope = {"type": "http", "method": "POST", "path": "/books", "headers": []}
    return Request(scope, receive)


@pytest.mark.asyncio
@pytest.mark.parametrize("body,expected", [
    (b"", None),
    (b'{"title": "T", "author": "A"}', {"title": "T", "author": "A"}),
    (b"[1, 2]", [1, 2]),
    (b"title=T&author=A", "title=T&author=A"),
    (b'{"title": ', '{"title": '),
    (b'{"title": NaN}', '{"title": NaN}'),
    (b'[-Infinity]', '[-Infinity]'),
])
async def test_read_json_body(body, expected):
    """Test JSON bodies are parsed and anything else is passed through raw."""
    assert await read_json_body(make_request(body)) == expected


@pytest.mark.parametrize("value,expected", [
    (None, 10),
    ("3", 3),
    (" 7 ", 7),
    ("-2", -2),
    ("abc", 10),
    ("", 10),
    ("2.5", 10),
])
def test_parse_int(value, expected):
    """Test lenient query integer parsing."""
    assert parse_int(value, 10) == expected


@pytest.mark.parametrize("method,path,expected", [
    ("POST", "/books", True),
    ("put", "/books/1", True),
    ("PATCH", "/books/1", True),
    ("DELETE", "/booksx", True),
    ("GET", "/books", False),
    ("OPTIONS", "/books", False),
    ("POST", "/orders", False),
])
def test_requires_auth(method, path, expected):
    """Test which requests the token gate covers."""
    assert requires_auth(method, path) is expected


def test_check_bearer_token():
    """Test token comparison against the configured secret."""
    settings = APIConfig(bearer_token="s3cret", auth_realm="realm")
    valid = HTTPAuthorizationCredentials(scheme="Bearer", credentials="s3cret")
    assert check_bearer_token(valid, settings) == "s3cret"

    with pytest.raises(AuthError) as exc_info:
        check_bearer_token(HTTPAuthorizationCredentials(scheme="Bearer", credentials="nope"), settings)
    assert exc_info.value.status_code == 401
    assert exc_info.value.headers == {"WWW-Authenticate": 'Bearer realm="realm"'}

    with pytest.raises(AuthError):
        check_bearer_token(None, settings)


def test_generate_session_id():
    """Test session ids are 24 hex characters and unique."""
    first, second = generate_session_id(), generate_session_id()
    assert len(first) == 24
    int(first, 16)
    assert first != second


def test_error_defaults():
    """Test error classes carry their status and default message."""
    assert ClientInputError("bad").status_code == 400
    assert NotFoundError().message == "Not found"
    assert NotFoundError("Route not found").message == "Route not found"


def test_config_defaults(monkeypatch):
    """Test default configuration values."""
    for name in ("PORT", "BEARER_TOKEN", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    settings = APIConfig(_env_file=None)
    assert settings.port == 3000
    assert settings.bearer_token == "secret-token-123"
    assert settings.get_cors_headers()["Access-Control-Allow-Origin"] == "*"


def test_config_reads_environment(monkeypatch):
    """Test settings come from environment variables."""
    monkeypatch.setenv("PORT", "8080")
    monkeypatch.setenv("LOG_LEVEL", "debug")
    settings = APIConfig(_env_file=None)
    assert settings.port == 8080
    assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("field,value", [
    ("port", 0),
    ("log_level", "LOUD"),
    ("log_format", "xml"),
    ("default_page_limit", 0),
])
def test_config_validation(field, value):
    """Test invalid settings are rejected."""
    with pytest.raises(ValidationError):
        APIConfig(_env_file=None, **{field: value})
