# macocr/auth.py
import base64
import binascii
import re
import secrets
from dataclasses import dataclass
from typing import Optional

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from .logger import Log

REALM = "MacOCR Server"

# exactly one ":" with something on both sides
_AUTH_FORMAT = re.compile(r"^[^:]+:[^:]+$")


@dataclass(frozen=True)
class AuthCredential:
    username: str
    password: str


def is_valid_auth_format(value: str) -> bool:
    return bool(_AUTH_FORMAT.match(value))


def parse_auth(value: Optional[str]) -> Optional[AuthCredential]:
    """
    Parse a ``user:password`` string given at startup.

    Returns None (server runs without authentication) for an empty value or
    one that does not have the ``nonempty:nonempty`` shape.
    """
    if not value:
        return None
    if not is_valid_auth_format(value):
        Log.warning("Ignoring auth setting: expected 'username:password'")
        return None
    username, password = value.split(":", 1)
    return AuthCredential(username=username, password=password)


def _decode_basic(header: str) -> Optional[AuthCredential]:
    if not header.startswith("Basic "):
        return None
    try:
        decoded = base64.b64decode(header[len("Basic "):], validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return AuthCredential(username=user, password=password)


def check_credentials(header: Optional[str], expected: AuthCredential) -> bool:
    if not header:
        return False
    given = _decode_basic(header)
    if given is None:
        return False
    # compare both halves every time so the response never hints which one failed
    user_ok = secrets.compare_digest(given.username.encode(), expected.username.encode())
    pass_ok = secrets.compare_digest(given.password.encode(), expected.password.encode())
    return user_ok and pass_ok


def unauthorized() -> Response:
    return PlainTextResponse(
        "Authentication failed: A valid username and password are required.",
        status_code=401,
        headers={"WWW-Authenticate": f'Basic realm="{REALM}"'},
    )


class BasicAuthMiddleware(BaseHTTPMiddleware):
    """HTTP Basic authentication against a single static credential."""

    def __init__(self, app: ASGIApp, credential: AuthCredential) -> None:
        super().__init__(app)
        self._credential = credential

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        if not check_credentials(request.headers.get("authorization"), self._credential):
            return unauthorized()
        return await call_next(request)
