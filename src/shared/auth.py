"""Password hashing, bearer tokens and the FastAPI dependencies that guard routes.

Tokens are ``<payload>.<signature>`` where the payload is base64url JSON
carrying ``sub`` (principal id), ``role`` (``customer`` or ``admin``) and
``exp`` (unix seconds), signed with HMAC-SHA256 over ``AUTH_SECRET_KEY``.
"""

import base64
import hashlib
import hmac
import json
import os
import secrets
import time

import structlog
from fastapi import Header, HTTPException

logger = structlog.get_logger(__name__)

CUSTOMER_ROLE = "customer"
ADMIN_ROLE = "admin"

_PBKDF2_ITERATIONS = 260_000


def _secret_key() -> bytes:
    return os.getenv("AUTH_SECRET_KEY", "chronoshop-development-secret").encode()


def _token_ttl_seconds() -> int:
    return int(os.getenv("AUTH_TOKEN_TTL_MINUTES", "1440")) * 60


# ---------------------------------------------------------------------------
# Passwords
# ---------------------------------------------------------------------------
def hash_password(password: str) -> str:
    salt = secrets.token_hex(16)
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), _PBKDF2_ITERATIONS)
    return f"pbkdf2_sha256${_PBKDF2_ITERATIONS}${salt}${digest.hex()}"


def verify_password(password: str, password_hash: str | None) -> bool:
    if not password_hash:
        return False
    try:
        algorithm, iterations, salt, expected = password_hash.split("$")
    except ValueError:
        return False
    if algorithm != "pbkdf2_sha256":
        return False
    digest = hashlib.pbkdf2_hmac("sha256", password.encode(), salt.encode(), int(iterations))
    return hmac.compare_digest(digest.hex(), expected)


# ---------------------------------------------------------------------------
# Tokens
# ---------------------------------------------------------------------------
def _b64encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode()


def _b64decode(value: str) -> bytes:
    return base64.urlsafe_b64decode(value + "=" * (-len(value) % 4))


def _sign(payload: str) -> str:
    return _b64encode(hmac.new(_secret_key(), payload.encode(), hashlib.sha256).digest())


def issue_token(subject: str, role: str = CUSTOMER_ROLE) -> str:
    """Issue a signed bearer token for a customer or an admin user."""
    claims = {"sub": str(subject), "role": role, "exp": int(time.time()) + _token_ttl_seconds()}
    payload = _b64encode(json.dumps(claims, separators=(",", ":")).encode())
    return f"{payload}.{_sign(payload)}"


def decode_token(token: str) -> dict | None:
    """Return the token's claims, or None if it is malformed, forged or expired."""
    try:
        payload, signature = token.split(".")
    except ValueError:
        return None

    if not hmac.compare_digest(_sign(payload), signature):
        return None

    try:
        claims = json.loads(_b64decode(payload))
    except (ValueError, json.JSONDecodeError):
        return None

    if claims.get("exp", 0) < time.time():
        return None
    return claims


# ---------------------------------------------------------------------------
# FastAPI dependencies
# ---------------------------------------------------------------------------
def _claims_from_header(authorization: str) -> dict:
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(status_code=401, detail="Not authorized, no token")

    claims = decode_token(token.strip())
    if claims is None:
        logger.info("Rejected bearer token")
        raise HTTPException(status_code=401, detail="Not authorized, token failed")
    return claims


async def current_customer_id(authorization: str = Header(default="")) -> str:
    """Resolve the authenticated customer's id from the Authorization header."""
    claims = _claims_from_header(authorization)
    if claims.get("role") != CUSTOMER_ROLE:
        raise HTTPException(status_code=403, detail="Customer account required")
    return claims["sub"]


async def require_admin(authorization: str = Header(default="")) -> str:
    """Resolve the authenticated admin's id; 403 for any other role."""
    claims = _claims_from_header(authorization)
    if claims.get("role") != ADMIN_ROLE:
        raise HTTPException(status_code=403, detail="Not authorized as an admin")
    return claims["sub"]
