# CRITICAL: Set Windows event loop policy FIRST, before any other imports
# This must be the very first thing that happens to fix psycopg compatibility
import os
import sys

if sys.platform == "win32":
    import asyncio

    asyncio.set_event_loop_policy(asyncio.WindowsSelectorEventLoopPolicy())

# Load environment variables early
from dotenv import load_dotenv

load_dotenv()

import time
import uuid

# Standard imports
import bcrypt
import jwt

# Import constants from api.config.settings
from api.config.settings import (
    BCRYPT_ROUNDS,
    JWT_ALGORITHM,
    JWT_EXPIRES_DAYS,
    JWT_SECRET,
)
from api.exceptions.errors import AuthenticationError

# Import debug utilities
from api.utils.debug import print__token_debug

# ============================================================
# AUTHENTICATION - TOKEN ISSUING
# ============================================================


def issue_token(user_id: str, role: str, now: float = None) -> str:
    """Sign an HS256 bearer token for ``user_id``.

    Claims: ``sub`` (user id), ``role``, ``jti`` (unique id, used for logout
    revocation), ``iat`` and ``exp`` (``JWT_EXPIRES_DAYS`` after issue).
    """
    issued_at = int(now if now is not None else time.time())
    payload = {
        "sub": user_id,
        "role": role,
        "jti": uuid.uuid4().hex,
        "iat": issued_at,
        "exp": issued_at + JWT_EXPIRES_DAYS * 24 * 60 * 60,
    }
    token = jwt.encode(payload, JWT_SECRET, algorithm=JWT_ALGORITHM)
    print__token_debug(f"🔑 TOKEN ISSUED: sub={user_id} jti={payload['jti']}")
    return token


# ============================================================
# AUTHENTICATION - TOKEN VERIFICATION
# ============================================================


def verify_token(token: str) -> dict:
    """Verify signature and expiry of a bearer token and return its claims.

    Raises:
        AuthenticationError: malformed, badly signed, expired, or missing
            the ``sub``/``jti`` claims.
    """
    # JWT tokens must have exactly 3 parts separated by dots
    if not token or len(token.split(".")) != 3:
        print__token_debug("❌ TOKEN VERIFY: Invalid JWT token format")
        raise AuthenticationError("Not authorized, token failed")

    try:
        payload = jwt.decode(
            token,
            JWT_SECRET,
            algorithms=[JWT_ALGORITHM],
            options={"require": ["exp", "sub", "jti"]},
        )
    except jwt.ExpiredSignatureError:
        print__token_debug("❌ TOKEN VERIFY: Token has expired")
        raise AuthenticationError("Not authorized, token expired")
    except jwt.InvalidTokenError as exc:
        print__token_debug(f"❌ TOKEN VERIFY: {type(exc).__name__}: {exc}")
        raise AuthenticationError("Not authorized, token failed")

    print__token_debug(f"✅ TOKEN VERIFY: sub={payload['sub']} jti={payload['jti']}")
    return payload


# ============================================================
# PASSWORD HASHING
# ============================================================

# bcrypt only uses the first 72 bytes and recent releases reject longer input
BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """bcrypt hash of ``password`` with ``BCRYPT_ROUNDS`` cost, as text."""
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    if not password or not password_hash:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except ValueError as exc:
        print__token_debug(f"❌ PASSWORD VERIFY: Unusable stored hash: {exc}")
        return False
