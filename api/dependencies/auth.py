"""
MODULE_DESCRIPTION: Authentication Dependencies - Bearer Token Verification for FastAPI

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

FastAPI dependency functions that authenticate incoming requests. Protected
routes declare ``user: dict = Depends(get_current_user)``; the dependency
returns the stored user document or answers 401.

Authentication Flow:
    1. Extract the Authorization header
    2. Validate the "Bearer <token>" format
    3. Verify the token signature and expiry (verify_token)
    4. Reject tokens whose jti was revoked by POST /users/logout
    5. Load the user named by the ``sub`` claim
    6. Raise AuthenticationError (401) if any step fails

Store access is also exposed as dependencies (get_store and the repository
getters) so tests and routes share one lookup path.

===================================================================================
"""

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

from fastapi import Depends, Header

from api.auth.jwt_auth import verify_token
from api.exceptions.errors import AuthenticationError
from api.utils.debug import print__token_debug
from docstore.factory import get_global_store
from docstore.repositories import (
    BugRepository,
    RevokedTokenRepository,
    UserRepository,
)

# ==============================================================================
# STORE DEPENDENCIES
# ==============================================================================


async def get_store():
    return await get_global_store()


async def get_user_repository(store=Depends(get_store)) -> UserRepository:
    return UserRepository(store)


async def get_bug_repository(store=Depends(get_store)) -> BugRepository:
    return BugRepository(store)


async def get_token_repository(store=Depends(get_store)) -> RevokedTokenRepository:
    return RevokedTokenRepository(store)


# ==============================================================================
# AUTHENTICATION DEPENDENCIES
# ==============================================================================


def extract_bearer_token(authorization):
    """Return the token from a "Bearer <token>" header value.

    Raises:
        AuthenticationError: header missing or not in Bearer format.
    """
    if not authorization:
        print__token_debug("❌ AUTH ERROR: No authorization header provided")
        raise AuthenticationError("Not authorized, no token")

    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token.strip():
        print__token_debug("❌ AUTH ERROR: Invalid authorization header format")
        raise AuthenticationError("Not authorized, no token")

    return token.strip()


async def get_token_claims(
    authorization: str = Header(None),
    tokens: RevokedTokenRepository = Depends(get_token_repository),
) -> dict:
    """Verified, non-revoked claims of the presented bearer token."""
    print__token_debug("🔑 AUTHENTICATION START: Beginning user authentication process")
    token = extract_bearer_token(authorization)
    print__token_debug(f"🔍 AUTH TOKEN: Token extracted (length: {len(token)})")

    claims = verify_token(token)
    if await tokens.is_revoked(claims["jti"]):
        print__token_debug(f"❌ AUTH ERROR: Token {claims['jti']} has been revoked")
        raise AuthenticationError("Not authorized, token revoked")

    return claims


async def get_current_user(
    claims: dict = Depends(get_token_claims),
    users: UserRepository = Depends(get_user_repository),
) -> dict:
    """The stored user document behind the bearer token.

    Returns:
        dict: the user document (including ``passwordHash``; route handlers
            must serialise it through ``public_user``).

    Raises:
        AuthenticationError(401): missing/invalid/expired/revoked token or a
            token whose user no longer exists.
    """
    user = await users.get(claims["sub"])
    if user is None:
        print__token_debug(f"❌ AUTH ERROR: User {claims['sub']} no longer exists")
        raise AuthenticationError("Not authorized, user not found")

    print__token_debug(f"✅ AUTH SUCCESS: User authenticated - {user['email']}")
    return user
