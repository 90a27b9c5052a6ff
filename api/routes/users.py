"""
MODULE_DESCRIPTION: User Routes - Registration, Login, Profile and Logout

===================================================================================
ENDPOINTS
===================================================================================

    POST /users/register   {name, email, password}        → 201 {user, token}
    POST /users/login      {email, password}              → 200 {user, token}
    GET  /users/profile                                   → 200 user
    PUT  /users/profile    {name?, email?, currentPassword?, newPassword?}
                                                          → 200 user
    POST /users/logout                                    → 200 {message}

Errors:
    400 "User already exists"            duplicate email on register
    400 "Email already in use"           profile email taken by another user
    400 "Current password is incorrect"  wrong currentPassword on profile update
    401 "Invalid email or password"      login with unknown email or bad password
    401 "Not authorized, ..."            missing/invalid/expired/revoked token

Emails listed in ADMIN_EMAILS are registered with the admin role.

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

from fastapi import APIRouter, Depends

from api.auth.jwt_auth import hash_password, issue_token, verify_password
from api.config.settings import ADMIN_EMAILS, ROLE_ADMIN, ROLE_USER
from api.dependencies.auth import (
    get_current_user,
    get_token_claims,
    get_token_repository,
    get_user_repository,
)
from api.exceptions.errors import AuthenticationError, ValidationError
from api.models.requests import LoginRequest, ProfileUpdateRequest, RegisterRequest
from api.models.responses import AuthResponse, MessageResponse, UserResponse
from api.utils.debug import print__users_debug
from docstore.errors import DuplicateKeyError
from docstore.repositories import RevokedTokenRepository, UserRepository, public_user

# ==============================================================================
# FASTAPI ROUTER INITIALIZATION
# ==============================================================================

router = APIRouter(prefix="/users", tags=["users"])

AUTH_ERROR_RESPONSES = {
    401: {"description": "Missing, invalid, expired or revoked bearer token"},
}


def _auth_payload(user):
    return {"user": public_user(user), "token": issue_token(user["id"], user["role"])}


# ==============================================================================
# API ENDPOINTS: REGISTRATION AND LOGIN
# ==============================================================================


@router.post(
    "/register",
    response_model=AuthResponse,
    status_code=201,
    summary="Register a new user",
    responses={400: {"description": "Invalid input or user already exists"}},
)
async def register_user(
    payload: RegisterRequest,
    users: UserRepository = Depends(get_user_repository),
):
    """Create an account and return it together with a bearer token."""
    print__users_debug(f"📝 REGISTER START: {payload.email}")

    if await users.get_by_email(payload.email):
        print__users_debug(f"❌ REGISTER: {payload.email} already exists")
        raise ValidationError("User already exists")

    role = ROLE_ADMIN if payload.email.lower() in ADMIN_EMAILS else ROLE_USER
    try:
        user = await users.create(
            name=payload.name,
            email=payload.email,
            password_hash=hash_password(payload.password),
            role=role,
        )
    except DuplicateKeyError:
        # Lost a race with a concurrent registration of the same email
        raise ValidationError("User already exists")

    print__users_debug(f"✅ REGISTER SUCCESS: {user['id']} role={role}")
    return _auth_payload(user)


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Exchange credentials for a bearer token",
    responses={401: {"description": "Invalid email or password"}},
)
async def login_user(
    payload: LoginRequest,
    users: UserRepository = Depends(get_user_repository),
):
    user = await users.get_by_email(payload.email)
    if not user or not verify_password(payload.password, user.get("passwordHash")):
        print__users_debug(f"❌ LOGIN FAILED: {payload.email}")
        raise AuthenticationError("Invalid email or password")

    print__users_debug(f"✅ LOGIN SUCCESS: {user['id']}")
    return _auth_payload(user)


# ==============================================================================
# API ENDPOINTS: PROFILE
# ==============================================================================


@router.get(
    "/profile",
    response_model=UserResponse,
    summary="Current user's profile",
    responses=AUTH_ERROR_RESPONSES,
)
async def get_profile(user: dict = Depends(get_current_user)):
    return public_user(user)


@router.put(
    "/profile",
    response_model=UserResponse,
    summary="Update the current user's profile",
    description=(
        "Updates name and/or email. A new password is only accepted together "
        "with the correct current password."
    ),
    responses={
        **AUTH_ERROR_RESPONSES,
        400: {"description": "Wrong current password or email already in use"},
    },
)
async def update_profile(
    payload: ProfileUpdateRequest,
    user: dict = Depends(get_current_user),
    users: UserRepository = Depends(get_user_repository),
):
    fields = payload.model_dump(exclude_unset=True, exclude_none=True)
    changes = {}

    if "name" in fields:
        changes["name"] = fields["name"]

    if "email" in fields and fields["email"].lower() != user["email"]:
        existing = await users.get_by_email(fields["email"])
        if existing and existing["id"] != user["id"]:
            raise ValidationError("Email already in use")
        changes["email"] = fields["email"]

    if "newPassword" in fields:
        if "currentPassword" not in fields:
            raise ValidationError("Current password is required to set a new password")
        if not verify_password(fields["currentPassword"], user.get("passwordHash")):
            print__users_debug(f"❌ PROFILE UPDATE: wrong current password for {user['id']}")
            raise ValidationError("Current password is incorrect")
        changes["passwordHash"] = hash_password(fields["newPassword"])

    if not changes:
        return public_user(user)

    try:
        updated = await users.update(user["id"], changes)
    except DuplicateKeyError:
        raise ValidationError("Email already in use")

    if updated is None:
        raise AuthenticationError("Not authorized, user not found")

    print__users_debug(f"✅ PROFILE UPDATED: {user['id']} fields={sorted(changes)}")
    return public_user(updated)


# ==============================================================================
# API ENDPOINT: LOGOUT
# ==============================================================================


@router.post(
    "/logout",
    response_model=MessageResponse,
    summary="Revoke the presented bearer token",
    responses=AUTH_ERROR_RESPONSES,
)
async def logout_user(
    claims: dict = Depends(get_token_claims),
    tokens: RevokedTokenRepository = Depends(get_token_repository),
):
    """Record the token's jti as revoked; later requests with it answer 401."""
    await tokens.revoke(claims["jti"], claims["sub"], claims["exp"])
    return {"message": "Logged out successfully"}
