"""
MODULE_DESCRIPTION: Bug Routes - CRUD Endpoints for Bug Reports

===================================================================================
ENDPOINTS
===================================================================================

All endpoints require a bearer token.

    GET    /bugs          → 200 [bug]           newest first
    GET    /bugs/{id}     → 200 bug             404 "Bug not found"
    POST   /bugs          → 201 bug             reportedBy = caller
    PUT    /bugs/{id}     → 200 bug             reporter or admin only
    DELETE /bugs/{id}     → 200 {id}            reporter or admin only

Bugs are returned with reportedBy/assignedTo resolved to {id, name}.
Authorization and patch semantics live in api.policy.bug_policy.

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

from typing import List

from fastapi import APIRouter, Depends

from api.dependencies.auth import get_bug_repository, get_current_user
from api.models.requests import BugCreateRequest, BugUpdateRequest
from api.models.responses import BugResponse, DeletedResponse
from api.policy.bug_policy import BugPolicy
from api.utils.debug import print__bugs_debug
from docstore.repositories import BugRepository

# ==============================================================================
# FASTAPI ROUTER INITIALIZATION
# ==============================================================================

router = APIRouter(prefix="/bugs", tags=["bugs"])

COMMON_RESPONSES = {
    401: {"description": "Missing, invalid, expired or revoked bearer token"},
}
MUTATION_RESPONSES = {
    **COMMON_RESPONSES,
    400: {"description": "Invalid or unknown fields; nothing was written"},
    403: {"description": "Caller is neither the reporter nor an admin"},
    404: {"description": "Bug not found"},
}


async def get_bug_policy(bugs: BugRepository = Depends(get_bug_repository)) -> BugPolicy:
    return BugPolicy(bugs)


# ==============================================================================
# API ENDPOINTS: READS
# ==============================================================================


@router.get(
    "",
    response_model=List[BugResponse],
    summary="List all bugs",
    responses=COMMON_RESPONSES,
)
async def list_bugs(
    user: dict = Depends(get_current_user),
    policy: BugPolicy = Depends(get_bug_policy),
):
    return await policy.list_bugs(user)


@router.get(
    "/{bug_id}",
    response_model=BugResponse,
    summary="Get a single bug",
    responses={**COMMON_RESPONSES, 404: {"description": "Bug not found"}},
)
async def get_bug(
    bug_id: str,
    user: dict = Depends(get_current_user),
    policy: BugPolicy = Depends(get_bug_policy),
):
    return await policy.get_bug(bug_id, user)


# ==============================================================================
# API ENDPOINTS: MUTATIONS
# ==============================================================================


@router.post(
    "",
    response_model=BugResponse,
    status_code=201,
    summary="Report a bug",
    responses={**COMMON_RESPONSES, 400: {"description": "Missing or invalid fields"}},
)
async def create_bug(
    payload: BugCreateRequest,
    user: dict = Depends(get_current_user),
    policy: BugPolicy = Depends(get_bug_policy),
):
    print__bugs_debug(f"🐛 CREATE BUG: user={user['id']} fields={sorted(payload.changes())}")
    return await policy.create_bug(user, payload.changes())


@router.put(
    "/{bug_id}",
    response_model=BugResponse,
    summary="Partially update a bug",
    description="Only keys present in the body are changed; absent keys are left untouched.",
    responses=MUTATION_RESPONSES,
)
async def update_bug(
    bug_id: str,
    payload: BugUpdateRequest,
    user: dict = Depends(get_current_user),
    policy: BugPolicy = Depends(get_bug_policy),
):
    print__bugs_debug(f"✏️ UPDATE BUG: {bug_id} user={user['id']}")
    return await policy.update_bug(bug_id, user, payload.changes())


@router.delete(
    "/{bug_id}",
    response_model=DeletedResponse,
    summary="Delete a bug permanently",
    responses=MUTATION_RESPONSES,
)
async def delete_bug(
    bug_id: str,
    user: dict = Depends(get_current_user),
    policy: BugPolicy = Depends(get_bug_policy),
):
    print__bugs_debug(f"🗑️ DELETE BUG: {bug_id} user={user['id']}")
    return await policy.delete_bug(bug_id, user)
