# Response models for the Bug Tracker API
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

# Standard imports
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, Field

# ==============================================================================
# RESPONSE MODELS - PYDANTIC SCHEMAS FOR API SERIALIZATION
# ==============================================================================


class UserResponse(BaseModel):
    """Client-facing user. The password hash is never part of a response."""

    id: str = Field(description="User identifier", examples=["6f1c2e..."])
    name: str = Field(examples=["Ada Lovelace"])
    email: str = Field(examples=["ada@example.com"])
    role: Literal["user", "admin"] = Field(examples=["user"])
    createdAt: Optional[str] = Field(None, description="ISO 8601 UTC timestamp")
    updatedAt: Optional[str] = Field(None, description="ISO 8601 UTC timestamp")


class AuthResponse(BaseModel):
    """Returned by register and login; the client persists it as the session.

    Example Response:
        {
            "user": {"id": "...", "name": "Ada", "email": "ada@example.com", "role": "user"},
            "token": "eyJhbGciOiJIUzI1NiIs..."
        }
    """

    user: UserResponse
    token: str = Field(description="HS256 bearer token")


class UserReference(BaseModel):
    """A user reference resolved to its display name (null when unresolved)."""

    id: str
    name: Optional[str] = None


class BugResponse(BaseModel):
    """A bug with reportedBy/assignedTo resolved to {id, name}.

    Example Response:
        {
            "id": "9a0b...",
            "title": "Login button unresponsive",
            "description": "Clicking login on Safari does nothing",
            "status": "open",
            "priority": "high",
            "project": "Web App",
            "steps": "",
            "reportedBy": {"id": "6f1c...", "name": "Ada"},
            "assignedTo": null,
            "createdAt": "2026-10-19T09:00:00.000000+00:00",
            "updatedAt": "2026-10-19T09:00:00.000000+00:00"
        }
    """

    id: str
    title: str
    description: str
    status: Literal["open", "in-progress", "resolved", "closed"]
    priority: Literal["low", "medium", "high", "critical"]
    project: str
    steps: str = ""
    reportedBy: Optional[UserReference] = None
    assignedTo: Optional[UserReference] = None
    createdAt: str
    updatedAt: str


class DeletedResponse(BaseModel):
    id: str = Field(description="Identifier of the removed document")


class MessageResponse(BaseModel):
    message: str


class HealthResponse(BaseModel):
    """Service health including the active document store."""

    status: Literal["healthy", "degraded"]
    store: str = Field(description="Active store implementation", examples=["postgres"])
    store_reachable: bool
    uptime_seconds: float
    memory: Dict[str, float] = Field(description="Process memory usage (rss_mb, vms_mb, percent)")
    version: str
    timestamp: str


class RootResponse(BaseModel):
    message: str
    version: str
    endpoints: Dict[str, List[str]]
