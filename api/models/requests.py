"""
MODULE_DESCRIPTION: Request Models - Pydantic Schemas for Incoming Payloads

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

Request bodies accepted by the Bug Tracker API. FastAPI validates every body
against these models before a handler runs; failures become 400 responses
through ``validation_exception_handler``.

Bug payloads:
    - Unknown keys are rejected (extra="forbid").
    - Server-managed keys (id, _id, reportedBy, createdAt, updatedAt) are
      silently dropped before validation, so clients may send back a bug
      object they received.
    - status and priority are constrained to their enum domains.
    - An empty assignedTo string means "unassigned" (null); a resolved
      {id, name} reference is reduced to its id.
    - title/description/project are optional at schema level so that the
      policy can answer with its own required-field messages.

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

# Standard imports
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator

from api.config.settings import (
    BUG_TITLE_MAX_LENGTH,
    MIN_PASSWORD_LENGTH,
    SERVER_MANAGED_BUG_FIELDS,
)

BugStatus = Literal["open", "in-progress", "resolved", "closed"]
BugPriority = Literal["low", "medium", "high", "critical"]


# ============================================================
# USER REQUEST MODELS
# ============================================================


class RegisterRequest(BaseModel):
    """Request model for creating an account."""

    name: str = Field(..., max_length=100, examples=["Ada Lovelace"])
    email: EmailStr = Field(..., examples=["ada@example.com"])
    password: str = Field(..., examples=["secret123"])

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ada Lovelace",
                    "email": "ada@example.com",
                    "password": "secret123",
                }
            ]
        }
    }

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if not v or not v.strip():
            raise ValueError("Please add all fields")
        return v.strip()

    @field_validator("password")
    @classmethod
    def validate_password(cls, v):
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        return v


class LoginRequest(BaseModel):
    """Request model for exchanging credentials for a bearer token.

    The email is not format-checked here; an unknown or malformed email
    answers 401 like a wrong password.
    """

    email: str = Field(..., min_length=1, examples=["ada@example.com"])
    password: str = Field(..., min_length=1, examples=["secret123"])


class ProfileUpdateRequest(BaseModel):
    """Partial profile update. Password change requires currentPassword."""

    name: Optional[str] = Field(None, max_length=100)
    email: Optional[EmailStr] = None
    currentPassword: Optional[str] = None
    newPassword: Optional[str] = None

    @field_validator("name")
    @classmethod
    def validate_name(cls, v):
        if v is not None and not v.strip():
            raise ValueError("Name cannot be empty")
        return v.strip() if v is not None else v

    @field_validator("newPassword")
    @classmethod
    def validate_new_password(cls, v):
        if v is not None and len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(
                f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
            )
        return v


# ============================================================
# BUG REQUEST MODELS
# ============================================================


class _BugPayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(None, examples=["Login button unresponsive"])
    description: Optional[str] = Field(None, examples=["Clicking login does nothing"])
    status: Optional[BugStatus] = None
    priority: Optional[BugPriority] = None
    project: Optional[str] = Field(None, examples=["Web App"])
    steps: Optional[str] = None
    assignedTo: Optional[str] = None

    @model_validator(mode="before")
    @classmethod
    def drop_server_managed_fields(cls, data):
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if k not in SERVER_MANAGED_BUG_FIELDS}
        return data

    @field_validator("title", "description", "project", "steps")
    @classmethod
    def strip_text(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("title")
    @classmethod
    def validate_title_length(cls, v):
        if v is not None and len(v) > BUG_TITLE_MAX_LENGTH:
            raise ValueError(
                f"Title cannot be more than {BUG_TITLE_MAX_LENGTH} characters"
            )
        return v

    @field_validator("assignedTo", mode="before")
    @classmethod
    def empty_assignee_is_none(cls, v):
        # A resolved {id, name} reference as returned by the API
        if isinstance(v, dict) and "id" in v:
            v = v["id"]
        if isinstance(v, str) and not v.strip():
            return None
        return v

    def changes(self) -> dict:
        """Only the keys the client actually sent."""
        return self.model_dump(exclude_unset=True)


class BugCreateRequest(_BugPayload):
    """Request model for reporting a bug. reportedBy is always the caller."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={
            "examples": [
                {
                    "title": "Login button unresponsive",
                    "description": "Clicking login on Safari does nothing",
                    "project": "Web App",
                    "priority": "high",
                    "steps": "1. Open Safari\n2. Click Login",
                }
            ]
        },
    )


class BugUpdateRequest(_BugPayload):
    """Partial update: absent keys are left untouched."""

    model_config = ConfigDict(
        extra="forbid",
        json_schema_extra={"examples": [{"status": "in-progress"}]},
    )
