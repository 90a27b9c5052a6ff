"""Pydantic request models."""

import pydantic
import pytest

from api.models.requests import (
    BugCreateRequest,
    BugUpdateRequest,
    ProfileUpdateRequest,
    RegisterRequest,
)


def test_register_request_strips_name():
    request = RegisterRequest(name="  Ada  ", email="ada@example.com", password="secret123")
    assert request.name == "Ada"


def test_register_request_short_password():
    with pytest.raises(pydantic.ValidationError, match="at least 6 characters"):
        RegisterRequest(name="Ada", email="ada@example.com", password="short")


def test_bug_update_only_reports_sent_fields():
    request = BugUpdateRequest(status="resolved")
    assert request.changes() == {"status": "resolved"}


def test_bug_payload_drops_server_managed_fields():
    request = BugCreateRequest.model_validate(
        {
            "title": " Crash ",
            "description": "d",
            "project": "p",
            "id": "abc",
            "_id": "abc",
            "reportedBy": "someone",
            "createdAt": "x",
            "updatedAt": "y",
        }
    )
    assert request.changes() == {"title": "Crash", "description": "d", "project": "p"}


def test_bug_payload_rejects_unknown_fields():
    with pytest.raises(pydantic.ValidationError):
        BugUpdateRequest.model_validate({"severity": "high"})


def test_empty_assignee_becomes_none():
    assert BugUpdateRequest(assignedTo="  ").changes() == {"assignedTo": None}


def test_bug_payload_enums():
    assert BugUpdateRequest(status="closed", priority="critical").changes() == {
        "status": "closed",
        "priority": "critical",
    }
    with pytest.raises(pydantic.ValidationError):
        BugUpdateRequest(status="done")


def test_profile_update_rejects_blank_name():
    with pytest.raises(pydantic.ValidationError, match="Name cannot be empty"):
        ProfileUpdateRequest(name="   ")
