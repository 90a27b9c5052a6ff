"""Bug data hooks: list, detail and form state for the client pages.

Each hook owns ``loading``/``error`` plus its data and only changes data from
confirmed server responses. While a mutation is outstanding its pending flag
is set and a repeated call returns immediately. After ``dispose()`` late
results are dropped. A 401 clears the session through the auth manager.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from api.utils.debug import print__client_debug
from client.http import ApiError

BUG_STATUSES = ("open", "in-progress", "resolved", "closed")

SESSION_EXPIRED = "Your session has expired. Please log in again."
NOT_AUTHORIZED = "You are not authorized to perform this action."
SERVER_FAILURE = "Server error. Please try again later."
REQUIRED_FIELDS = "Please fill in all required fields"


def describe_error(error: ApiError, fallback: str) -> str:
    """Inline message for a failed bug request, chosen by status code."""
    status = error.status_code
    if status is None:
        return error.message
    if status == 401:
        return SESSION_EXPIRED
    if status == 403:
        return error.message or NOT_AUTHORIZED
    if status == 404:
        return error.message or "Bug not found"
    if status >= 500:
        return SERVER_FAILURE
    return error.message or fallback


class _BugHook:
    def __init__(self, bug_service, session=None):
        self.bug_service = bug_service
        self.session = session
        self.loading = False
        self.error: Optional[str] = None
        self.disposed = False

    def dispose(self) -> None:
        self.disposed = True

    def _fail(self, error: ApiError, fallback: str) -> None:
        if self.disposed:
            return
        if error.status_code == 401 and self.session is not None:
            self.session.handle_authentication_failure(error)
        self.error = describe_error(error, fallback)
        print__client_debug(f"{type(self).__name__}: {self.error}")


# ==============================================================================
# LIST
# ==============================================================================


class BugListHook(_BugHook):
    def __init__(self, bug_service, session=None):
        super().__init__(bug_service, session)
        self.bugs: List[dict] = []
        self.status_filter = "all"

    async def load(self) -> None:
        if self.loading:
            return
        self.loading = True
        try:
            bugs = await self.bug_service.get_bugs()
        except ApiError as exc:
            self._fail(exc, "Failed to fetch bugs")
        else:
            if not self.disposed:
                self.bugs = bugs
                self.error = None
        finally:
            self.loading = False

    def filter(self, status: str) -> None:
        if status != "all" and status not in BUG_STATUSES:
            raise ValueError(f"Unknown status filter: {status}")
        self.status_filter = status

    @property
    def visible_bugs(self) -> List[dict]:
        if self.status_filter == "all":
            return list(self.bugs)
        return [bug for bug in self.bugs if bug.get("status") == self.status_filter]

    def stats(self, user: Optional[dict]) -> Dict:
        """Dashboard numbers for ``user`` computed from the loaded list."""
        by_status = {status: 0 for status in BUG_STATUSES}
        for bug in self.bugs:
            if bug.get("status") in by_status:
                by_status[bug["status"]] += 1

        user_id = user.get("id") if user else None
        reported_by_me = sum(
            1 for bug in self.bugs
            if user_id and (bug.get("reportedBy") or {}).get("id") == user_id
        )
        recent = sorted(self.bugs, key=lambda bug: bug.get("createdAt", ""), reverse=True)
        return {
            "total": len(self.bugs),
            "by_status": by_status,
            "high_priority": sum(
                1 for bug in self.bugs if bug.get("priority") in ("high", "critical")
            ),
            "reported_by_me": reported_by_me,
            "recent": recent[:5],
        }


# ==============================================================================
# DETAIL
# ==============================================================================


class BugDetailHook(_BugHook):
    def __init__(self, bug_service, bug_id: str, session=None):
        super().__init__(bug_service, session)
        self.bug_id = bug_id
        self.bug: Optional[dict] = None
        self.is_updating_status = False
        self.is_deleting = False
        self.deleted = False

    async def load(self) -> None:
        if self.loading:
            return
        self.loading = True
        try:
            bug = await self.bug_service.get_bug(self.bug_id)
        except ApiError as exc:
            self._fail(exc, "Failed to fetch bug details")
        else:
            if not self.disposed:
                self.bug = bug
                self.error = None
        finally:
            self.loading = False

    async def change_status(self, status: str) -> bool:
        """Send ``{"status": status}``; True when the server accepted it."""
        if self.is_updating_status:
            return False
        self.is_updating_status = True
        try:
            bug = await self.bug_service.update_bug(self.bug_id, {"status": status})
        except ApiError as exc:
            self._fail(exc, "Failed to update bug status")
            return False
        finally:
            self.is_updating_status = False
        if not self.disposed:
            self.bug = bug
            self.error = None
        return True

    async def delete(self) -> bool:
        if self.is_deleting:
            return False
        self.is_deleting = True
        try:
            await self.bug_service.delete_bug(self.bug_id)
        except ApiError as exc:
            self._fail(exc, "Failed to delete bug")
            return False
        finally:
            self.is_deleting = False
        if not self.disposed:
            self.deleted = True
            self.error = None
        return True


# ==============================================================================
# FORM
# ==============================================================================

FORM_FIELDS = ("title", "description", "status", "priority", "project", "steps", "assignedTo")


class BugFormHook(_BugHook):
    """Create form when ``bug_id`` is None, edit form otherwise."""

    def __init__(self, bug_service, bug_id: Optional[str] = None, session=None):
        super().__init__(bug_service, session)
        self.bug_id = bug_id
        self.values: Dict[str, object] = {
            "title": "",
            "description": "",
            "status": "open",
            "priority": "medium",
            "project": "",
            "steps": "",
            "assignedTo": None,
        }
        self.submitting = False
        self.saved: Optional[dict] = None

    @property
    def is_edit(self) -> bool:
        return self.bug_id is not None

    async def load(self) -> None:
        """Prefill the form from the stored bug (edit mode only)."""
        if not self.is_edit or self.loading:
            return
        self.loading = True
        try:
            bug = await self.bug_service.get_bug(self.bug_id)
        except ApiError as exc:
            self._fail(exc, "Failed to fetch bug details")
        else:
            if not self.disposed:
                for key in FORM_FIELDS:
                    value = bug.get(key)
                    if key == "assignedTo" and isinstance(value, dict):
                        value = value.get("id")
                    if value is not None or key == "assignedTo":
                        self.values[key] = value
                self.error = None
        finally:
            self.loading = False

    def set(self, **changes) -> None:
        unknown = set(changes) - set(FORM_FIELDS)
        if unknown:
            raise KeyError(f"Unknown form field(s): {', '.join(sorted(unknown))}")
        self.values.update(changes)

    def _payload(self) -> dict:
        payload = {key: self.values[key] for key in FORM_FIELDS}
        if not payload["assignedTo"]:
            payload["assignedTo"] = None
        return payload

    async def submit(self) -> Optional[dict]:
        """Create or update; returns the saved bug or None on failure."""
        if self.submitting:
            return None
        required = ("title", "description", "project")
        if any(not str(self.values.get(key) or "").strip() for key in required):
            self.error = REQUIRED_FIELDS
            return None

        self.submitting = True
        try:
            if self.is_edit:
                bug = await self.bug_service.update_bug(self.bug_id, self._payload())
            else:
                bug = await self.bug_service.create_bug(self._payload())
        except ApiError as exc:
            self._fail(exc, "Failed to save bug. Please try again.")
            return None
        finally:
            self.submitting = False
        if not self.disposed:
            self.saved = bug
            self.error = None
        return bug
