"""
MODULE_DESCRIPTION: Bug Authorization & Mutation Policy

===================================================================================
PURPOSE AND OVERVIEW
===================================================================================

The rules every bug operation passes through between the route handlers and
the bug repository:

    - Reads (list, get) are open to any authenticated user.
    - Create always records the caller as the reporter.
    - Update and delete are permitted only to the reporter or an admin.
    - Updates are partial: only keys present in the patch are written, in a
      single store write, after the whole patch has been validated.

Check order for update and delete:
    1. Bug lookup            -> NotFoundError (404) "Bug not found"
    2. Ownership/role check  -> AuthorizationError (403)
    3. Patch validation      -> ValidationError (400), nothing written
    4. One persisted write   -> merged bug with references resolved

Store failures (docstore.errors.StoreError) surface as PersistenceError (500).

===================================================================================
"""

import functools

from api.config.settings import (
    BUG_PRIORITIES,
    BUG_STATUSES,
    BUG_TITLE_MAX_LENGTH,
    DEFAULT_BUG_PRIORITY,
    DEFAULT_BUG_STATUS,
    MUTABLE_BUG_FIELDS,
    ROLE_ADMIN,
    SERVER_MANAGED_BUG_FIELDS,
)
from api.exceptions.errors import (
    AuthorizationError,
    NotFoundError,
    PersistenceError,
    ValidationError,
)
from api.utils.debug import print__bugs_debug
from docstore.errors import StoreError

TITLE_DESCRIPTION_REQUIRED = "Please add title and description fields"
PROJECT_REQUIRED = "Please specify the project"

# Message used when a required text field is cleared by a patch
REQUIRED_FIELD_MESSAGES = {
    "title": TITLE_DESCRIPTION_REQUIRED,
    "description": TITLE_DESCRIPTION_REQUIRED,
    "project": PROJECT_REQUIRED,
}


def translate_store_errors(func):
    """Re-raise StoreError from the wrapped coroutine as PersistenceError."""

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        try:
            return await func(*args, **kwargs)
        except StoreError as exc:
            print__bugs_debug(f"❌ BUG POLICY: Store failure in {func.__name__}: {exc}")
            raise PersistenceError() from exc

    return wrapper


def can_modify(user, bug) -> bool:
    """True when ``user`` is an admin or reported ``bug``."""
    return user.get("role") == ROLE_ADMIN or user.get("id") == bug.get("reportedBy")


def _blank(value) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


class BugPolicy:
    """Bug use cases with authorization and validation applied."""

    def __init__(self, bugs, users=None):
        self.bugs = bugs
        self.users = users or bugs.users

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @translate_store_errors
    async def list_bugs(self, acting_user):
        bugs = await self.bugs.list_all()
        print__bugs_debug(f"BUG LIST: {len(bugs)} bugs for user {acting_user['id']}")
        return await self.bugs.resolve_many(bugs)

    @translate_store_errors
    async def get_bug(self, bug_id, acting_user):
        bug = await self._load(bug_id)
        print__bugs_debug(f"BUG GET: {bug_id} for user {acting_user['id']}")
        return await self.bugs.resolve(bug)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    @translate_store_errors
    async def create_bug(self, acting_user, fields):
        fields = self._strip_server_managed(fields)
        self._reject_unknown(fields)

        if _blank(fields.get("title")) or _blank(fields.get("description")):
            raise ValidationError(TITLE_DESCRIPTION_REQUIRED)
        if _blank(fields.get("project")):
            raise ValidationError(PROJECT_REQUIRED)

        changes = await self._validated_changes(fields)
        document = {
            "title": changes["title"],
            "description": changes["description"],
            "status": changes.get("status") or DEFAULT_BUG_STATUS,
            "priority": changes.get("priority") or DEFAULT_BUG_PRIORITY,
            "project": changes["project"],
            "steps": changes.get("steps") or "",
            "reportedBy": acting_user["id"],
            "assignedTo": changes.get("assignedTo"),
        }
        bug = await self.bugs.create(document)
        return await self.bugs.resolve(bug)

    @translate_store_errors
    async def update_bug(self, bug_id, acting_user, patch):
        bug = await self._load(bug_id)
        if not can_modify(acting_user, bug):
            print__bugs_debug(
                f"🚫 BUG UPDATE DENIED: user {acting_user['id']} on bug {bug_id}"
            )
            raise AuthorizationError("Not authorized to update this bug")

        patch = self._strip_server_managed(patch)
        self._reject_unknown(patch)
        changes = await self._validated_changes(patch)

        updated = await self.bugs.update(bug_id, changes)
        if updated is None:
            raise NotFoundError("Bug not found")

        print__bugs_debug(f"✅ BUG UPDATED: {bug_id} fields={sorted(changes)}")
        return await self.bugs.resolve(updated)

    @translate_store_errors
    async def delete_bug(self, bug_id, acting_user):
        bug = await self._load(bug_id)
        if not can_modify(acting_user, bug):
            print__bugs_debug(
                f"🚫 BUG DELETE DENIED: user {acting_user['id']} on bug {bug_id}"
            )
            raise AuthorizationError("Not authorized to delete this bug")

        if not await self.bugs.delete(bug_id):
            raise NotFoundError("Bug not found")

        print__bugs_debug(f"✅ BUG DELETED: {bug_id}")
        return {"id": bug_id}

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    async def _load(self, bug_id):
        bug = await self.bugs.get(bug_id)
        if bug is None:
            raise NotFoundError("Bug not found")
        return bug

    @staticmethod
    def _strip_server_managed(fields):
        return {k: v for k, v in fields.items() if k not in SERVER_MANAGED_BUG_FIELDS}

    @staticmethod
    def _reject_unknown(fields):
        unknown = sorted(set(fields) - set(MUTABLE_BUG_FIELDS))
        if unknown:
            raise ValidationError(f"Unknown bug field(s): {', '.join(unknown)}")

    async def _validated_changes(self, fields):
        """Validate every present key and return the normalised values.

        Raises ValidationError before anything is written.
        """
        changes = {}
        for key, value in fields.items():
            if key in REQUIRED_FIELD_MESSAGES:
                if _blank(value) or not isinstance(value, str):
                    raise ValidationError(REQUIRED_FIELD_MESSAGES[key])
                value = value.strip()
                if key == "title" and len(value) > BUG_TITLE_MAX_LENGTH:
                    raise ValidationError(
                        f"Title cannot be more than {BUG_TITLE_MAX_LENGTH} characters"
                    )
            elif key == "status":
                if value not in BUG_STATUSES:
                    raise ValidationError(
                        f"Invalid status. Expected one of: {', '.join(BUG_STATUSES)}"
                    )
            elif key == "priority":
                if value not in BUG_PRIORITIES:
                    raise ValidationError(
                        f"Invalid priority. Expected one of: {', '.join(BUG_PRIORITIES)}"
                    )
            elif key == "steps":
                value = value.strip() if isinstance(value, str) else ""
            elif key == "assignedTo":
                value = await self._validated_assignee(value)
            changes[key] = value
        return changes

    async def _validated_assignee(self, value):
        if _blank(value):
            return None
        if not isinstance(value, str) or await self.users.get(value) is None:
            raise ValidationError("Assigned user does not exist")
        return value
