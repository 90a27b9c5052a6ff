"""Domain exceptions raised by the mutation policy and the auth layer.

Each kind carries the HTTP status the server boundary answers with. The
exception handlers in ``api.exceptions.handlers`` turn them into
``{"detail": <message>}`` responses; anything that is not one of these kinds
becomes a generic 500.
"""


class BugTrackerError(Exception):
    """Base class for errors that map to a precise HTTP status."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(BugTrackerError):
    """Bad or missing input (400)."""

    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(BugTrackerError):
    """Missing, invalid, expired or revoked credential (401)."""

    status_code = 401
    default_message = "Not authorized"


class AuthorizationError(BugTrackerError):
    """Authenticated, but not permitted to act on the resource (403)."""

    status_code = 403
    default_message = "Forbidden"


class NotFoundError(BugTrackerError):
    """The referenced resource does not exist (404)."""

    status_code = 404
    default_message = "Not found"


class PersistenceError(BugTrackerError):
    """The document store failed unexpectedly (500)."""

    status_code = 500
    default_message = "Internal server error"
