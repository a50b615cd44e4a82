"""
Error taxonomy for the Task Tracker.

Services raise these; config.urls renders them as JSON with the matching
HTTP status. None of them are retried.
"""


class TaskTrackerError(Exception):
    """Base class for all domain errors."""
    status_code = 400
    code = "error"
    default_message = "Request failed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthenticated(TaskTrackerError):
    """A write was attempted without a resolved caller."""
    status_code = 401
    code = "unauthenticated"
    default_message = "Authentication required"


class Forbidden(TaskTrackerError):
    """The resource exists but belongs to another user."""
    status_code = 403
    code = "forbidden"
    default_message = "Not authorized to modify this resource"


class NotFound(TaskTrackerError):
    status_code = 404
    code = "not_found"
    default_message = "Resource not found"


class DuplicateName(TaskTrackerError):
    status_code = 409
    code = "duplicate_name"
    default_message = "Name already exists"


class InUse(TaskTrackerError):
    """Deletion blocked because other records still reference the resource."""
    status_code = 409
    code = "in_use"
    default_message = "Resource is still in use"
