"""Error kinds raised by the task board core.

All of them are terminal for the request: they describe a caller error or a
legitimate access denial, never a transient failure.
"""


class TaskBoardError(Exception):
    """Base class for domain errors."""

    pass


class NotFoundError(TaskBoardError):
    """Referenced task, user or organization does not exist."""

    pass


class ForbiddenError(TaskBoardError):
    """Authorization denial."""

    def __init__(self, message: str, reason: str | None = None) -> None:
        super().__init__(message)
        self.reason = reason


class InvalidAssigneeError(TaskBoardError):
    """Assignment target is missing or belongs to another organization."""

    pass


class AuthenticationError(TaskBoardError):
    """Credentials or bearer token could not be verified."""

    pass


class ConflictError(TaskBoardError):
    """Unique resource already exists (e.g. email already registered)."""

    pass
