"""Domain exceptions for simpletodo.

Services raise these; the API layer maps them to HTTP status codes.
"""


class SimpleTodoError(RuntimeError):
    """Base class for all simpletodo errors."""


class StorageError(SimpleTodoError):
    """Raised when a data file cannot be read or written."""


class TaskValidationError(SimpleTodoError, ValueError):
    """Raised when task input fails validation (empty or too long)."""


class TaskNotFoundError(SimpleTodoError, LookupError):
    """Raised when a task ID does not exist."""

    def __init__(self, message: str = "Task not found"):
        super().__init__(message)


class TaskStateError(SimpleTodoError):
    """Raised when an operation is not allowed in the task's current status."""


class TaskServiceError(SimpleTodoError):
    """Generic task operation failure (storage problems are wrapped in this)."""


class WIPLimitError(SimpleTodoError, ValueError):
    """Raised for an invalid WIP limit value."""


class PromptingError(SimpleTodoError):
    """Raised when prompting configuration or prompt bookkeeping fails."""
