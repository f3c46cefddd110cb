"""Error types raised by the core and translated at the HTTP boundary."""


class TaskHubError(Exception):
    """Base error carrying the HTTP status the boundary should respond with."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class PersistenceError(TaskHubError):
    """The key-value store could not complete a read or write."""


class ObjectStorageError(TaskHubError):
    """The object storage provider failed to mint a URL or delete an object."""


class RemoteUnavailable(TaskHubError):
    """The external collection API failed or returned a non-success status."""

    status_code = 502
