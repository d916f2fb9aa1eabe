"""Exception hierarchy for the relay pipeline.

    RelayError
    ├── ValidationError        client-caused, maps to HTTP 400
    ├── SessionCreationError   thread could not be opened, HTTP 500
    ├── AssistantRunError      an assistant stage failed, HTTP 500
    └── PersistenceError       store write/read failed, logged only
"""


class RelayError(Exception):
    """Base exception for all pipeline errors."""


class ValidationError(RelayError):
    """Request input is missing or empty."""


class SessionCreationError(RelayError):
    """The remote API refused or failed to create a thread."""


class AssistantRunError(RelayError):
    """An assistant invocation failed at some phase of its run.

    Args:
        assistant_id: Identifier of the assistant that failed
        message: Human-readable description
        phase: Last run phase reached before the failure
    """

    def __init__(
        self,
        assistant_id: str | None,
        message: str,
        phase: str | None = None,
    ) -> None:
        super().__init__(message)
        self.assistant_id = assistant_id
        self.phase = phase


class PersistenceError(RelayError):
    """A document store operation failed.

    Args:
        collection: Collection being read or written
        user_id: Document key
        message: Human-readable description
    """

    def __init__(self, collection: str, user_id: str, message: str) -> None:
        super().__init__(message)
        self.collection = collection
        self.user_id = user_id
