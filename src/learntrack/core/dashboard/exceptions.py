"""
Custom exceptions for the dashboard store.

Exception Hierarchy:
    DashboardError (base)
    ├── NotFoundError (referenced entity absent)
    │   ├── TopicNotFoundError
    │   ├── ProjectNotFoundError
    │   └── NoteNotFoundError (note index out of range)
    ├── DuplicateError (entity ID already in use)
    │   ├── DuplicateTopicError
    │   └── DuplicateProjectError
    └── RemoteSyncError (remote document store operation failed)

Not-found and duplicate errors are raised before any local or remote
mutation. RemoteSyncError wraps the original exception via ``__cause__``.

Example:
    >>> from learntrack.core.dashboard.exceptions import TopicNotFoundError
    >>> try:
    ...     raise TopicNotFoundError("math")
    ... except TopicNotFoundError as e:
    ...     print(e, e.context)
    Topic 'math' not found {'topic_id': 'math'}
"""


class DashboardError(Exception):
    """
    Base exception for all dashboard errors.

    Attributes:
        message: Human-readable error message
        context: Optional dictionary of additional context
    """

    def __init__(self, message: str, **context: object) -> None:
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        return self.message


class NotFoundError(DashboardError):
    """Raised when a referenced topic, project or note does not exist."""


class TopicNotFoundError(NotFoundError):
    def __init__(self, topic_id: str) -> None:
        super().__init__(f"Topic '{topic_id}' not found", topic_id=topic_id)
        self.topic_id = topic_id


class ProjectNotFoundError(NotFoundError):
    """
    Raised when a project is missing from the project index.

    When ``topic_id`` is given, the project exists but is not owned by
    that topic.
    """

    def __init__(self, project_id: str, topic_id: str | None = None) -> None:
        if topic_id is None:
            super().__init__(f"Project '{project_id}' not found", project_id=project_id)
        else:
            super().__init__(
                f"Project '{project_id}' not found in topic '{topic_id}'",
                project_id=project_id,
                topic_id=topic_id,
            )
        self.project_id = project_id
        self.topic_id = topic_id


class NoteNotFoundError(NotFoundError):
    def __init__(self, project_id: str, note_index: int) -> None:
        super().__init__(
            f"Note {note_index} not found in project '{project_id}'",
            project_id=project_id,
            note_index=note_index,
        )
        self.project_id = project_id
        self.note_index = note_index


class DuplicateError(DashboardError):
    """Raised when creating an entity whose ID is already used."""


class DuplicateTopicError(DuplicateError):
    def __init__(self, name: str, topic_id: str) -> None:
        super().__init__(f'Topic "{name}" already exists.', name=name, topic_id=topic_id)
        self.topic_id = topic_id


class DuplicateProjectError(DuplicateError):
    def __init__(self, project_id: str, topic_id: str) -> None:
        super().__init__(
            f"Project '{project_id}' already exists in topic '{topic_id}'",
            project_id=project_id,
            topic_id=topic_id,
        )
        self.project_id = project_id


class RemoteSyncError(DashboardError):
    """
    Exception for remote document store failures.

    Raised by a store action when its remote read or write fails. Local
    state is left untouched. The original exception is preserved as
    ``__cause__``.

    Attributes:
        action: Name of the store action that failed (e.g. "create_topic")
    """

    def __init__(self, action: str, message: str, **context: object) -> None:
        super().__init__(message, action=action, **context)
        self.action = action

    def __str__(self) -> str:
        return f"[{self.action}] {self.message}"


__all__ = [
    "DashboardError",
    "NotFoundError",
    "TopicNotFoundError",
    "ProjectNotFoundError",
    "NoteNotFoundError",
    "DuplicateError",
    "DuplicateTopicError",
    "DuplicateProjectError",
    "RemoteSyncError",
]
