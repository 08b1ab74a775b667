"""
Dashboard state: learning topics, projects and notes.

The DashboardStore keeps the topic tree and its flat project index in
memory and mirrors mutations to an optional remote document store.
"""

from .exceptions import (
    DashboardError,
    DuplicateError,
    DuplicateProjectError,
    DuplicateTopicError,
    NoteNotFoundError,
    NotFoundError,
    ProjectNotFoundError,
    RemoteSyncError,
    TopicNotFoundError,
)
from .models import (
    Note,
    Project,
    ProjectPatch,
    ProjectRef,
    ProjectStatus,
    Topic,
    TopicPatch,
    topic_id_from_name,
)
from .store import DashboardStore

__all__ = [
    # Store
    "DashboardStore",
    # Models
    "Note",
    "Project",
    "ProjectPatch",
    "ProjectRef",
    "ProjectStatus",
    "Topic",
    "TopicPatch",
    "topic_id_from_name",
    # Errors
    "DashboardError",
    "DuplicateError",
    "DuplicateProjectError",
    "DuplicateTopicError",
    "NoteNotFoundError",
    "NotFoundError",
    "ProjectNotFoundError",
    "RemoteSyncError",
    "TopicNotFoundError",
]
