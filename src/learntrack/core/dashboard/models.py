"""
Dashboard data models.

Defines Pydantic models for the learning tree: topics own projects,
projects own notes. Also provides the partial-update models used by the
store's update actions and the helpers that coerce raw remote documents
into validated models.

Remote documents keep the camelCase keys of the stored data (``startDate``,
``endDate``); Python code uses snake_case attributes through aliases.

Example:
    >>> from learntrack.core.dashboard.models import Project, ProjectStatus
    >>> project = Project(id="p1", title="Graphs", start_date="2024-01-05")
    >>> project.status
    <ProjectStatus.NOT_STARTED: 'not-started'>
    >>> project.to_document()["startDate"]
    '2024-01-05'
"""

import re
import secrets
from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_WHITESPACE_RE = re.compile(r"\s+")


class ProjectStatus(str, Enum):
    """Project status enumeration."""

    NOT_STARTED = "not-started"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


def is_valid_status(value: object) -> bool:
    """Return True if value is one of the recognised status strings."""
    if isinstance(value, ProjectStatus):
        return True
    return isinstance(value, str) and value in {s.value for s in ProjectStatus}


def coerce_status(value: object) -> ProjectStatus:
    """
    Coerce a raw status value into a ProjectStatus.

    Unrecognised values (wrong type, unknown string, missing) fall back to
    NOT_STARTED.
    """
    if is_valid_status(value):
        return ProjectStatus(value)
    return ProjectStatus.NOT_STARTED


def check_status(value: object) -> ProjectStatus:
    """
    Validate a status value.

    Raises:
        ValueError: If the value is not a recognised status
    """
    if not is_valid_status(value):
        raise ValueError(
            f"Invalid status {value!r} (expected one of: "
            f"{', '.join(s.value for s in ProjectStatus)})"
        )
    return ProjectStatus(value)


def new_note_id() -> str:
    """Generate a local identifier for a note not yet stored remotely."""
    return secrets.token_hex(10)


def topic_id_from_name(name: str) -> str:
    """
    Derive a topic ID from its display name.

    Lowercases the name and replaces every whitespace run with a hyphen.

    Example:
        >>> topic_id_from_name("Data  Structures")
        'data-structures'
    """
    return _WHITESPACE_RE.sub("-", name.lower())


class Note(BaseModel):
    """
    A dated free-text entry attached to a project.

    Attributes:
        id: Stable identifier, shared with the remote note document
        date: Date of the entry (ISO date string)
        content: Free-form note text
    """

    id: str = Field(default_factory=new_note_id, description="Stable note identifier")
    date: str = Field(default="", description="Date of the entry")
    content: str = Field(default="", description="Note text")

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Fields stored in the remote note document (the id is the document ID)."""
        return {"date": self.date, "content": self.content}


class Project(BaseModel):
    """
    A unit of learning work nested under a topic.

    Project IDs are unique across the whole tree, not only within a topic.

    Attributes:
        id: Unique project identifier
        title: Short project title
        description: Longer description
        status: Current status
        start_date: ISO start date
        end_date: ISO end date, or None while open-ended
        notes: Ordered notes
    """

    id: str = Field(..., min_length=1, description="Unique project identifier")
    title: str = Field(default="", description="Project title")
    description: str = Field(default="", description="Project description")
    status: ProjectStatus = Field(default=ProjectStatus.NOT_STARTED)
    start_date: str = Field(default="", alias="startDate", description="ISO start date")
    end_date: str | None = Field(default=None, alias="endDate", description="ISO end date")
    notes: list[Note] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: object) -> ProjectStatus:
        """Reject unknown statuses; remote documents are coerced before reaching here."""
        return check_status(v)

    def to_document(self) -> dict[str, Any]:
        """Fields stored in the remote project document (notes live in a subcollection)."""
        return {
            "title": self.title,
            "description": self.description,
            "status": self.status.value,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }


class Topic(BaseModel):
    """
    Top-level grouping of learning projects.

    Attributes:
        id: Slug-like identifier (see topic_id_from_name)
        name: Display name
        projects: Ordered projects owned by this topic
    """

    id: str = Field(..., min_length=1, description="Topic identifier")
    name: str = Field(default="", description="Display name")
    projects: list[Project] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)

    def to_document(self) -> dict[str, Any]:
        """Fields stored in the remote topic document."""
        return {"name": self.name}

    def progress(self) -> tuple[int, int]:
        """Return (completed, total) project counts."""
        completed = sum(1 for p in self.projects if p.status == ProjectStatus.COMPLETED)
        return completed, len(self.projects)


@dataclass
class ProjectRef:
    """
    Project index entry.

    ``project`` is the same object held in the owning topic's list, so
    mutations through the index are visible in the tree and vice versa.
    """

    topic_id: str
    project: Project


class TopicPatch(BaseModel):
    """Partial update of a topic. Only explicitly set fields are applied."""

    name: str | None = None

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("name", mode="before")
    @classmethod
    def validate_name(cls, v: object) -> object:
        if v is None or (isinstance(v, str) and not v.strip()):
            raise ValueError("Topic name cannot be empty")
        return v

    def to_document(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True, by_alias=True, mode="json")


class ProjectPatch(BaseModel):
    """
    Partial update of a project.

    IDs and notes cannot be changed through a patch; unknown fields are
    rejected.
    """

    title: str | None = None
    description: str | None = None
    status: ProjectStatus | None = None
    start_date: str | None = Field(default=None, alias="startDate")
    end_date: str | None = Field(default=None, alias="endDate")

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    @field_validator("title", "description", "start_date", mode="before")
    @classmethod
    def validate_not_null(cls, v: object) -> object:
        # Only end_date may be cleared; the other fields are always strings
        if v is None:
            raise ValueError("field cannot be null")
        return v

    @field_validator("status", mode="before")
    @classmethod
    def validate_status(cls, v: object) -> ProjectStatus:
        return check_status(v)

    def to_document(self) -> dict[str, Any]:
        """Remote field updates, camelCase keys, only the fields that were set."""
        return self.model_dump(exclude_unset=True, by_alias=True, mode="json")

    def local_fields(self) -> dict[str, Any]:
        """Attribute updates for the local Project model."""
        return {name: getattr(self, name) for name in self.model_fields_set}


# ==============================================================================
# Document coercion
# ==============================================================================


def _as_str(value: object) -> str:
    return "" if value is None else str(value)


def note_from_document(doc_id: str, data: dict[str, Any]) -> Note:
    """Build a Note from a remote document, coercing scalars to strings."""
    return Note(id=doc_id, date=_as_str(data.get("date")), content=_as_str(data.get("content")))


def project_from_document(
    doc_id: str, data: dict[str, Any], notes: list[Note] | None = None
) -> Project:
    """
    Build a Project from a remote document.

    Scalars are coerced to strings, ``endDate`` stays None when absent or
    null, and unrecognised statuses become NOT_STARTED.
    """
    end_date = data.get("endDate")
    return Project(
        id=doc_id,
        title=_as_str(data.get("title")),
        description=_as_str(data.get("description")),
        status=coerce_status(data.get("status")),
        start_date=_as_str(data.get("startDate")),
        end_date=None if end_date is None else str(end_date),
        notes=notes or [],
    )


def topic_from_document(
    doc_id: str, data: dict[str, Any] | None, projects: list[Project] | None = None
) -> Topic:
    """Build a Topic from a remote document; a missing name falls back to the ID."""
    name = (data or {}).get("name")
    return Topic(
        id=doc_id,
        name=doc_id if name is None else str(name),
        projects=projects or [],
    )
