"""
Learntrack - personal learning tracker.

Organises learning into topics, projects and notes, kept in sync with an
optional remote document store.
"""

__version__ = "0.3.0"

# Re-export core models for convenience
from learntrack.core.dashboard.models import Note, Project, ProjectStatus, Topic
from learntrack.core.dashboard.store import DashboardStore

__all__ = ["DashboardStore", "Note", "Project", "ProjectStatus", "Topic", "__version__"]
