"""
Pytest configuration and shared fixtures.

Provides sample topic trees, in-memory remote stores, and an isolated
configuration environment used across the test suite.
"""

import pytest

from learntrack.core.config import clear_cache
from learntrack.core.dashboard.models import Note, Project, ProjectStatus, Topic
from learntrack.core.remote.memory import MemoryDocumentStore

_CONFIG_ENV_VARS = (
    "LEARNTRACK_FIRESTORE_ENABLED",
    "LEARNTRACK_FIRESTORE_PROJECT",
    "LEARNTRACK_FIRESTORE_DATABASE",
    "LEARNTRACK_DATE_FORMAT",
    "FIREBASE_PROJECT_ID",
    "FIRESTORE_EMULATOR_HOST",
    "GOOGLE_APPLICATION_CREDENTIALS",
)


# ==============================================================================
# Environment Fixtures
# ==============================================================================


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """
    Isolate every test from the developer's config and environment.

    Points XDG_CONFIG_HOME at a temp directory, runs in a temp working
    directory, removes learntrack/Firestore env vars, and clears the
    config cache before and after the test.
    """
    for name in _CONFIG_ENV_VARS:
        # setenv first so the variable is restored to unset afterwards
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg-config"))
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    clear_cache()
    yield workdir
    clear_cache()


# ==============================================================================
# Sample Data Fixtures
# ==============================================================================


@pytest.fixture
def sample_topics() -> list[Topic]:
    """
    Provide a small tree: two topics, three projects, a few notes.

    Projects and notes are deliberately not in newest-first order so that
    loading from a remote visibly re-sorts them.
    """
    return [
        Topic(
            id="data-structures",
            name="Data Structures",
            projects=[
                Project(
                    id="heaps",
                    title="Binary heaps",
                    description="Array-backed priority queue",
                    status=ProjectStatus.COMPLETED,
                    start_date="2024-01-05",
                    end_date="2024-01-20",
                    notes=[
                        Note(date="2024-01-06", content="Implemented sift-down"),
                        Note(date="2024-01-18", content="Added heapify"),
                    ],
                ),
                Project(
                    id="tries",
                    title="Tries",
                    status=ProjectStatus.IN_PROGRESS,
                    start_date="2024-02-01",
                ),
            ],
        ),
        Topic(
            id="ml",
            name="Machine Learning",
            projects=[
                Project(
                    id="mnist",
                    title="MNIST classifier",
                    start_date="2024-03-10",
                    notes=[Note(date="2024-03-11", content="Baseline logistic regression")],
                ),
            ],
        ),
    ]


@pytest.fixture
def memory_remote() -> MemoryDocumentStore:
    """Provide an empty in-memory remote store."""
    return MemoryDocumentStore()


@pytest.fixture
def sample_project() -> Project:
    """Provide a standalone project not yet in any tree."""
    return Project(
        id="graphs",
        title="Graph traversal",
        description="BFS and DFS",
        start_date="2024-04-01",
    )
