"""
Remote handle provisioning.

Builds the optional DocumentStore handed to the dashboard store. The
store itself never opens connections; the application decides here
whether a remote exists at all.
"""

import logging
import os

from google.cloud.firestore import AsyncClient
from google.oauth2 import service_account

from learntrack.core.config.models import FirestoreConfig, LearntrackConfig

from .backend import DocumentStore, get_backend_class
from .firestore import FirestoreDocumentStore

logger = logging.getLogger(__name__)


def create_firestore_client(config: FirestoreConfig) -> AsyncClient:
    """
    Create a Firestore AsyncClient from configuration.

    An emulator host is exported as FIRESTORE_EMULATOR_HOST, which the
    client library picks up on its own.

    Raises:
        ValueError: If no project ID is configured
    """
    if config.project_id is None:
        raise ValueError("Firestore project_id is not configured")

    if config.emulator_host:
        os.environ["FIRESTORE_EMULATOR_HOST"] = config.emulator_host

    credentials = None
    if config.credentials_file and not config.emulator_host:
        credentials = service_account.Credentials.from_service_account_file(
            config.credentials_file
        )

    return AsyncClient(
        project=config.project_id,
        database=config.database,
        credentials=credentials,
    )


def create_remote(config: LearntrackConfig, backend: str | None = None) -> DocumentStore | None:
    """
    Create the remote handle for a dashboard store.

    Args:
        config: Loaded configuration
        backend: Force a backend by name ('firestore', 'memory'). When None,
            Firestore is used if configured.

    Returns:
        A DocumentStore, or None when no remote is configured

    Raises:
        ValueError: If the backend name is unknown
    """
    if backend is None:
        if not config.firestore.is_configured:
            logger.info("Firestore not configured, using local state only")
            return None
        backend = "firestore"

    if backend == "firestore":
        client = create_firestore_client(config.firestore)
        logger.info(
            "Using Firestore project %s (database %s)",
            config.firestore.project_id,
            config.firestore.database,
        )
        return FirestoreDocumentStore(client)

    backend_class = get_backend_class(backend)
    return backend_class()
