"""
Configuration data models for learntrack.

These models define the structure of .learntrack.json and
~/.config/learntrack/config.json files, with validation and type safety
via Pydantic.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class FirestoreConfig(BaseModel):
    """
    Connection settings for the Firestore remote.

    When disabled, or when no project ID is configured, the dashboard runs
    on local state only.
    """
    enabled: bool = Field(
        default=True,
        description="Use Firestore when a project ID is configured"
    )
    project_id: Optional[str] = Field(
        default=None,
        description="Google Cloud project ID"
    )
    database: str = Field(
        default="(default)",
        min_length=1,
        description="Firestore database ID"
    )
    emulator_host: Optional[str] = Field(
        default=None,
        description="host:port of a Firestore emulator (sets FIRESTORE_EMULATOR_HOST)"
    )
    credentials_file: Optional[str] = Field(
        default=None,
        description="Path to a service account JSON key"
    )

    @field_validator("project_id", "emulator_host", "credentials_file", mode="before")
    @classmethod
    def empty_to_none(cls, v: object) -> object:
        """Treat empty strings (e.g. unset env placeholders) as missing."""
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @property
    def is_configured(self) -> bool:
        """True when Firestore should be used."""
        return self.enabled and self.project_id is not None


class DisplayConfig(BaseModel):
    """Presentation settings for the command line."""
    date_format: Optional[str] = Field(
        default=None,
        description="strftime format used to show dates (default: 'Jan 5, 2024')"
    )


class LearntrackConfig(BaseModel):
    """
    Top-level learntrack configuration.

    Merged from defaults, user config, project config and environment
    variables (see loader.load_config).
    """
    firestore: FirestoreConfig = Field(default_factory=FirestoreConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)

    model_config = ConfigDict(extra="ignore")
