"""
Pydantic settings models for the crawl policy engine.
"""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

from crawl_policy.core.exceptions import ConfigurationError
from crawl_policy.policy.catalog import PRESETS
from crawl_policy.policy.values import TraversalPolicy


class PolicyDefinition(BaseModel):
    """A custom traversal policy declared in configuration."""

    fetch: str = Field(description="Fetch mode, e.g. originStorage")
    freshness: float | str = Field(
        description="Freshness rule name or a number of days",
    )
    processing: str = Field(description="Processing depth, e.g. documentAndRelated")
    transitivity: str = Field(description="Transitivity, e.g. deepShallow")

    model_config = {"extra": "forbid"}

    @model_validator(mode="after")
    def check_policy(self) -> "PolicyDefinition":
        """Reject definitions that would not build a valid policy."""
        try:
            self.to_policy()
        except ConfigurationError as e:
            raise ValueError(str(e)) from e
        return self

    def to_policy(self) -> TraversalPolicy:
        return TraversalPolicy.from_dict(self.model_dump())


class PolicySettings(BaseModel):
    """Policy selection and custom policy definitions."""

    default_policy: str = Field(
        default="default",
        description="Policy applied to seed resources when none is given",
    )
    processing_version: int = Field(
        default=1,
        ge=0,
        description="Current processing version compared by version freshness",
    )
    custom: dict[str, PolicyDefinition] = Field(
        default_factory=dict,
        description="Additional named policies registered into the catalog",
    )

    @model_validator(mode="after")
    def check_default_policy(self) -> "PolicySettings":
        """The default policy must be a preset or a custom definition."""
        if self.default_policy not in PRESETS and self.default_policy not in self.custom:
            raise ValueError(f"Unknown default policy: {self.default_policy}")
        return self


class QueueSettings(BaseModel):
    """Traversal queue configuration."""

    max_depth: int = Field(
        default=10,
        ge=0,
        le=100,
        description="Maximum traversal depth from a seed resource",
    )


class EventSettings(BaseModel):
    """Event feed deduplication configuration."""

    document_type: str = Field(
        default="event",
        description="Document type passed to the store etag lookup",
    )
    max_pages: int | None = Field(
        default=None,
        ge=1,
        description="Maximum event pages to request. None means until exhausted.",
    )


class LoggingSettings(BaseModel):
    """Logging configuration."""

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO",
        description="Minimum logging level",
    )
    format: str = Field(
        default="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        description="Log message format string",
    )
    date_format: str = Field(
        default="%Y-%m-%d %H:%M:%S",
        description="Date format for log timestamps",
    )
    file_path: Path | None = Field(
        default=None,
        description="Path to log file. None means console only.",
    )
    max_file_size_mb: int = Field(
        default=10,
        ge=1,
        le=100,
        description="Maximum log file size before rotation",
    )
    backup_count: int = Field(
        default=3,
        ge=0,
        le=10,
        description="Number of backup log files to keep",
    )
    log_to_console: bool = Field(
        default=True,
        description="Whether to output logs to console",
    )

    @field_validator("file_path", mode="before")
    @classmethod
    def convert_file_path(cls, v: str | Path | None) -> Path | None:
        """Convert string paths to Path objects."""
        if v is None:
            return None
        return Path(v) if isinstance(v, str) else v


class Settings(BaseModel):
    """
    Root configuration model containing all subsystem settings.

    Settings are loaded from YAML with environment variable overrides.
    """

    policy: PolicySettings = Field(
        default_factory=PolicySettings,
        description="Traversal policy settings",
    )
    queue: QueueSettings = Field(
        default_factory=QueueSettings,
        description="Traversal queue settings",
    )
    events: EventSettings = Field(
        default_factory=EventSettings,
        description="Event feed settings",
    )
    logging: LoggingSettings = Field(
        default_factory=LoggingSettings,
        description="Logging configuration",
    )

    model_config = {
        "extra": "forbid",
        "validate_default": True,
    }
