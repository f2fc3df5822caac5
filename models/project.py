"""Data model for a resonance project and its layers."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from models.production import Blueprint, ExecutionMapping, OutcomeLog, ValidationReport

# Current project schema version
SCHEMA_VERSION = "2.0.0"


@dataclass(frozen=True)
class ProjectMeta:
    """Project-level metadata."""

    version: str = SCHEMA_VERSION
    created_at: str = field(default_factory=lambda: datetime.now().isoformat())

    def to_dict(self) -> dict:
        return {"version": self.version, "created_at": self.created_at}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ProjectMeta":
        if data is None:
            return cls()
        return cls(
            version=data.get("version", SCHEMA_VERSION),
            created_at=data.get("created_at", datetime.now().isoformat()),
        )


@dataclass(frozen=True)
class ProjectLayers:
    """The four project layers.

    blueprint, execution, and validation are either all present
    (locked) or all None (unlocked). outcome is independent.
    """

    blueprint: Optional[Blueprint] = None
    execution: Optional[ExecutionMapping] = None
    validation: Optional[ValidationReport] = None
    outcome: Optional[OutcomeLog] = None

    def __post_init__(self):
        present = [
            self.blueprint is not None,
            self.execution is not None,
            self.validation is not None,
        ]
        if any(present) and not all(present):
            raise ValueError(
                "blueprint, execution, and validation must be all present or all absent"
            )

    @property
    def is_locked(self) -> bool:
        return self.blueprint is not None

    def to_dict(self) -> dict:
        return {
            "blueprint": self.blueprint.to_dict() if self.blueprint else None,
            "execution": self.execution.to_dict() if self.execution else None,
            "validation": self.validation.to_dict() if self.validation else None,
            "outcome": self.outcome.to_dict() if self.outcome else None,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "ProjectLayers":
        if data is None:
            return cls()
        return cls(
            blueprint=Blueprint.from_dict(data["blueprint"]) if data.get("blueprint") else None,
            execution=ExecutionMapping.from_dict(data["execution"]) if data.get("execution") else None,
            validation=ValidationReport.from_dict(data["validation"]) if data.get("validation") else None,
            outcome=OutcomeLog.from_dict(data["outcome"]) if data.get("outcome") else None,
        )


@dataclass(frozen=True)
class ResonanceProject:
    """A project: metadata plus the production layers."""

    meta: ProjectMeta = field(default_factory=ProjectMeta)
    layers: ProjectLayers = field(default_factory=ProjectLayers)

    @property
    def status(self) -> str:
        """LOCKED when a blueprint exists, otherwise UNLOCKED."""
        return "LOCKED" if self.layers.is_locked else "UNLOCKED"

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            "meta": self.meta.to_dict(),
            "layers": self.layers.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ResonanceProject":
        """Deserialize from dictionary."""
        return cls(
            meta=ProjectMeta.from_dict(data.get("meta")),
            layers=ProjectLayers.from_dict(data.get("layers")),
        )
