"""Data models for the application."""

from models.structure import Pacing, SegmentTemplate, StructureTemplate
from models.timeline import CalculatedSegment, Conflict, QualityReport
from models.production import (
    AudioPlan,
    Blueprint,
    ExecutionMapping,
    ExecutionSegment,
    OutcomeLog,
    Phase1Data,
    PlatformContext,
    SafeZones,
    TimeRange,
    ValidationReport,
    ValidationSignal,
    VisualDensityMarker,
)
from models.project import ProjectLayers, ProjectMeta, ResonanceProject, SCHEMA_VERSION

__all__ = [
    # Structures
    "Pacing",
    "SegmentTemplate",
    "StructureTemplate",
    # Timeline
    "CalculatedSegment",
    "Conflict",
    "QualityReport",
    # Production layers
    "AudioPlan",
    "Blueprint",
    "ExecutionMapping",
    "ExecutionSegment",
    "OutcomeLog",
    "Phase1Data",
    "PlatformContext",
    "SafeZones",
    "TimeRange",
    "ValidationReport",
    "ValidationSignal",
    "VisualDensityMarker",
    # Project
    "ProjectLayers",
    "ProjectMeta",
    "ResonanceProject",
    "SCHEMA_VERSION",
]
