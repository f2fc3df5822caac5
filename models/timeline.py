"""Data models for computed timelines and their assessments.

Note: Conflict and QualityReport are NOT persisted to project files.
They are derived on demand from the current parameters.
"""

from dataclasses import dataclass, field

from models.structure import SegmentTemplate


@dataclass(frozen=True)
class CalculatedSegment(SegmentTemplate):
    """A segment template placed on the timeline with integer seconds.

    Attributes:
        duration: Whole seconds allotted to the segment
        start_time: Seconds from the start of the timeline
        end_time: start_time + duration
    """

    duration: int
    start_time: int
    end_time: int

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        data = super().to_dict()
        data.update({
            "duration": self.duration,
            "start_time": self.start_time,
            "end_time": self.end_time,
        })
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "CalculatedSegment":
        """Deserialize from dictionary."""
        start_time = data.get("start_time", 0)
        duration = data.get("duration", 0)
        return cls(
            type=data["type"],
            base_percentage=data.get("base_percentage", 0),
            cut_speed_guidance=data.get("cut_speed_guidance", "CONSTANT"),
            sound_density=data.get("sound_density", "MED"),
            duration=duration,
            start_time=start_time,
            end_time=data.get("end_time", start_time + duration),
        )


@dataclass(frozen=True)
class Conflict:
    """An incompatibility between duration, structure, and platform.

    WARNING conflicts are advisory. BLOCK conflicts disable committing
    the timeline to production.
    """

    code: str
    severity: str  # WARNING, BLOCK
    message: str
    fix: str

    @property
    def is_blocking(self) -> bool:
        return self.severity == "BLOCK"

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "severity": self.severity,
            "message": self.message,
            "fix": self.fix,
        }


@dataclass(frozen=True)
class QualityReport:
    """Retention quality score (0-100) with ordered feedback lines."""

    total_score: int = 100
    feedback: tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        return {
            "total_score": self.total_score,
            "feedback": list(self.feedback),
        }
