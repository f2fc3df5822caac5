"""Data models for emotional structure templates.

A structure template is an ordered list of segment templates whose
base percentages sum to 100. Templates are immutable: modifiers build
new values instead of editing existing ones.
"""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class Pacing:
    """Pacing rules for a structure.

    Attributes:
        start: Opening energy (FAST, SLOW, CONSTANT)
        peak_position_max: Latest allowed peak position (0.0-1.0, 1.0 = end)
        silence_required: Whether silence must precede the peak
    """

    start: str = "CONSTANT"
    peak_position_max: float = 1.0
    silence_required: bool = False

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "peak_position_max": self.peak_position_max,
            "silence_required": self.silence_required,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Pacing":
        if data is None:
            return cls()
        return cls(
            start=data.get("start", "CONSTANT"),
            peak_position_max=data.get("peak_position_max", 1.0),
            silence_required=data.get("silence_required", False),
        )


@dataclass(frozen=True)
class SegmentTemplate:
    """One segment of a structure template."""

    type: str  # HOOK, BUILD, PEAK, SUSTAIN, RESOLVE, BREAK
    base_percentage: int  # Share of the total duration
    cut_speed_guidance: str  # FAST, SLOW, ACCEL, DECEL, CONSTANT, MODERATE
    sound_density: str  # SILENCE, LOW, MED, HIGH, MAX

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            "type": self.type,
            "base_percentage": self.base_percentage,
            "cut_speed_guidance": self.cut_speed_guidance,
            "sound_density": self.sound_density,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "SegmentTemplate":
        """Deserialize from dictionary."""
        return cls(
            type=data["type"],
            base_percentage=data.get("base_percentage", 0),
            cut_speed_guidance=data.get("cut_speed_guidance", "CONSTANT"),
            sound_density=data.get("sound_density", "MED"),
        )


@dataclass(frozen=True)
class StructureTemplate:
    """A named emotional arc made of ordered segment templates."""

    id: str
    name: str
    description: str = ""
    pacing: Pacing = field(default_factory=Pacing)
    segments: tuple[SegmentTemplate, ...] = ()

    @property
    def total_percentage(self) -> int:
        """Sum of segment base percentages (100 for a valid template)."""
        return sum(seg.base_percentage for seg in self.segments)

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "pacing": self.pacing.to_dict(),
            "segments": [seg.to_dict() for seg in self.segments],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "StructureTemplate":
        """Deserialize from dictionary."""
        return cls(
            id=data["id"],
            name=data.get("name", data["id"].title()),
            description=data.get("description", ""),
            pacing=Pacing.from_dict(data.get("pacing")),
            segments=tuple(
                SegmentTemplate.from_dict(seg) for seg in data.get("segments", [])
            ),
        )
