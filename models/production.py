"""Data models for the production-planning layers.

Layers:
- Blueprint: frozen snapshot of the committed timeline (layer 1)
- ExecutionMapping: editable production plan on top of it (layer 2)
- ValidationReport: recomputed readiness assessment (layer 3)
- OutcomeLog: real-world performance, independent of the other layers
"""

from dataclasses import dataclass, field
from typing import Optional

from models.structure import StructureTemplate
from models.timeline import CalculatedSegment


@dataclass(frozen=True)
class SafeZones:
    """Screen margins (pixels) kept free of important content."""

    top: int = 0
    bottom: int = 0
    left: int = 0
    right: int = 0

    def to_dict(self) -> dict:
        return {"top": self.top, "bottom": self.bottom, "left": self.left, "right": self.right}

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "SafeZones":
        if data is None:
            return cls()
        return cls(
            top=data.get("top", 0),
            bottom=data.get("bottom", 0),
            left=data.get("left", 0),
            right=data.get("right", 0),
        )


@dataclass(frozen=True)
class PlatformContext:
    """Target platform constraints captured when the blueprint is locked."""

    platform_id: str
    max_duration: int
    safe_zones: SafeZones = field(default_factory=SafeZones)

    def to_dict(self) -> dict:
        return {
            "platform_id": self.platform_id,
            "max_duration": self.max_duration,
            "safe_zones": self.safe_zones.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "PlatformContext":
        return cls(
            platform_id=data.get("platform_id", ""),
            max_duration=data.get("max_duration", 0),
            safe_zones=SafeZones.from_dict(data.get("safe_zones")),
        )


@dataclass(frozen=True)
class Phase1Data:
    """The structure and timeline the user committed to."""

    structure: StructureTemplate
    timeline: tuple[CalculatedSegment, ...]

    def to_dict(self) -> dict:
        return {
            "structure": self.structure.to_dict(),
            "timeline": [seg.to_dict() for seg in self.timeline],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Phase1Data":
        return cls(
            structure=StructureTemplate.from_dict(data["structure"]),
            timeline=tuple(CalculatedSegment.from_dict(s) for s in data.get("timeline", [])),
        )


@dataclass(frozen=True)
class Blueprint:
    """Layer 1: created once per lock, never edited, dropped on unlock."""

    id: str
    timestamp: str  # ISO 8601
    platform_context: PlatformContext
    phase1_data: Phase1Data

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "timestamp": self.timestamp,
            "platform_context": self.platform_context.to_dict(),
            "phase1_data": self.phase1_data.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Blueprint":
        return cls(
            id=data["id"],
            timestamp=data.get("timestamp", ""),
            platform_context=PlatformContext.from_dict(data.get("platform_context", {})),
            phase1_data=Phase1Data.from_dict(data["phase1_data"]),
        )


@dataclass(frozen=True)
class TimeRange:
    """A span of the timeline in seconds."""

    start: float
    end: float

    def to_dict(self) -> dict:
        return {"start": self.start, "end": self.end}

    @classmethod
    def from_dict(cls, data: dict) -> "TimeRange":
        return cls(start=data.get("start", 0), end=data.get("end", 0))


@dataclass(frozen=True)
class ExecutionSegment(CalculatedSegment):
    """A timeline segment with its editing plan.

    Attributes:
        target_asl: Target average shot length in seconds
        pacing_curve: STATIC, LINEAR_ACCEL, or EXP_DECEL
    """

    target_asl: float
    pacing_curve: str = "STATIC"

    def to_dict(self) -> dict:
        """Serialize to dictionary for JSON export."""
        data = super().to_dict()
        data["target_asl"] = self.target_asl
        data["pacing_curve"] = self.pacing_curve
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ExecutionSegment":
        """Deserialize from dictionary."""
        base = CalculatedSegment.from_dict(data)
        return cls(
            type=base.type,
            base_percentage=base.base_percentage,
            cut_speed_guidance=base.cut_speed_guidance,
            sound_density=base.sound_density,
            duration=base.duration,
            start_time=base.start_time,
            end_time=base.end_time,
            target_asl=data.get("target_asl", 2.5),
            pacing_curve=data.get("pacing_curve", "STATIC"),
        )


@dataclass(frozen=True)
class AudioPlan:
    """Beat grid and mix settings for the edit."""

    bpm: float = 120
    silence_markers: tuple[TimeRange, ...] = ()
    ducking_enabled: bool = False

    def to_dict(self) -> dict:
        return {
            "bpm": self.bpm,
            "silence_markers": [m.to_dict() for m in self.silence_markers],
            "ducking_enabled": self.ducking_enabled,
        }

    @classmethod
    def from_dict(cls, data: Optional[dict]) -> "AudioPlan":
        if data is None:
            return cls()
        return cls(
            bpm=data.get("bpm", 120),
            silence_markers=tuple(TimeRange.from_dict(m) for m in data.get("silence_markers", [])),
            ducking_enabled=data.get("ducking_enabled", False),
        )


@dataclass(frozen=True)
class VisualDensityMarker:
    """Planned on-screen motion for the segment at the same index."""

    time_range: str  # "start-end" in seconds
    intensity: str = "MED"  # LOW, MED, HIGH

    def to_dict(self) -> dict:
        return {"time_range": self.time_range, "intensity": self.intensity}

    @classmethod
    def from_dict(cls, data: dict) -> "VisualDensityMarker":
        return cls(
            time_range=data.get("time_range", ""),
            intensity=data.get("intensity", "MED"),
        )


@dataclass(frozen=True)
class ExecutionMapping:
    """Layer 2: the production plan.

    visual_density is aligned by index with segments, so both always
    have the same length.
    """

    audio_plan: AudioPlan
    segments: tuple[ExecutionSegment, ...]
    visual_density: tuple[VisualDensityMarker, ...]

    def __post_init__(self):
        if len(self.visual_density) != len(self.segments):
            raise ValueError(
                f"visual_density has {len(self.visual_density)} entries "
                f"but there are {len(self.segments)} segments"
            )

    def to_dict(self) -> dict:
        return {
            "audio_plan": self.audio_plan.to_dict(),
            "edit_rhythm": {"segments": [seg.to_dict() for seg in self.segments]},
            "visual_density": [m.to_dict() for m in self.visual_density],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ExecutionMapping":
        rhythm = data.get("edit_rhythm", {})
        return cls(
            audio_plan=AudioPlan.from_dict(data.get("audio_plan")),
            segments=tuple(ExecutionSegment.from_dict(s) for s in rhythm.get("segments", [])),
            visual_density=tuple(
                VisualDensityMarker.from_dict(m) for m in data.get("visual_density", [])
            ),
        )


@dataclass(frozen=True)
class ValidationSignal:
    """Result of one readiness check."""

    check_name: str
    result: str  # PASS, WARNING, FAIL, INFO
    message: str
    segment_index: Optional[int] = None

    def to_dict(self) -> dict:
        data = {
            "check_name": self.check_name,
            "result": self.result,
            "message": self.message,
        }
        if self.segment_index is not None:
            data["segment_index"] = self.segment_index
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ValidationSignal":
        return cls(
            check_name=data.get("check_name", ""),
            result=data.get("result", "INFO"),
            message=data.get("message", ""),
            segment_index=data.get("segment_index"),
        )


@dataclass(frozen=True)
class ValidationReport:
    """Layer 3: always recomputed from the current execution mapping."""

    global_status: str = "PASS"  # PASS, WARNING, FAIL
    signals: tuple[ValidationSignal, ...] = ()

    @property
    def is_ready(self) -> bool:
        """Whether the plan can be exported without issues."""
        return self.global_status == "PASS"

    def count(self, result: str) -> int:
        return sum(1 for s in self.signals if s.result == result)

    def to_dict(self) -> dict:
        return {
            "global_status": self.global_status,
            "signals": [s.to_dict() for s in self.signals],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "ValidationReport":
        return cls(
            global_status=data.get("global_status", "PASS"),
            signals=tuple(ValidationSignal.from_dict(s) for s in data.get("signals", [])),
        )


@dataclass(frozen=True)
class OutcomeLog:
    """Real-world performance recorded after posting."""

    posted: bool
    platform: str
    retention_3s: float  # 0-100, percent of viewers past 3 seconds
    user_confidence: int  # 1-5
    logged_at: str  # ISO 8601
    drop_off_timestamp: Optional[str] = None

    def to_dict(self) -> dict:
        data = {
            "posted": self.posted,
            "platform": self.platform,
            "retention_3s": self.retention_3s,
            "user_confidence": self.user_confidence,
            "logged_at": self.logged_at,
        }
        if self.drop_off_timestamp:
            data["drop_off_timestamp"] = self.drop_off_timestamp
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "OutcomeLog":
        return cls(
            posted=data.get("posted", False),
            platform=data.get("platform", "Unknown"),
            retention_3s=data.get("retention_3s", 0),
            user_confidence=data.get("user_confidence", 3),
            logged_at=data.get("logged_at", ""),
            drop_off_timestamp=data.get("drop_off_timestamp"),
        )
