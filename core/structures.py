"""Structure catalog: the seven built-in emotional structure templates.

The catalog is built and checked once at import time and is read-only
afterwards. Callers go through the lookup functions; the underlying
mapping is never handed out directly.
"""

import logging
from types import MappingProxyType
from typing import Iterable, Optional

from models.structure import StructureTemplate

logger = logging.getLogger(__name__)


class StructureCatalogError(Exception):
    """Raised when a catalog template breaks a structural invariant."""
    pass


# Raw template data. Keys are the uppercase catalog keys.
_BUILTIN_STRUCTURES = [
    {
        "id": "surge",
        "name": "Surge",
        "description": "Fast rise → Early peak → Quick release. Best for high-energy retention.",
        "pacing": {"start": "FAST", "peak_position_max": 0.6, "silence_required": True},
        "segments": [
            {"type": "HOOK", "base_percentage": 15, "cut_speed_guidance": "FAST", "sound_density": "MED"},
            {"type": "BUILD", "base_percentage": 35, "cut_speed_guidance": "ACCEL", "sound_density": "HIGH"},
            {"type": "PEAK", "base_percentage": 10, "cut_speed_guidance": "FAST", "sound_density": "MAX"},
            {"type": "SUSTAIN", "base_percentage": 25, "cut_speed_guidance": "FAST", "sound_density": "HIGH"},
            {"type": "RESOLVE", "base_percentage": 15, "cut_speed_guidance": "DECEL", "sound_density": "LOW"},
        ],
    },
    {
        "id": "climb",
        "name": "Climb",
        "description": "Slow start → Steady rise → Late payoff. Best for narrative authority.",
        "pacing": {"start": "SLOW", "peak_position_max": 0.9, "silence_required": False},
        "segments": [
            {"type": "HOOK", "base_percentage": 20, "cut_speed_guidance": "SLOW", "sound_density": "LOW"},
            {"type": "BUILD", "base_percentage": 65, "cut_speed_guidance": "ACCEL", "sound_density": "MED"},
            {"type": "PEAK", "base_percentage": 15, "cut_speed_guidance": "FAST", "sound_density": "MAX"},
        ],
    },
    {
        "id": "pulse",
        "name": "Pulse",
        "description": "Constant rhythm, no extreme peaks. Hypnotic and cool.",
        "pacing": {"start": "CONSTANT", "peak_position_max": 1.0, "silence_required": False},
        "segments": [
            {"type": "SUSTAIN", "base_percentage": 25, "cut_speed_guidance": "CONSTANT", "sound_density": "MED"},
            {"type": "SUSTAIN", "base_percentage": 25, "cut_speed_guidance": "CONSTANT", "sound_density": "MED"},
            {"type": "SUSTAIN", "base_percentage": 25, "cut_speed_guidance": "CONSTANT", "sound_density": "MED"},
            {"type": "SUSTAIN", "base_percentage": 25, "cut_speed_guidance": "CONSTANT", "sound_density": "MED"},
        ],
    },
    {
        "id": "drop",
        "name": "Drop",
        "description": "Normal energy → Silence → Impact. Binary structure.",
        "pacing": {"start": "CONSTANT", "peak_position_max": 0.6, "silence_required": True},
        "segments": [
            {"type": "BUILD", "base_percentage": 50, "cut_speed_guidance": "CONSTANT", "sound_density": "MED"},
            {"type": "BREAK", "base_percentage": 5, "cut_speed_guidance": "SLOW", "sound_density": "SILENCE"},
            {"type": "PEAK", "base_percentage": 45, "cut_speed_guidance": "FAST", "sound_density": "MAX"},
        ],
    },
    {
        "id": "breathe",
        "name": "Breathe",
        "description": "Minimal energy, long holds. Antithesis of retention hacking.",
        "pacing": {"start": "SLOW", "peak_position_max": 0.0, "silence_required": False},
        "segments": [
            {"type": "SUSTAIN", "base_percentage": 50, "cut_speed_guidance": "SLOW", "sound_density": "LOW"},
            {"type": "RESOLVE", "base_percentage": 50, "cut_speed_guidance": "SLOW", "sound_density": "SILENCE"},
        ],
    },
    {
        "id": "wave",
        "name": "Wave",
        "description": "Multiple rises and falls. Only valid for longer durations.",
        "pacing": {"start": "FAST", "peak_position_max": 0.8, "silence_required": False},
        "segments": [
            {"type": "HOOK", "base_percentage": 15, "cut_speed_guidance": "FAST", "sound_density": "MED"},
            {"type": "PEAK", "base_percentage": 10, "cut_speed_guidance": "FAST", "sound_density": "HIGH"},
            {"type": "RESOLVE", "base_percentage": 20, "cut_speed_guidance": "SLOW", "sound_density": "LOW"},
            {"type": "BUILD", "base_percentage": 30, "cut_speed_guidance": "ACCEL", "sound_density": "MED"},
            {"type": "PEAK", "base_percentage": 10, "cut_speed_guidance": "FAST", "sound_density": "MAX"},
            {"type": "RESOLVE", "base_percentage": 15, "cut_speed_guidance": "DECEL", "sound_density": "LOW"},
        ],
    },
    {
        "id": "resolve",
        "name": "Resolve",
        "description": "Early tension → Calm authority. Inverted Surge.",
        "pacing": {"start": "FAST", "peak_position_max": 0.2, "silence_required": True},
        "segments": [
            {"type": "PEAK", "base_percentage": 20, "cut_speed_guidance": "FAST", "sound_density": "MAX"},
            {"type": "SUSTAIN", "base_percentage": 30, "cut_speed_guidance": "DECEL", "sound_density": "MED"},
            {"type": "RESOLVE", "base_percentage": 50, "cut_speed_guidance": "SLOW", "sound_density": "SILENCE"},
        ],
    },
]

STRUCTURE_COUNT = 7


def validate_segment_percentages(structure: StructureTemplate) -> bool:
    """Check that segment base percentages sum to exactly 100."""
    return structure.total_percentage == 100


class StructureCatalog:
    """Read-only lookup table of structure templates keyed by uppercase id."""

    def __init__(self, structures: Iterable[StructureTemplate]):
        entries = {}
        for structure in structures:
            key = structure.id.upper()
            if key in entries:
                raise StructureCatalogError(f"Duplicate structure id: {structure.id}")
            if not structure.segments:
                raise StructureCatalogError(f"Structure '{structure.id}' has no segments")
            if not validate_segment_percentages(structure):
                raise StructureCatalogError(
                    f"Structure '{structure.id}' percentages sum to "
                    f"{structure.total_percentage}, expected 100"
                )
            entries[key] = structure
        self._entries = MappingProxyType(entries)

    @classmethod
    def from_dicts(cls, data: Iterable[dict]) -> "StructureCatalog":
        """Build a catalog from raw template dictionaries."""
        return cls(StructureTemplate.from_dict(item) for item in data)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, structure_id: str) -> bool:
        return structure_id.upper() in self._entries

    def get_by_id(self, structure_id: str) -> Optional[StructureTemplate]:
        """Look up a template by id, case-insensitively."""
        return self._entries.get(structure_id.upper())

    def get_by_key(self, key: str) -> Optional[StructureTemplate]:
        """Look up a template by its exact uppercase key."""
        return self._entries.get(key)

    def keys(self) -> list[str]:
        return list(self._entries.keys())

    def all(self) -> list[StructureTemplate]:
        return list(self._entries.values())


# Built once; a bad template stops the process here.
_CATALOG = StructureCatalog.from_dicts(_BUILTIN_STRUCTURES)
assert len(_CATALOG) == STRUCTURE_COUNT


def get_structure_by_id(structure_id: str) -> Optional[StructureTemplate]:
    """Get a structure by its id (e.g. 'surge', 'Climb').

    Returns:
        The template, or None if the id is unknown
    """
    return _CATALOG.get_by_id(structure_id)


def get_structure_by_key(key: str) -> Optional[StructureTemplate]:
    """Get a structure by its uppercase key (e.g. 'SURGE')."""
    return _CATALOG.get_by_key(key)


def get_all_structures() -> list[StructureTemplate]:
    """Get every built-in structure in catalog order."""
    return _CATALOG.all()


def structure_ids() -> list[str]:
    """Lowercase ids of every built-in structure."""
    return [s.id for s in _CATALOG.all()]
