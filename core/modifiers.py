"""Structure modifiers that adapt templates to content constraints."""

from dataclasses import replace

from models.structure import StructureTemplate

# Dialogue needs room in the mix and on screen
_DIALOGUE_DENSITY_CAP = {"MAX": "MED", "HIGH": "MED"}
_DIALOGUE_CUT_SPEED_CAP = {"FAST": "MODERATE"}


def apply_dialogue_constraints(structure: StructureTemplate) -> StructureTemplate:
    """Return a copy of the structure tuned for speech-heavy content.

    Sound density MAX/HIGH becomes MED and FAST cuts become MODERATE.
    The input is left untouched and applying this twice gives the same
    result as applying it once.
    """
    segments = tuple(
        replace(
            seg,
            sound_density=_DIALOGUE_DENSITY_CAP.get(seg.sound_density, seg.sound_density),
            cut_speed_guidance=_DIALOGUE_CUT_SPEED_CAP.get(
                seg.cut_speed_guidance, seg.cut_speed_guidance
            ),
        )
        for seg in structure.segments
    )
    return replace(structure, segments=segments)
