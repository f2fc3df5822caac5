"""Shared constants for the timeline engines, state machine, and CLI.

Single source of truth for the enum-like string values used across
the partition, rules, quality, and validation modules.
"""

# Narrative segment types
SEGMENT_TYPES = ["HOOK", "BUILD", "PEAK", "SUSTAIN", "RESOLVE", "BREAK"]

# Cut speed guidance values (MODERATE is only produced by the dialogue modifier)
CUT_SPEEDS = ["FAST", "SLOW", "ACCEL", "DECEL", "CONSTANT", "MODERATE"]

# Sound density levels, quietest first
SOUND_DENSITIES = ["SILENCE", "LOW", "MED", "HIGH", "MAX"]
HIGH_ENERGY_DENSITIES = frozenset({"HIGH", "MAX"})

# Pacing start values for structure templates
PACING_STARTS = ["FAST", "SLOW", "CONSTANT"]

# Distribution platforms
PLATFORMS = ["TikTok", "Instagram", "YouTube", "YouTube Shorts", "LinkedIn"]
SHORT_FORM_PLATFORMS = frozenset({"TikTok", "Instagram", "YouTube Shorts"})

# Input bounds (enforced at the boundary, not by the engines)
MIN_DURATION_SECONDS = 5
MAX_DURATION_SECONDS = 180

# Phase-1 defaults
DEFAULT_DURATION_SECONDS = 60
DEFAULT_STRUCTURE_ID = "surge"
DEFAULT_PLATFORM = "TikTok"

# Short-form hooks longer than this are clamped / penalized
HOOK_MAX_SECONDS = 3

# Execution mapping values
PACING_CURVES = ["STATIC", "LINEAR_ACCEL", "EXP_DECEL"]
VISUAL_INTENSITIES = ["LOW", "MED", "HIGH"]

# Initial average shot length (seconds) per segment type
DEFAULT_TARGET_ASL = {
    "HOOK": 1.5,
    "BUILD": 2.0,
    "PEAK": 0.8,
    "SUSTAIN": 3.0,
    "RESOLVE": 4.0,
    "BREAK": 5.0,
}
FALLBACK_TARGET_ASL = 2.5

DEFAULT_BPM = 120
DEFAULT_INTENSITY = "MED"
DEFAULT_PACING_CURVE = "STATIC"

# Frame grid used by the rhythm integrity check
FRAME_RATE = 30
FRAME_DRIFT_TOLERANCE = 0.001

# Validation statuses and signal results
VALIDATION_STATUSES = ["PASS", "WARNING", "FAIL"]
SIGNAL_RESULTS = ["PASS", "WARNING", "FAIL", "INFO"]

# Conflict severities
SEVERITY_WARNING = "WARNING"
SEVERITY_BLOCK = "BLOCK"

# Outcome log bounds
MIN_RETENTION = 0
MAX_RETENTION = 100
MIN_CONFIDENCE = 1
MAX_CONFIDENCE = 5
