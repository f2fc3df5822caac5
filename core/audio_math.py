"""Frame and beat arithmetic for execution plans."""

from core.constants import FRAME_RATE


def calculate_frames_per_beat(bpm: float, fps: int = FRAME_RATE) -> float:
    """Number of frames per beat: (fps * 60) / bpm.

    Raises:
        ValueError: If bpm is not positive
    """
    if bpm <= 0:
        raise ValueError(f"bpm must be positive, got {bpm}")
    return (fps * 60) / bpm


def asl_to_frames(target_asl: float, fps: int = FRAME_RATE) -> float:
    """Convert an average shot length in seconds to frames."""
    return target_asl * fps


def frame_drift(target_asl: float, fps: int = FRAME_RATE) -> float:
    """Distance in frames between a shot length and the nearest whole frame."""
    frames = asl_to_frames(target_asl, fps)
    return abs(frames - round(frames))
