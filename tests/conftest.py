"""Shared test fixtures and helpers for all tests."""

from typing import Optional

import pytest

from core.parameters import ResonanceParameters
from core.planner import build_phase1_data, build_platform_context, plan_timeline
from core.project_state import LockBlueprint, reduce_project
from core.structures import get_structure_by_id
from models.project import ProjectMeta, ResonanceProject
from models.structure import SegmentTemplate, StructureTemplate

FIXED_TIMESTAMP = "2026-01-01T12:00:00"
FIXED_BLUEPRINT_ID = "bp-0001"


def fixed_clock() -> str:
    return FIXED_TIMESTAMP


def fixed_id_factory() -> str:
    return FIXED_BLUEPRINT_ID


def make_structure(
    segments: list[tuple[str, int]],
    structure_id: str = "custom",
    sound_density: str = "MED",
) -> StructureTemplate:
    """Create a structure template from (type, percentage) pairs.

    This is a factory function (not a fixture) so tests can build
    templates the catalog does not ship.
    """
    return StructureTemplate(
        id=structure_id,
        name=structure_id.title(),
        segments=tuple(
            SegmentTemplate(
                type=seg_type,
                base_percentage=percentage,
                cut_speed_guidance="CONSTANT",
                sound_density=sound_density,
            )
            for seg_type, percentage in segments
        ),
    )


def make_lock_command(
    duration: int = 60,
    structure_id: str = "surge",
    platform: str = "TikTok",
    has_dialogue: bool = False,
) -> LockBlueprint:
    """Build a LockBlueprint for a planned timeline."""
    params = ResonanceParameters(
        duration=duration,
        structure_id=structure_id,
        platform=platform,
        has_dialogue=has_dialogue,
    )
    result = plan_timeline(params)
    return LockBlueprint(
        phase1_data=build_phase1_data(result),
        platform_context=build_platform_context(params),
    )


def lock_project(
    project: Optional[ResonanceProject] = None,
    **kwargs,
) -> ResonanceProject:
    """Lock a project with the fixed clock and id factory."""
    project = project if project is not None else ResonanceProject(
        meta=ProjectMeta(created_at=FIXED_TIMESTAMP)
    )
    return reduce_project(
        project,
        make_lock_command(**kwargs),
        clock=fixed_clock,
        id_factory=fixed_id_factory,
    )


@pytest.fixture
def surge() -> StructureTemplate:
    """The Surge template from the catalog."""
    return get_structure_by_id("surge")


@pytest.fixture
def empty_project() -> ResonanceProject:
    """An unlocked project with a fixed creation time."""
    return ResonanceProject(meta=ProjectMeta(created_at=FIXED_TIMESTAMP))


@pytest.fixture
def locked_project(empty_project) -> ResonanceProject:
    """Surge, 60s, TikTok, locked with the fixed clock and id."""
    return lock_project(empty_project)


@pytest.fixture
def isolated_settings(tmp_path, monkeypatch):
    """Point settings at a temp config file and clear env overrides."""
    config_path = tmp_path / "config.json"
    monkeypatch.setenv("RESONANCE_CONFIG", str(config_path))
    for name in (
        "RESONANCE_DEFAULT_DURATION",
        "RESONANCE_DEFAULT_STRUCTURE",
        "RESONANCE_DEFAULT_PLATFORM",
        "RESONANCE_CLEAR_OUTCOME_ON_UNLOCK",
        "RESONANCE_LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    return config_path
