"""Project save/load functionality."""

import json
import logging
import os
import tempfile
from pathlib import Path

from models.project import SCHEMA_VERSION, ResonanceProject

logger = logging.getLogger(__name__)

_LAYER_NAMES = ("blueprint", "execution", "validation", "outcome")


class ProjectError(Exception):
    """Base exception for project errors."""
    pass


class ProjectLoadError(ProjectError):
    """Raised when project loading fails."""
    pass


class ProjectSaveError(ProjectError):
    """Raised when project saving fails."""
    pass


def save_project(filepath: Path, project: ResonanceProject) -> Path:
    """Save a project to a JSON file.

    Args:
        filepath: Path to save the project file
        project: Project to save

    Returns:
        The path written

    Raises:
        ProjectSaveError: If the file cannot be written
    """
    filepath = Path(filepath)
    data = project.to_dict()

    try:
        filepath.parent.mkdir(parents=True, exist_ok=True)

        # Write to a temp file in the same directory, then rename
        fd, temp_path = tempfile.mkstemp(
            suffix=".tmp",
            prefix=".project_",
            dir=filepath.parent
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, indent=2, ensure_ascii=False)
            os.replace(temp_path, filepath)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise

    except OSError as e:
        logger.error(f"Failed to save project: {e}")
        raise ProjectSaveError(f"Failed to save project to {filepath}: {e}") from e

    logger.info(f"Project saved to {filepath} ({project.status})")
    return filepath


def _validate_project_structure(data: dict) -> list[str]:
    """Validate basic project file structure.

    Args:
        data: Parsed JSON data

    Returns:
        List of validation error messages (empty if valid)
    """
    errors = []

    if not isinstance(data, dict):
        errors.append("Project file must be a JSON object")
        return errors

    meta = data.get("meta")
    if not isinstance(meta, dict):
        errors.append("Missing required object: meta")
    elif "version" not in meta:
        errors.append("Missing required field: meta.version")

    layers = data.get("layers")
    if not isinstance(layers, dict):
        errors.append("Missing required object: layers")
        return errors

    for name in _LAYER_NAMES:
        value = layers.get(name)
        if value is not None and not isinstance(value, dict):
            errors.append(f"Field 'layers.{name}' must be an object or null")

    locked = [layers.get(name) is not None for name in ("blueprint", "execution", "validation")]
    if any(locked) and not all(locked):
        errors.append("Layers blueprint, execution, and validation must be all set or all null")

    blueprint = layers.get("blueprint")
    if isinstance(blueprint, dict):
        if "id" not in blueprint:
            errors.append("layers.blueprint missing required field: id")
        if not isinstance(blueprint.get("phase1_data"), dict):
            errors.append("layers.blueprint missing required object: phase1_data")

    return errors


def load_project(filepath: Path) -> ResonanceProject:
    """Load a project from a JSON file.

    Args:
        filepath: Path to the project file

    Returns:
        The loaded ResonanceProject

    Raises:
        ProjectLoadError: If the project file cannot be loaded
    """
    filepath = Path(filepath)

    try:
        with open(filepath, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ProjectLoadError(f"Invalid JSON in project file: {e}")
    except OSError as e:
        raise ProjectLoadError(f"Failed to read project file: {e}")

    validation_errors = _validate_project_structure(data)
    if validation_errors:
        raise ProjectLoadError(
            f"Invalid project file structure:\n  - " + "\n  - ".join(validation_errors)
        )

    # Validate version using semantic comparison
    version = data["meta"]["version"]
    try:
        version_parts = tuple(int(x) for x in version.split("."))
        schema_parts = tuple(int(x) for x in SCHEMA_VERSION.split("."))
        if version_parts > schema_parts:
            logger.warning(f"Project file version {version} is newer than supported {SCHEMA_VERSION}")
    except (ValueError, AttributeError):
        logger.warning(f"Invalid version format: {version}")

    try:
        project = ResonanceProject.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise ProjectLoadError(f"Invalid project data: {e}")

    logger.info(f"Project loaded from {filepath} ({project.status})")
    return project
