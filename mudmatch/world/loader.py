"""World loader for reading worlds from YAML/JSON files."""

import json
import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from mudmatch.world.graph import InMemoryWorld
from mudmatch.world.schemas import WorldTemplate

logger = logging.getLogger(__name__)


class WorldLoadError(Exception):
    """Error during world loading."""

    pass


def read_world_template(file_path: Path) -> WorldTemplate:
    """Read and validate a world template from a YAML or JSON file.

    Args:
        file_path: Path to a .yaml, .yml or .json file.

    Returns:
        The validated WorldTemplate.

    Raises:
        WorldLoadError: If the file cannot be parsed or the data is invalid.
        FileNotFoundError: If the file does not exist.
    """
    if not file_path.exists():
        raise FileNotFoundError(f"World file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in (".yaml", ".yml", ".json"):
        raise WorldLoadError(
            f"Unsupported file format: {suffix}. Use .yaml, .yml, or .json"
        )

    try:
        with open(file_path, encoding="utf-8") as f:
            if suffix == ".json":
                data: Any = json.load(f)
            else:
                data = yaml.safe_load(f)
    except (json.JSONDecodeError, yaml.YAMLError, UnicodeDecodeError, OSError) as e:
        raise WorldLoadError(f"Failed to parse {file_path}: {e}") from e

    if data is None:
        data = {}

    try:
        template = WorldTemplate.model_validate(data)
    except ValidationError as e:
        raise WorldLoadError(f"Invalid world template: {e}") from e

    logger.debug("Read %d entities from %s", len(template.entities), file_path)
    return template


def load_world_from_file(file_path: Path) -> InMemoryWorld:
    """Load a world file into an InMemoryWorld.

    Raises:
        WorldLoadError: If the file cannot be parsed or the data is invalid.
        FileNotFoundError: If the file does not exist.
    """
    return InMemoryWorld.from_template(read_world_template(file_path))
