"""Load test definitions from autograding.json files."""

import asyncio
import json
import logging
from pathlib import Path

from pydantic import ValidationError

from autograding_action.models.definition import TestDefinition

log = logging.getLogger(__name__)

DEFAULT_DEFINITION_PATH = Path(".github/classroom/autograding.json")


async def load_test_definition(path: Path) -> TestDefinition:
    """Load and validate a test definition file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is empty, not valid JSON or fails validation

    """
    if not path.is_file():
        raise FileNotFoundError(f"Test file not found: {path}")

    content = await asyncio.to_thread(path.read_text, encoding="utf-8")
    if not content.strip():
        raise ValueError(f"Empty test file: {path}")

    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {path}: {e}") from e

    try:
        definition = TestDefinition.model_validate(data)
    except ValidationError as e:
        raise ValueError(f"Invalid test definition schema in {path}: {e}") from e

    log.info("Loaded %d test(s) from %s", len(definition.tests), path)
    return definition
