"""Discovery of reporter plugins through package entry points."""

from importlib.metadata import EntryPoint, entry_points
from typing import Any

from autograding_action.reporting.manifest import ReporterManifest

ENTRY_POINT_GROUP = "autograding_action.reporters"


class ReporterNotFoundError(LookupError):
    """No reporter is registered under the requested key."""

    def __init__(self, key: str, available: list[str]) -> None:
        super().__init__(
            f"Reporter '{key}' not found. Available reporters: {available}"
        )
        self.key = key
        self.available = available


def registered_reporters() -> dict[str, EntryPoint]:
    """Installed reporter entry points by key, sorted by key."""
    found = entry_points(group=ENTRY_POINT_GROUP)
    return {entry.name: entry for entry in sorted(found, key=lambda e: e.name)}


def load_reporter_manifest(key: str) -> ReporterManifest[Any]:
    """Import the manifest registered under key (e.g. "console").

    Raises:
        ReporterNotFoundError: If no installed package registers the key

    """
    reporters = registered_reporters()
    if key not in reporters:
        raise ReporterNotFoundError(key, list(reporters))

    manifest: ReporterManifest[Any] = reporters[key].load()
    return manifest
