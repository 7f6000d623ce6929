"""Configuration for console reporter."""

from pydantic import BaseModel


class ConsoleConfig(BaseModel):
    """Configuration for console reporter."""

    # Named outputs are written here as a JSON object when set
    outputs_file: str | None = None
