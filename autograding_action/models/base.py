"""Base model configuration for all data structures."""

from pydantic import BaseModel, ConfigDict


class Model(BaseModel):
    """Base model with standard configuration.

    Unknown keys are ignored so that fields belonging to another test variant
    never make a definition invalid.
    """

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)
