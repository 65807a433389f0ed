"""Base Pydantic models for catalog declarations and settings.

Catalog declarations are immutable and strictly validated, so a typo in
a category or entry declaration fails at startup instead of surfacing as
a missing value in the middle of a request.
"""

from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchemaModel(BaseModel):
    """Base immutable model for all declarations.

    Design principles enforced by this model:
        - Immutability: declarations cannot be modified after creation,
          so a catalog stays identical for the whole run.
        - Strict schema validation: unknown or extra fields are rejected
          to avoid silent errors caused by typos.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        frozen=True,
        extra='forbid',
    )


class SettingsModel(BaseSettings):
    """Base immutable model for runtime settings.

    Unknown environment variables are ignored, so the surrounding
    environment may contain unrelated values.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        extra='ignore',
    )
