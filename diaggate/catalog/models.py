from typing import List, Literal

from pydantic import BaseModel, ConfigDict, Field


class MessageTemplate(BaseModel):
    """One catalog entry. `text` may reference parameters as `%name`."""
    model_config = ConfigDict(extra="forbid")

    id: str = Field(..., min_length=1, description="Message id (e.g., DOTA001F)")
    severity: Literal["FATAL", "ERROR", "WARN", "INFO", "DEBUG"]
    text: str


class CatalogDocument(BaseModel):
    """Schema of a catalog YAML file."""
    model_config = ConfigDict(extra="forbid")

    version: str = "1"
    messages: List[MessageTemplate] = Field(default_factory=list)
