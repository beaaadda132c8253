"""Shared pydantic base classes for wire-facing models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Model that accepts snake_case or camelCase input and dumps camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_payload(self) -> dict:
        """Serialise the model into a JSON-friendly camelCase dictionary."""

        return self.model_dump(mode="json", by_alias=True)


__all__ = ["CamelModel"]
