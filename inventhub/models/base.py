"""Shared base for response models serialized with camelCase keys."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Wire models. Python side uses snake_case, JSON uses camelCase."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
