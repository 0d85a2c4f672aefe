"""Parser and rewriter configuration."""

from __future__ import annotations

import keyword

from pydantic import BaseModel, Field, field_validator


class ExprConfig(BaseModel):
    """Options for parsing and rendering boolean expressions.

    Frozen so it can key the parse cache.
    """

    model_config = {"frozen": True}

    max_depth: int = Field(default=64, ge=1)
    keyword_operators: bool = True  # accept and/or/not alongside &&/||/!
    method_name: str = "truthy"

    @field_validator("method_name")
    @classmethod
    def _method_name_is_identifier(cls, value: str) -> str:
        if not value.isidentifier() or keyword.iskeyword(value):
            raise ValueError(f"method_name must be a non-keyword identifier, got {value!r}")
        return value


DEFAULT_CONFIG = ExprConfig()
