"""Shared Pydantic base model for request and response schemas."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class CyclefitBase(BaseModel):
    """Base model with shared config for all Cyclefit schemas.

    ``from_attributes`` lets response models validate engine dataclasses directly.
    """

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
