"""
Base models for all Pydantic models in the analytics core.
"""
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

from ..utils.dates import naive

# Timestamps are compared against calendar-month boundaries, so every
# timestamp entering the core is reduced to naive wall-clock time.
WallClock = Annotated[datetime, AfterValidator(naive)]


class ValueObject(BaseModel):
    """Immutable model for analytics inputs and results."""

    model_config = ConfigDict(frozen=True)


class FamilyOwnedModel(ValueObject):
    """Base model for records owned by a family."""

    family_id: str = Field(..., description="Family that owns this record")
