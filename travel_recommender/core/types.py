"""Shared type aliases used across the recommender modules."""
from __future__ import annotations

from typing import Annotated, Literal, Union

from pydantic import Field, StrictFloat, StrictInt

NonNegMoney = Annotated[float, Field(ge=0)]
Lat = Annotated[float, Field(ge=-90, le=90)]
Lon = Annotated[float, Field(ge=-180, le=180)]
Score = Annotated[int, Field(ge=0, le=100)]
# Budget and duration must arrive as real numbers, never as "2000" strings.
StrictNumber = Union[StrictInt, StrictFloat]
Comfort = Literal["budget", "mid", "premium"]
Role = Literal["user", "assistant"]
