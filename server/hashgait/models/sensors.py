"""Pydantic models for raw sensor samples and derived features."""

import json
import math
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class TouchSample(BaseModel):
    """Single touch event from the capture surface."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    timestamp: int = Field(..., description="Epoch milliseconds")
    x: float
    y: float
    pressure: float = Field(0.0, ge=0.0, le=1.0)
    kind: Literal["start", "move", "end"] = Field(..., alias="type")
    duration: Optional[int] = Field(None, description="Touch length in ms, set on 'end' only")


class MotionSample(BaseModel):
    """Accelerometer or gyroscope reading."""

    model_config = ConfigDict(frozen=True)

    timestamp: int
    x: float
    y: float
    z: float

    @property
    def magnitude(self) -> float:
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)


class FeatureVector(BaseModel):
    """Six-number summary of one capture session."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    avg_touch_pressure: float
    avg_touch_duration: float
    swipe_velocity: float
    tap_frequency: float
    device_motion_variance: float
    gesture_complexity: float

    @field_validator("*", mode="after")
    @classmethod
    def _finite(cls, value: float) -> float:
        # Non-finite components would poison hashing and scoring
        if not math.isfinite(value):
            return 0.0
        return value

    def to_json(self) -> str:
        """Serialize with the camelCase keys used on the wire."""
        return json.dumps(self.model_dump(by_alias=True), separators=(",", ":"))

    @classmethod
    def from_json(cls, raw: str) -> "FeatureVector":
        return cls.model_validate_json(raw)
